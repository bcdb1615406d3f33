"""
Test (staging) environment configuration overrides
"""

from dataclasses import dataclass
from config.app_config import AppConfig, APIConfig


@dataclass
class TestingConfig(AppConfig):
    """Test environment configuration"""

    __test__ = False  # not a pytest test class
    
    def __post_init__(self):
        
        self.environment = "test"
        self.debug = True
        self.api = APIConfig.from_secrets(self.environment)
        
        self.logging.level = "DEBUG"
        self.logging.enable_file_logging = True
        self.logging.log_file = "logs/test-app.log"
        
        self.ui.app_title = "🧪 用户管理系统 (TEST)"


def get_testing_config() -> TestingConfig:
    """Get test-environment configuration"""
    return TestingConfig()
