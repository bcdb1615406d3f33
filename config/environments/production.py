"""
Production environment configuration overrides
"""

from dataclasses import dataclass
from config.app_config import AppConfig, APIConfig


@dataclass
class ProductionConfig(AppConfig):
    """Production environment configuration"""
    
    def __post_init__(self):
        
        # Production-specific overrides
        self.environment = "production"
        self.debug = False
        self.api = APIConfig.from_secrets(self.environment)
        
        # Production logging - warnings and errors only
        self.logging.level = "WARNING"
        self.logging.enable_file_logging = True
        self.logging.log_file = "logs/prod-app.log"
        
        # Production UI - clean and professional
        self.ui.app_title = "👤 用户管理系统"


def get_production_config() -> ProductionConfig:
    """Get production-specific configuration"""
    return ProductionConfig()
