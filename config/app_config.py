"""
Unified Configuration System for the User Console

This module provides a centralized configuration system that consolidates all application settings,
supports environment-based overrides, and provides type-safe configuration access.
"""

from dataclasses import dataclass, field
from typing import Dict, Any, Optional, List
import streamlit as st
import os
from pathlib import Path


# Per-environment backend defaults
ENVIRONMENT_DEFAULTS: Dict[str, Dict[str, Any]] = {
    "development": {
        "base_url": "http://127.0.0.1:8000",
        "timeout_seconds": 10.0,
    },
    "test": {
        "base_url": "https://api-test.example.com",
        "timeout_seconds": 10.0,
    },
    "production": {
        "base_url": "https://api.example.com",
        "timeout_seconds": 15.0,
    },
}

DEFAULT_ENVIRONMENT = "development"


def get_environment() -> str:
    """Return the current environment name, falling back to development"""
    env = os.getenv("APP_ENV", DEFAULT_ENVIRONMENT).lower()
    if env not in ENVIRONMENT_DEFAULTS:
        return DEFAULT_ENVIRONMENT
    return env


@dataclass
class APIConfig:
    """Backend API configuration settings"""
    base_url: str = ENVIRONMENT_DEFAULTS[DEFAULT_ENVIRONMENT]["base_url"]
    timeout_seconds: float = ENVIRONMENT_DEFAULTS[DEFAULT_ENVIRONMENT]["timeout_seconds"]

    @classmethod
    def for_environment(cls, environment: str) -> 'APIConfig':
        """Build the default API config of an environment"""
        defaults = ENVIRONMENT_DEFAULTS.get(environment, ENVIRONMENT_DEFAULTS[DEFAULT_ENVIRONMENT])
        return cls(base_url=defaults["base_url"], timeout_seconds=defaults["timeout_seconds"])

    @classmethod
    def from_secrets(cls, environment: str) -> 'APIConfig':
        """Load API config from Streamlit secrets, with environment defaults"""
        config = cls.for_environment(environment)

        # In test environment, prefer environment variables
        if os.getenv("PYTEST_CURRENT_TEST") is not None:
            return config._apply_overrides(os.getenv("API_BASE_URL"), os.getenv("API_TIMEOUT"))

        try:
            return config._apply_overrides(
                st.secrets.get("API_BASE_URL", os.getenv("API_BASE_URL")),
                st.secrets.get("API_TIMEOUT", os.getenv("API_TIMEOUT"))
            )
        except Exception:
            # Fallback to environment variables if secrets not available
            return config._apply_overrides(os.getenv("API_BASE_URL"), os.getenv("API_TIMEOUT"))

    def _apply_overrides(self, base_url: Optional[str], timeout: Optional[Any]) -> 'APIConfig':
        if base_url:
            self.base_url = str(base_url)
        if timeout:
            self.timeout_seconds = float(timeout)
        return self


@dataclass
class AuthConfig:
    """Authentication and routing configuration"""
    password_min_length: int = 8
    login_route: str = "/auth/login"
    default_user_route: str = "/user/dashboard"
    token_key: str = "token"
    user_key: str = "user"


@dataclass
class PaginationConfig:
    """List and history table sizes"""
    user_list_page_size: int = 10
    notes_page_size: int = 20
    history_page_size: int = 10
    dashboard_history_size: int = 5
    default_sort_order: str = "desc"
    page_size_options: List[int] = field(default_factory=lambda: [10, 20, 50, 100])


@dataclass
class UIConfig:
    """User interface configuration"""
    app_title: str = "用户管理系统"
    page_icon: str = "👤"
    layout: str = "wide"
    locale: str = "zh-CN"
    # Base URL of this app, embedded in reset/verification e-mails
    public_url: str = field(default_factory=lambda: os.getenv("PUBLIC_URL", "http://localhost:8501"))


@dataclass
class LoggingConfig:
    """Logging and monitoring configuration"""
    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    enable_file_logging: bool = True
    log_file: str = "logs/app.log"


@dataclass
class AppConfig:
    """Main application configuration"""
    api: APIConfig = field(default_factory=APIConfig)
    auth: AuthConfig = field(default_factory=AuthConfig)
    pagination: PaginationConfig = field(default_factory=PaginationConfig)
    ui: UIConfig = field(default_factory=UIConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    # Environment settings
    environment: str = field(default_factory=get_environment)
    debug: bool = field(default_factory=lambda: os.getenv("DEBUG", "false").lower() == "true")

    @classmethod
    def load(cls) -> 'AppConfig':
        """Load the configuration of the current environment (APP_ENV)"""
        # Overrides live in config/environments; imported here to avoid a cycle
        from config.environments import get_environment_config
        return get_environment_config()

    def validate(self) -> List[str]:
        """Validate configuration and return list of errors"""
        errors = []

        if not self.api.base_url:
            errors.append("API base URL is required")
        elif not self.api.base_url.startswith(("http://", "https://")):
            errors.append(f"API base URL must be http(s): {self.api.base_url}")

        if self.api.timeout_seconds <= 0:
            errors.append("API timeout must be positive")

        if self.auth.password_min_length < 1:
            errors.append("Password minimum length must be at least 1")

        if self.logging.enable_file_logging:
            log_dir = Path(self.logging.log_file).parent
            if not log_dir.exists():
                log_dir.mkdir(parents=True, exist_ok=True)

        for name in ("user_list_page_size", "notes_page_size", "history_page_size"):
            if getattr(self.pagination, name) < 1:
                errors.append(f"Pagination '{name}' must be at least 1")

        return errors


# Global configuration instance
_config: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """Get the global configuration instance"""
    global _config
    if _config is None:
        _config = AppConfig.load()

        # Validate configuration
        errors = _config.validate()
        if errors:
            import warnings
            for error in errors:
                warnings.warn(f"Configuration error: {error}")

    return _config


def reload_config() -> AppConfig:
    """Reload configuration (useful for testing)"""
    global _config
    _config = None
    return get_config()
