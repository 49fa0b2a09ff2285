"""Configuration module."""

from src.config.configuration import (
    ApiConfig,
    AppConfig,
    ConfigurationError,
    DatabaseConfig,
    LoggingConfig,
    ServerConfig,
    get_config,
    load_config,
    reset_config,
)

__all__ = [
    "ApiConfig",
    "AppConfig",
    "ConfigurationError",
    "DatabaseConfig",
    "LoggingConfig",
    "ServerConfig",
    "get_config",
    "load_config",
    "reset_config",
]
