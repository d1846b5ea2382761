"""Foundation - configuration and error types shared by the runtime."""

from .config import BackoffType, RetrycaseSettings, RetrySettings, clear_settings_cache, get_settings
from .errors import ConfigError, ConfigurationException, ErrorCode

__all__ = [
    "BackoffType", "RetrycaseSettings", "RetrySettings", "clear_settings_cache", "get_settings",
    "ConfigError", "ConfigurationException", "ErrorCode",
]
