"""Error handling for retrycase.

- ErrorCode: Configuration error codes
- ConfigError/ConfigurationException: Structured errors and exceptions
"""

from .errors import ConfigError, ConfigurationException, ErrorCode

__all__ = ["ConfigError", "ConfigurationException", "ErrorCode"]
