"""Runtime - retry execution and observability."""

from .observability import configure_logging, get_logger
from .retry import RetryPolicy, retry

__all__ = ["RetryPolicy", "configure_logging", "get_logger", "retry"]
