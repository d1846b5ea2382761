"""Configuration errors.

The retry executor never introduces an error type of its own: it re-raises
whatever the operation raised. Errors here cover the one thing that can go
wrong around it, resolving a policy from configuration.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Annotated, Self

from pydantic import BaseModel, ConfigDict, Field


class ErrorCode(StrEnum):
    """Machine-readable configuration error codes."""
    UNKNOWN_STRATEGY = "UNKNOWN_STRATEGY"
    INVALID_SETTING = "INVALID_SETTING"


class ConfigError(BaseModel):
    """Structured description of a configuration failure.

    Attributes:
        setting: Name of the offending setting (e.g. "default_strategy")
        message: Human-readable error message
        code: Machine-readable error classification
    """

    model_config = ConfigDict(
        frozen=True,
        str_strip_whitespace=True,
        json_schema_extra={
            "title": "Configuration Error",
            "examples": [{
                "setting": "default_strategy",
                "message": "Unknown backoff strategy 'quadratic'",
                "code": "UNKNOWN_STRATEGY",
            }],
        },
    )

    setting: Annotated[str, Field(min_length=1, description="Setting that failed to resolve")]
    message: Annotated[str, Field(min_length=1, description="Human-readable error message")]
    code: ErrorCode = Field(default=ErrorCode.INVALID_SETTING, description="Error classification")

    def render(self) -> str:
        return f"[{self.code}] {self.setting}: {self.message}"

    __str__ = render


class ConfigurationException(Exception):
    """Exception wrapping a ConfigError for raising.

    Raised at startup while resolving settings. Not a retryable condition.
    """

    __slots__ = ("error",)

    def __init__(self, error: ConfigError) -> None:
        self.error = error
        super().__init__(error.render())

    @classmethod
    def create(cls, setting: str, message: str, code: ErrorCode = ErrorCode.INVALID_SETTING) -> Self:
        return cls(ConfigError(setting=setting, message=message, code=code))

    @property
    def code(self) -> ErrorCode:
        return self.error.code
