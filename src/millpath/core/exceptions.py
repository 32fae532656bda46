"""
Custom exceptions for millpath.

All millpath exceptions inherit from MillpathError for easy catching.
"""

from typing import Any


class MillpathError(Exception):
    """Base exception for all millpath errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} - Details: {self.details}"
        return self.message


class ConfigurationError(MillpathError):
    """Raised when configuration is invalid or missing."""

    pass


class InvalidSettingsError(ConfigurationError):
    """Raised when machining settings fail range validation."""

    def __init__(
        self,
        message: str,
        errors: list[str] | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.errors = list(errors or [])


class GeometryError(MillpathError):
    """Raised when mesh data is malformed."""

    pass


class GenerationCancelled(MillpathError):
    """Raised when toolpath generation is cancelled between layers."""

    def __init__(
        self,
        message: str,
        completed_layers: int = 0,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.completed_layers = completed_layers
