"""Base error definitions for native_stage packages."""

from typing import Any, Dict


class NativeStageError(Exception):
    """Base exception for all native_stage errors."""

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.message = message
        self.context: Dict[str, Any] = context


class ConfigurationError(NativeStageError):
    """Configuration is invalid or missing."""
    pass
