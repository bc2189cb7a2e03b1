from __future__ import annotations

from typing import Any, Dict, Mapping


class RefitError(Exception):
    """Base exception for refit."""

    context: Dict[str, Any]

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        if context is not None:
            # Store a shallow copy to avoid accidental mutation.
            self.context = dict(context)
        else:
            self.context = {}

    def to_json_error(self) -> Dict[str, Any]:
        """Return a JSON-serializable error payload."""
        return {
            "message": str(self),
            "code": self.__class__.__name__,
            "context": self.context,
        }


class DirectoryNotFoundError(RefitError, FileNotFoundError):
    """Raised when the root directory of a run does not exist."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        RefitError.__init__(self, message, context=context)
        FileNotFoundError.__init__(self, message)


class RuleSetError(RefitError, ValueError):
    """Raised when a rewrite rule set is missing or invalid."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        RefitError.__init__(self, message, context=context)
        ValueError.__init__(self, message)


class ConfigError(RefitError, ValueError):
    """Raised when configuration cannot be loaded or fails validation."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        RefitError.__init__(self, message, context=context)
        ValueError.__init__(self, message)


__all__ = [
    "RefitError",
    "DirectoryNotFoundError",
    "RuleSetError",
    "ConfigError",
]
