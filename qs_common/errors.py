"""Shared error taxonomy for qa-sweep."""

from __future__ import annotations

from typing import Any, Mapping


def _normalize_context_value(value: Any) -> Any:
    if isinstance(value, Mapping):
        return normalize_context(value)
    if isinstance(value, (list, tuple)):
        return [_normalize_context_value(item) for item in value]
    if isinstance(value, (str, int, float, bool)) or value is None:
        return value
    return str(value)


def normalize_context(context: Mapping[str, Any]) -> dict[str, Any]:
    """Return a JSON-friendly copy of an error context mapping."""
    return {key: _normalize_context_value(val) for key, val in context.items()}


class QSError(Exception):
    """Base error type for typed failure handling."""

    def __init__(
        self,
        message: str,
        *,
        context: Mapping[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.context = normalize_context(context or {})
        if cause is not None:
            self.__cause__ = cause


class ConfigurationError(QSError):
    """Failure due to invalid suite configuration."""


class PrerequisiteError(QSError):
    """A required external tool is missing; raised before any run starts."""


class InvocationError(QSError):
    """The external benchmark executor failed or could not be launched."""

    def __init__(
        self,
        message: str,
        *,
        returncode: int | None = None,
        context: Mapping[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        merged = dict(context or {})
        merged.setdefault("returncode", returncode)
        super().__init__(message, context=merged, cause=cause)
        self.returncode = returncode

    @property
    def exit_code(self) -> int:
        """Process exit status to report for this failure (never zero)."""
        if self.returncode is None or self.returncode == 0:
            return 1
        if self.returncode < 0:
            # Killed by a signal; mirror the shell convention.
            return 128 + abs(self.returncode)
        return self.returncode


class RunDirectoryCollisionError(QSError):
    """A run directory for a freshly issued tag already exists."""

