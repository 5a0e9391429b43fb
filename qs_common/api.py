"""Public API surface for qs_common."""

from qs_common.config import parse_bool_env, parse_int_env, parse_list_env
from qs_common.errors import (
    ConfigurationError,
    InvocationError,
    PrerequisiteError,
    QSError,
    RunDirectoryCollisionError,
)
from qs_common.logging import configure_logging

__all__ = [
    "ConfigurationError",
    "InvocationError",
    "PrerequisiteError",
    "QSError",
    "RunDirectoryCollisionError",
    "configure_logging",
    "parse_bool_env",
    "parse_int_env",
    "parse_list_env",
]
