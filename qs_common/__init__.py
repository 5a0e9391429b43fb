"""Shared helpers for qa-sweep."""

from qs_common.api import QSError, configure_logging

__all__ = ["configure_logging", "QSError"]
