"""Shared logging configuration using structlog.

Stdlib loggers (``logging.getLogger(__name__)``) and structlog loggers render
through one ``ProcessorFormatter``. Defaults come from ``QS_LOG_LEVEL``,
``QS_LOG_JSON`` and ``QS_LOG_FILE``; explicit arguments win.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Mapping

import structlog

from qs_common.config.env import parse_bool_env

_SHARED_PROCESSORS: list[structlog.types.Processor] = [
    structlog.contextvars.merge_contextvars,
    structlog.processors.add_log_level,
    structlog.processors.TimeStamper(fmt="iso", utc=True),
]


def _resolve_level(value: str | int | None, debug: bool) -> int:
    if debug:
        return logging.DEBUG
    if value is None:
        return logging.INFO
    if isinstance(value, int):
        return value
    if value.strip().isdigit():
        return int(value)
    return logging.getLevelNamesMapping().get(value.strip().upper(), logging.INFO)


def _build_formatter(as_json: bool) -> logging.Formatter:
    renderer: structlog.types.Processor = (
        structlog.processors.JSONRenderer() if as_json else structlog.dev.ConsoleRenderer()
    )
    return structlog.stdlib.ProcessorFormatter(
        processor=renderer, foreign_pre_chain=list(_SHARED_PROCESSORS)
    )


def _build_handlers(formatter: logging.Formatter, log_file: str | None) -> list[logging.Handler]:
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


def _configure_structlog() -> None:
    structlog.configure(
        processors=[*_SHARED_PROCESSORS, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def configure_logging(
    *,
    level: str | int | None = None,
    debug: bool = False,
    log_file: str | None = None,
    json: bool | None = None,
    force: bool = False,
    environ: Mapping[str, str] | None = None,
) -> None:
    """Install the shared formatter on the root logger.

    Existing root handlers are left alone unless ``force`` is set, so an
    embedding application keeps its own setup.
    """
    env = os.environ if environ is None else environ
    root_logger = logging.getLogger()
    if root_logger.handlers and not force:
        _configure_structlog()
        return

    as_json = parse_bool_env(env.get("QS_LOG_JSON")) if json is None else json
    target_file = env.get("QS_LOG_FILE") if log_file is None else log_file

    if force:
        root_logger.handlers.clear()
    root_logger.setLevel(_resolve_level(level or env.get("QS_LOG_LEVEL"), debug))
    for handler in _build_handlers(_build_formatter(bool(as_json)), target_file):
        root_logger.addHandler(handler)

    _configure_structlog()
