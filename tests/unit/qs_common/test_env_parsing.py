"""Tests for environment parsing helpers."""

import logging

import pytest

from qs_common.config import parse_bool_env, parse_int_env, parse_list_env
from qs_common.logging import configure_logging


pytestmark = pytest.mark.unit_common


def test_parse_list_env_accepts_spaces_and_commas() -> None:
    assert parse_list_env("5 10") == ["5", "10"]
    assert parse_list_env(" 5,10 , 20 ") == ["5", "10", "20"]


def test_parse_list_env_distinguishes_empty_from_unset() -> None:
    assert parse_list_env("") == []
    assert parse_list_env(None) is None


def test_parse_scalars() -> None:
    assert parse_bool_env("Yes") is True
    assert parse_bool_env("0") is False
    assert parse_bool_env(None) is None
    assert parse_int_env("42") == 42
    assert parse_int_env("forty") is None


def test_configure_logging_honours_env_level(monkeypatch: pytest.MonkeyPatch) -> None:
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    monkeypatch.setenv("QS_LOG_LEVEL", "warning")
    try:
        configure_logging(force=True)
        assert root.level == logging.WARNING
        assert len(root.handlers) == 1
    finally:
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)


def test_configure_logging_reads_explicit_environ(tmp_path) -> None:
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    log_file = tmp_path / "qs.log"
    try:
        configure_logging(
            force=True,
            environ={"QS_LOG_LEVEL": "debug", "QS_LOG_JSON": "1", "QS_LOG_FILE": str(log_file)},
        )
        assert root.level == logging.DEBUG
        assert [type(h) for h in root.handlers] == [logging.StreamHandler, logging.FileHandler]
        logging.getLogger("qs.test").info("hello")
        root.handlers[1].flush()
        assert '"event": "hello"' in log_file.read_text()
    finally:
        for handler in root.handlers:
            if handler not in saved_handlers:
                handler.close()
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)
