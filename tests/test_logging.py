"""Logging configuration tests."""

from __future__ import annotations

import io
import logging
from pathlib import Path

import pytest

from codescribe.logging import LOG_LEVEL_ENV, configure_logging, get_logger, resolve_level


def test_stage_loggers_share_hierarchy() -> None:
    assert get_logger("filter").name == "codescribe.filter"
    assert get_logger().name == "codescribe"


def test_level_resolution(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(LOG_LEVEL_ENV, raising=False)
    assert resolve_level() == logging.INFO
    assert resolve_level(verbose=True) == logging.DEBUG

    monkeypatch.setenv(LOG_LEVEL_ENV, "warning")
    assert resolve_level() == logging.WARNING

    monkeypatch.setenv(LOG_LEVEL_ENV, "chatty")
    assert resolve_level() == logging.INFO


def test_configure_logging_replaces_handlers(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(LOG_LEVEL_ENV, raising=False)
    stream = io.StringIO()
    log_file = tmp_path / "logs" / "codescribe.log"

    configure_logging(stream=stream)
    logger = configure_logging(verbose=True, log_file=log_file, stream=stream)
    get_logger("ingest").debug("Skipping %s", "node_modules")
    for handler in logger.handlers:
        handler.flush()

    assert len(logger.handlers) == 2
    assert stream.getvalue() == "[codescribe] DEBUG Skipping node_modules\n"
    assert "codescribe.ingest: Skipping node_modules" in log_file.read_text(encoding="utf-8")

    configure_logging(stream=stream)
    assert len(logging.getLogger("codescribe").handlers) == 1
