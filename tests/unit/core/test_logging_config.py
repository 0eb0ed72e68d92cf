"""Unit tests for structured logging configuration."""

from __future__ import annotations

import json

import pytest

from core.logging_config import get_logger


def test_logger_writes_events_to_stderr(capsys: pytest.CaptureFixture[str]) -> None:
    """Log events should never mix into stdout command output."""
    get_logger("tests.logging").info("entity_reconciled", entity="product")

    captured = capsys.readouterr()

    assert (captured.out, json.loads(captured.err)["event"]) == ("", "entity_reconciled")


def test_logger_renders_exception_tracebacks(capsys: pytest.CaptureFixture[str]) -> None:
    """Exception events should carry the rendered traceback."""
    try:
        raise RuntimeError("boom")
    except RuntimeError:
        get_logger("tests.logging").exception("entity_failed", entity="sales_line")

    payload = json.loads(capsys.readouterr().err)

    assert "RuntimeError: boom" in payload["exception"]
