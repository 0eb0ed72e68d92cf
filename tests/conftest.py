"""Pytest configuration for repository test runs."""

from __future__ import annotations

import sys
from dataclasses import replace
from datetime import datetime, timezone
from pathlib import Path

import pytest


def pytest_sessionstart() -> None:
    """Add src directory to sys.path for test imports."""
    project_root = Path(__file__).resolve().parent.parent
    src_path = project_root / "src"
    if str(src_path) not in sys.path:
        sys.path.insert(0, str(src_path))


@pytest.fixture
def processed_at() -> datetime:
    """Fixed processing timestamp shared by reconciliation tests."""
    return datetime(2025, 11, 1, 8, 30, tzinfo=timezone.utc)


@pytest.fixture
def silverline_config(tmp_path, monkeypatch: pytest.MonkeyPatch):
    """Config rooted in a per-test temporary data directory."""
    from core.config import SilverlineConfig

    monkeypatch.delenv("SILVERLINE_MAX_WORKERS", raising=False)
    return replace(SilverlineConfig.from_env(), data_root=tmp_path / "data")
