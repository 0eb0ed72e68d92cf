"""Shared fixture path helpers for tests."""

from __future__ import annotations

import shutil
from pathlib import Path


def fixture_path(relative_path: str) -> Path:
    """Resolve a fixture path relative to tests/fixtures.

    Args:
        relative_path: Path under fixtures root.

    Returns:
        Absolute fixture path.
    """
    tests_root = Path(__file__).resolve().parent
    return tests_root / "fixtures" / relative_path


def bronze_source_dir() -> Path:
    """Return the directory holding all six raw extracts."""
    return fixture_path("bronze")


def bronze_source_manifest() -> Path:
    """Return the YAML source manifest naming all six raw extracts."""
    return fixture_path("bronze/sources.yaml")


def copy_bronze_sources(target_dir: Path) -> Path:
    """Copy the raw extracts into a writable directory.

    Args:
        target_dir: Destination directory, created when missing.

    Returns:
        The copied source directory.
    """
    copied_dir = target_dir / "bronze"
    shutil.copytree(bronze_source_dir(), copied_dir)
    return copied_dir
