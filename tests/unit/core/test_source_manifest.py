"""Unit tests for YAML source manifest parsing."""

from __future__ import annotations

from pathlib import Path

import pytest

from core.errors import SilverlineSourceManifestError
from core.source_manifest import load_source_manifest
from fixture_paths import bronze_source_manifest


def _write_manifest(tmp_path: Path, content: str) -> str:
    manifest_path = tmp_path / "sources.yaml"
    manifest_path.write_text(content, encoding="utf-8")
    return str(manifest_path)


def test_load_source_manifest_resolves_relative_paths() -> None:
    """Relative extract paths should resolve against the manifest directory."""
    manifest = load_source_manifest(str(bronze_source_manifest()))

    assert manifest.sources["customer_profile"] == (
        bronze_source_manifest().parent / "source_crm" / "cust_info.csv"
    ).resolve()


def test_load_source_manifest_reads_all_entities() -> None:
    """The fixture manifest should name all six entities."""
    manifest = load_source_manifest(str(bronze_source_manifest()))

    assert len(manifest.sources) == 6


def test_load_source_manifest_raises_for_missing_file(tmp_path: Path) -> None:
    """A missing manifest file should raise a manifest error."""
    with pytest.raises(SilverlineSourceManifestError):
        load_source_manifest(str(tmp_path / "absent.yaml"))


def test_load_source_manifest_raises_for_unknown_entity(tmp_path: Path) -> None:
    """Unknown entity names should be rejected."""
    manifest_path = _write_manifest(
        tmp_path,
        "version: 1\nsources:\n  gold_customer: cust.csv\n",
    )

    with pytest.raises(SilverlineSourceManifestError):
        load_source_manifest(manifest_path)


def test_load_source_manifest_raises_for_unknown_root_field(tmp_path: Path) -> None:
    """Unknown root fields should be rejected."""
    manifest_path = _write_manifest(
        tmp_path,
        "version: 1\nsources:\n  product: prd.csv\nowner: data-team\n",
    )

    with pytest.raises(SilverlineSourceManifestError):
        load_source_manifest(manifest_path)


def test_load_source_manifest_raises_for_unsupported_version(tmp_path: Path) -> None:
    """Only the current manifest version should be accepted."""
    manifest_path = _write_manifest(tmp_path, "version: 2\nsources:\n  product: prd.csv\n")

    with pytest.raises(SilverlineSourceManifestError):
        load_source_manifest(manifest_path)


def test_load_source_manifest_raises_for_invalid_yaml(tmp_path: Path) -> None:
    """Malformed YAML should raise a manifest error."""
    manifest_path = _write_manifest(tmp_path, "version: [1\n")

    with pytest.raises(SilverlineSourceManifestError):
        load_source_manifest(manifest_path)


def test_load_source_manifest_raises_for_blank_path(tmp_path: Path) -> None:
    """Entity entries should require a non-empty path."""
    manifest_path = _write_manifest(tmp_path, "version: 1\nsources:\n  product: '  '\n")

    with pytest.raises(SilverlineSourceManifestError):
        load_source_manifest(manifest_path)
