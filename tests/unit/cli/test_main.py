"""Unit tests for CLI command handling."""

from __future__ import annotations

import json

import pytest

from cli.main import main
from fixture_paths import bronze_source_dir, bronze_source_manifest

_PROCESSED_AT = "2025-11-01T08:30:00+00:00"


def _reconcile(data_root: str, *extra: str) -> int:
    return main(
        [
            "--data-root",
            data_root,
            "reconcile",
            str(bronze_source_dir()),
            "--processed-at",
            _PROCESSED_AT,
            *extra,
        ]
    )


def test_cli_reconcile_prints_one_line_per_entity(tmp_path, capsys) -> None:
    """CLI reconcile should print a status line for every entity."""
    exit_code = _reconcile(str(tmp_path))
    lines = capsys.readouterr().out.strip().splitlines()

    assert exit_code == 0 and len(lines) == 6


def test_cli_reconcile_filters_entities(tmp_path, capsys) -> None:
    """Repeated --entity flags should limit the run."""
    exit_code = _reconcile(
        str(tmp_path), "--entity", "product", "--entity", "customer_location"
    )
    entities = [line.split("\t")[0] for line in capsys.readouterr().out.strip().splitlines()]

    assert exit_code == 0 and entities == ["product", "customer_location"]


def test_cli_reconcile_keeps_log_events_off_stdout(tmp_path, capsys) -> None:
    """Log events should go to stderr so stdout stays one tab-separated row per entity."""
    _reconcile(str(tmp_path), "--entity", "product")
    captured = capsys.readouterr()

    assert (
        [len(line.split("\t")) for line in captured.out.splitlines()],
        "silver_output_published" in captured.err,
    ) == ([4], True)


def test_cli_reconcile_exits_non_zero_on_failure(tmp_path, capsys) -> None:
    """A failed entity should make reconcile exit with status one."""
    manifest_path = tmp_path / "sources.yaml"
    manifest_path.write_text(
        "version: 1\nsources:\n  product: missing/prd_info.csv\n",
        encoding="utf-8",
    )

    exit_code = main(
        ["--data-root", str(tmp_path / "data"), "reconcile", str(manifest_path)]
    )
    output = capsys.readouterr().out

    assert exit_code == 1 and "failed" in output


def test_cli_reports_invalid_manifest(tmp_path, capsys) -> None:
    """Invalid source manifests should be reported as errors."""
    manifest_path = tmp_path / "sources.yaml"
    manifest_path.write_text("version: 1\nsources:\n  gold: x.csv\n", encoding="utf-8")

    exit_code = main(["--data-root", str(tmp_path / "data"), "reconcile", str(manifest_path)])

    assert exit_code == 1 and "error=" in capsys.readouterr().err


def test_cli_versions_lists_published_versions(tmp_path, capsys) -> None:
    """CLI versions should list each published version of an entity."""
    _reconcile(str(tmp_path), "--entity", "product_category")
    _reconcile(str(tmp_path), "--entity", "product_category")
    capsys.readouterr()

    exit_code = main(["--data-root", str(tmp_path), "versions", "--entity", "product_category"])
    lines = capsys.readouterr().out.strip().splitlines()

    assert exit_code == 0 and len(lines) == 2


def test_cli_show_prints_jsonl_records(tmp_path, capsys) -> None:
    """CLI show should print active records as JSON lines."""
    _reconcile(str(tmp_path), "--entity", "customer_location")
    capsys.readouterr()

    exit_code = main(
        ["--data-root", str(tmp_path), "show", "--entity", "customer_location", "--limit", "2"]
    )
    rows = [json.loads(line) for line in capsys.readouterr().out.strip().splitlines()]

    assert exit_code == 0 and [row["cid"] for row in rows] == ["AW-00011000", "AW-00011001"]


def test_cli_show_reports_missing_output(tmp_path, capsys) -> None:
    """Showing an entity that was never reconciled should fail cleanly."""
    exit_code = main(["--data-root", str(tmp_path), "show", "--entity", "sales_line"])

    assert exit_code == 1 and "Run reconcile" in capsys.readouterr().err


def test_cli_rejects_unknown_entity(tmp_path) -> None:
    """Unknown entity choices should be rejected by argparse."""
    with pytest.raises(SystemExit):
        main(["--data-root", str(tmp_path), "versions", "--entity", "gold_customer"])


def test_cli_reconcile_accepts_source_manifest(tmp_path, capsys) -> None:
    """Reconcile should accept a YAML source manifest."""
    exit_code = main(
        [
            "--data-root",
            str(tmp_path),
            "reconcile",
            str(bronze_source_manifest()),
            "--entity",
            "sales_line",
        ]
    )
    line = capsys.readouterr().out.strip()

    assert exit_code == 0 and line.endswith("\t6")
