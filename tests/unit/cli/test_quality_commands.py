"""Unit tests for profile and verify CLI commands."""

from __future__ import annotations

import json

from cli.main import main
from fixture_paths import bronze_source_dir


def test_cli_profile_prints_quality_summary(tmp_path, capsys) -> None:
    """Profile should print key statistics of a raw extract."""
    exit_code = main(
        [
            "--data-root",
            str(tmp_path),
            "profile",
            str(bronze_source_dir()),
            "--entity",
            "customer_profile",
        ]
    )
    output = capsys.readouterr().out

    assert exit_code == 0 and "duplicate_records=2" in output


def test_cli_verify_passes_reconciled_outputs(tmp_path, capsys) -> None:
    """Verify should succeed on freshly reconciled outputs."""
    main(["--data-root", str(tmp_path), "reconcile", str(bronze_source_dir())])
    capsys.readouterr()

    exit_code = main(["--data-root", str(tmp_path), "verify"])
    output = capsys.readouterr().out

    assert exit_code == 0 and "failed=0" in output


def test_cli_verify_fails_on_tampered_output(tmp_path, capsys) -> None:
    """Verify should fail when a records file holds non-canonical values."""
    main(
        [
            "--data-root",
            str(tmp_path),
            "reconcile",
            str(bronze_source_dir()),
            "--entity",
            "customer_demographic",
        ]
    )
    records_path = next((tmp_path / "silver" / "customer_demographic").rglob("records.jsonl"))
    rows = [json.loads(line) for line in records_path.read_text(encoding="utf-8").splitlines()]
    rows[0]["gen"] = "M"
    records_path.write_text(
        "".join(json.dumps(row, sort_keys=True) + "\n" for row in rows), encoding="utf-8"
    )
    capsys.readouterr()

    exit_code = main(
        ["--data-root", str(tmp_path), "verify", "--entity", "customer_demographic"]
    )

    assert exit_code == 1 and "[FAILED] S002" in capsys.readouterr().out
