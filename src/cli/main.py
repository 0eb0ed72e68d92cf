"""Silverline CLI entry points.
This module exposes commands for reconciliation and silver output operations.
It maps argparse commands onto SDK calls.
"""

from __future__ import annotations

import argparse
import sys
from dataclasses import replace
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Sequence, cast

from cli.entity_arguments import add_entity_argument
from cli.quality_commands import (
    add_profile_command,
    add_verify_command,
    run_profile_command,
    run_verify_command,
)
from core.config import SilverlineConfig
from core.errors import SilverlineError
from core.types import EntityName, ReconcileOptions
from store.record_payload import render_records_jsonl
from store.silver_sdk import SilverlineClient


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(
        prog="silverline",
        description="Silverline bronze to silver reconciliation CLI",
    )
    parser.add_argument("--data-root", help="Override SILVERLINE_DATA_ROOT for this command")
    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_reconcile_command(subparsers)
    _add_versions_command(subparsers)
    _add_show_command(subparsers)
    add_profile_command(subparsers)
    add_verify_command(subparsers)
    _add_export_command(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the Silverline CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        client = _build_client(args.data_root)
        return _dispatch_command(client, args)
    except SilverlineError as error:
        print(f"error={error}", file=sys.stderr)
        return 1


def _dispatch_command(client: SilverlineClient, args: argparse.Namespace) -> int:
    if args.command == "reconcile":
        return _run_reconcile_command(client, args)
    if args.command == "versions":
        return _run_versions_command(client, args)
    if args.command == "show":
        return _run_show_command(client, args)
    if args.command == "profile":
        return run_profile_command(client, args)
    if args.command == "verify":
        return run_verify_command(client, args)
    if args.command == "export":
        return _run_export_command(client, args)
    print(f"Unsupported command: {args.command}", file=sys.stderr)
    return 2


def _build_client(data_root: str | None) -> SilverlineClient:
    """Build SDK client with optional data-root override.

    Args:
        data_root: Optional override path.

    Returns:
        Configured SDK client.
    """
    config = SilverlineConfig.from_env()
    if data_root:
        config = replace(config, data_root=Path(data_root).expanduser().resolve())
    return SilverlineClient(config)


def _run_reconcile_command(client: SilverlineClient, args: argparse.Namespace) -> int:
    """Handle reconcile command.

    Args:
        client: SDK client.
        args: Parsed CLI args.

    Returns:
        Exit code, 1 when any entity failed.
    """
    options = ReconcileOptions(
        source_uri=args.source,
        entities=tuple(cast(list[EntityName], args.entity or [])),
        processed_at=args.processed_at,
    )
    results = client.reconcile(options)
    for result in results:
        print(
            f"{result.entity}\t"
            f"{result.status}\t"
            f"{result.version_id or '-'}\t"
            f"{result.output_count}"
        )
        if result.error:
            print(f"{result.entity}: {result.error}", file=sys.stderr)
    return 0 if all(result.status == "succeeded" for result in results) else 1


def _run_versions_command(client: SilverlineClient, args: argparse.Namespace) -> int:
    """Handle versions command.

    Args:
        client: SDK client.
        args: Parsed CLI args.

    Returns:
        Exit code.
    """
    entity_output = client.entity(args.entity)
    for manifest in entity_output.list_versions():
        print(
            f"{manifest.version_id}\t"
            f"{manifest.record_count}\t"
            f"{manifest.created_at.isoformat()}\t"
            f"{manifest.processed_at.isoformat()}"
        )
    return 0


def _run_show_command(client: SilverlineClient, args: argparse.Namespace) -> int:
    """Handle show command.

    Args:
        client: SDK client.
        args: Parsed CLI args.

    Returns:
        Exit code.
    """
    _, records = client.entity(args.entity).load_records(args.version_id)
    if args.limit is not None:
        records = records[: args.limit]
    sys.stdout.write(render_records_jsonl(records))
    return 0


def _run_export_command(client: SilverlineClient, args: argparse.Namespace) -> int:
    """Handle export command.

    Args:
        client: SDK client.
        args: Parsed CLI args.

    Returns:
        Exit code.
    """
    version_id = client.entity(args.entity).export(args.output_uri, args.version_id)
    print(f"exported={version_id}")
    print(f"output_uri={args.output_uri}")
    return 0


def _parse_processed_at(value: str) -> datetime:
    """Parse an ISO timestamp; naive values are taken as UTC."""
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError as error:
        raise argparse.ArgumentTypeError(
            f"invalid ISO-8601 timestamp '{value}'"
        ) from error
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _non_negative_int(value: str) -> int:
    try:
        parsed = int(value)
    except ValueError as error:
        raise argparse.ArgumentTypeError(f"invalid integer '{value}'") from error
    if parsed < 0:
        raise argparse.ArgumentTypeError("limit must be zero or greater")
    return parsed


def _add_reconcile_command(subparsers: Any) -> None:
    """Register reconcile subcommand."""
    parser = subparsers.add_parser(
        "reconcile",
        help="Rebuild silver outputs from raw extracts",
    )
    parser.add_argument("source", help="Raw extract directory or .yaml source manifest")
    add_entity_argument(parser)
    parser.add_argument(
        "--processed-at",
        type=_parse_processed_at,
        help="Fixed ISO-8601 processing timestamp, current UTC time when omitted",
    )


def _add_versions_command(subparsers: Any) -> None:
    """Register versions subcommand."""
    parser = subparsers.add_parser("versions", help="List published output versions")
    add_entity_argument(parser, required=True)


def _add_show_command(subparsers: Any) -> None:
    """Register show subcommand."""
    parser = subparsers.add_parser("show", help="Print output records as JSON lines")
    add_entity_argument(parser, required=True)
    parser.add_argument("--version-id", help="Optional specific version id")
    parser.add_argument("--limit", type=_non_negative_int, help="Maximum records to print")


def _add_export_command(subparsers: Any) -> None:
    """Register export subcommand."""
    parser = subparsers.add_parser("export", help="Export an output version to S3")
    add_entity_argument(parser, required=True)
    parser.add_argument("--output-uri", required=True, help="s3://bucket/prefix destination")
    parser.add_argument("--version-id", help="Optional specific version id, active when omitted")
