"""Data quality command wiring for Silverline CLI."""

from __future__ import annotations

import argparse
from typing import Any, cast

from cli.entity_arguments import add_entity_argument
from core.quality_checks import render_raw_batch_profile, render_silver_report
from core.types import EntityName
from store.silver_sdk import SilverlineClient


def add_profile_command(subparsers: Any) -> None:
    """Register profile subcommand."""
    parser = subparsers.add_parser(
        "profile",
        help="Profile raw extract quality without publishing outputs",
    )
    parser.add_argument("source", help="Raw extract directory or .yaml source manifest")
    add_entity_argument(parser)


def add_verify_command(subparsers: Any) -> None:
    """Register verify subcommand."""
    parser = subparsers.add_parser(
        "verify",
        help="Check active silver outputs against reconciliation guarantees",
    )
    add_entity_argument(parser)


def run_profile_command(client: SilverlineClient, args: argparse.Namespace) -> int:
    """Profile raw batches and print one report block per entity."""
    entities = cast(list[EntityName], args.entity or [])
    profiles = client.profile(args.source, entities)
    print("\n\n".join(render_raw_batch_profile(profile) for profile in profiles))
    return 0


def run_verify_command(client: SilverlineClient, args: argparse.Namespace) -> int:
    """Verify active outputs and print check reports."""
    entities = cast(list[EntityName], args.entity or [])
    reports = client.verify(entities)
    print("\n\n".join(render_silver_report(report) for report in reports))
    return 0 if all(report.failed_count == 0 for report in reports) else 1
