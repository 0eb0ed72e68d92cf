"""Shared argparse helpers for entity-scoped subcommands."""

from __future__ import annotations

from typing import Any

from core.types import ENTITY_NAMES


def add_entity_argument(parser: Any, required: bool = False) -> None:
    """Register the entity selector.

    Args:
        parser: Subcommand parser.
        required: Require exactly one entity instead of an optional repeatable one.
    """
    if required:
        parser.add_argument("--entity", required=True, choices=ENTITY_NAMES, help="Entity id")
        return
    parser.add_argument(
        "--entity",
        action="append",
        choices=ENTITY_NAMES,
        help="Entity id; repeat to select several, all entities when omitted",
    )
