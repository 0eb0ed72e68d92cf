"""Shared JSONL serialization for silver record payloads.

This module centralizes silver record JSON serialization logic.
Output bytes depend only on record content, so identical inputs
always produce identical records files.
"""

from __future__ import annotations

import json
import typing
from dataclasses import fields
from datetime import date, datetime
from decimal import Decimal
from pathlib import Path
from typing import Any, Callable, Mapping

from core.types import (
    CustomerDemographic,
    CustomerLocation,
    CustomerProfile,
    EntityName,
    Product,
    ProductCategory,
    SalesLine,
    SilverRecord,
)

SILVER_RECORD_TYPES: Mapping[EntityName, type] = {
    "customer_profile": CustomerProfile,
    "product": Product,
    "sales_line": SalesLine,
    "customer_demographic": CustomerDemographic,
    "customer_location": CustomerLocation,
    "product_category": ProductCategory,
}


def silver_record_to_payload(record: SilverRecord) -> dict[str, object]:
    """Serialize a silver record into a JSON-safe payload.

    Args:
        record: Silver record instance.

    Returns:
        Dictionary payload with ISO dates and decimal strings.
    """
    return {field.name: _encode_value(getattr(record, field.name)) for field in fields(record)}


def silver_record_from_payload(entity: EntityName, payload: Mapping[str, Any]) -> SilverRecord:
    """Deserialize a JSON payload into the entity's silver record.

    Args:
        entity: Entity identifier.
        payload: Serialized record payload.

    Returns:
        Parsed silver record.

    Raises:
        ValueError: If a required field is missing or malformed.
    """
    record_type = SILVER_RECORD_TYPES[entity]
    type_hints = typing.get_type_hints(record_type)
    values: dict[str, object] = {}
    for field in fields(record_type):
        if field.name not in payload:
            raise ValueError(f"missing field '{field.name}' for {entity}")
        values[field.name] = _decode_value(payload[field.name], type_hints[field.name])
    record: SilverRecord = record_type(**values)
    return record


def render_records_jsonl(records: list[SilverRecord]) -> str:
    """Render silver records as JSONL text with sorted keys."""
    lines = [json.dumps(silver_record_to_payload(record), sort_keys=True) for record in records]
    return "".join(f"{line}\n" for line in lines)


def read_silver_records_jsonl(entity: EntityName, records_path: Path) -> list[SilverRecord]:
    """Read silver records from a JSONL file.

    Args:
        entity: Entity identifier.
        records_path: Input JSONL file path.

    Returns:
        Parsed records in file order.

    Raises:
        ValueError: If JSONL rows are invalid.
    """
    parsed_records: list[SilverRecord] = []
    for line_number, line in enumerate(records_path.read_text(encoding="utf-8").splitlines(), 1):
        if not line.strip():
            continue
        payload = _parse_payload_line(line, line_number)
        try:
            parsed_records.append(silver_record_from_payload(entity, payload))
        except ValueError as error:
            raise ValueError(f"Invalid record at line {line_number}: {error}") from error
    return parsed_records


def _encode_value(value: object) -> object:
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return str(value)
    return value


def _decode_value(value: object, type_hint: object) -> object:
    if value is None:
        return None
    decoder = _decoder_for(type_hint)
    return decoder(value)


def _decoder_for(type_hint: object) -> Callable[[Any], object]:
    """Pick a decoder for a field annotation, unwrapping Optional."""
    candidates = typing.get_args(type_hint) if typing.get_origin(type_hint) else (type_hint,)
    if datetime in candidates:
        return lambda value: datetime.fromisoformat(str(value))
    if date in candidates:
        return lambda value: date.fromisoformat(str(value))
    if Decimal in candidates:
        return lambda value: Decimal(str(value))
    if int in candidates:
        return int
    return str


def _parse_payload_line(line: str, line_number: int) -> dict[str, Any]:
    """Parse and validate one JSONL payload row.

    Args:
        line: Raw JSONL line.
        line_number: One-based line number.

    Returns:
        Parsed payload dictionary.

    Raises:
        ValueError: If JSON row is invalid.
    """
    try:
        payload = json.loads(line)
    except json.JSONDecodeError as error:
        raise ValueError(f"Invalid JSON at line {line_number}: {error.msg}") from error
    if not isinstance(payload, dict):
        raise ValueError(f"Invalid payload at line {line_number}: expected JSON object")
    return payload
