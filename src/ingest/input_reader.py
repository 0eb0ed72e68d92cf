"""Raw batch readers for reconciliation.

This module locates the raw CSV extract of each entity and parses it
into typed bronze records. Empty cells and typed cells that cannot be
parsed become nulls; only structural faults make a batch unreadable.
"""

from __future__ import annotations

import csv
from collections import Counter
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Callable, Mapping, Sequence

from core.constants import (
    CSV_ENCODING,
    MONEY_QUANTUM,
    RAW_DATE_FORMAT,
    SOURCE_MANIFEST_SUFFIXES,
)
from core.errors import SilverlineIngestError
from core.logging_config import get_logger
from core.source_manifest import load_source_manifest
from core.types import (
    EntityName,
    RawCustomerDemographic,
    RawCustomerLocation,
    RawCustomerProfile,
    RawProduct,
    RawProductCategory,
    RawRecord,
    RawSalesLine,
)

CellParser = Callable[[str], object]

_LOGGER = get_logger(__name__)
_MONEY_QUANTUM = Decimal(MONEY_QUANTUM)


@dataclass(frozen=True)
class RawSchema:
    """Fixed raw schema of one entity extract.

    Attributes:
        record_type: Bronze record class built from each row.
        columns: Ordered ``(field, parser)`` pairs.
        default_file_name: Extract file name in a source directory.
    """

    record_type: type
    columns: tuple[tuple[str, CellParser], ...]
    default_file_name: str


@dataclass(frozen=True)
class RawBatch:
    """Raw records of one entity in extract order."""

    entity: EntityName
    source_uri: str
    records: tuple[RawRecord, ...]


def _text(value: str) -> str:
    return value


def _integer(value: str) -> int:
    return int(value.strip())


def _decimal(value: str) -> Decimal:
    try:
        parsed = Decimal(value.strip())
    except InvalidOperation as error:
        raise ValueError(f"invalid decimal literal '{value}'") from error
    if not parsed.is_finite():
        raise ValueError(f"non-finite decimal literal '{value}'")
    try:
        parsed.quantize(_MONEY_QUANTUM)
    except InvalidOperation as error:
        raise ValueError(f"decimal literal '{value}' is out of range") from error
    return parsed


def _date(value: str) -> date:
    return datetime.strptime(value.strip(), RAW_DATE_FORMAT).date()


RAW_SCHEMAS: Mapping[EntityName, RawSchema] = {
    "customer_profile": RawSchema(
        record_type=RawCustomerProfile,
        columns=(
            ("cst_id", _integer),
            ("cst_key", _text),
            ("cst_firstname", _text),
            ("cst_lastname", _text),
            ("cst_marital_status", _text),
            ("cst_gndr", _text),
            ("cst_create_date", _date),
        ),
        default_file_name="cust_info.csv",
    ),
    "product": RawSchema(
        record_type=RawProduct,
        columns=(
            ("prd_id", _integer),
            ("prd_key", _text),
            ("prd_nm", _text),
            ("prd_cost", _decimal),
            ("prd_line", _text),
            ("prd_start_dt", _date),
            ("prd_end_dt", _date),
        ),
        default_file_name="prd_info.csv",
    ),
    "sales_line": RawSchema(
        record_type=RawSalesLine,
        columns=(
            ("sls_ord_num", _text),
            ("sls_prd_key", _text),
            ("sls_cust_id", _integer),
            ("sls_order_dt", _integer),
            ("sls_ship_dt", _integer),
            ("sls_due_dt", _integer),
            ("sls_sales", _decimal),
            ("sls_quantity", _integer),
            ("sls_price", _decimal),
        ),
        default_file_name="sales_details.csv",
    ),
    "customer_demographic": RawSchema(
        record_type=RawCustomerDemographic,
        columns=(("cid", _text), ("bdate", _date), ("gen", _text)),
        default_file_name="CUST_AZ12.csv",
    ),
    "customer_location": RawSchema(
        record_type=RawCustomerLocation,
        columns=(("cid", _text), ("cntry", _text)),
        default_file_name="LOC_A101.csv",
    ),
    "product_category": RawSchema(
        record_type=RawProductCategory,
        columns=(
            ("id", _text),
            ("cat", _text),
            ("subcat", _text),
            ("maintenance", _text),
        ),
        default_file_name="PX_CAT_G1V2.csv",
    ),
}


def resolve_source_paths(
    source_uri: str,
    entities: Sequence[EntityName],
) -> dict[EntityName, Path | None]:
    """Resolve the raw extract path of each requested entity.

    Args:
        source_uri: Source directory or YAML source manifest path.
        entities: Entities to resolve.

    Returns:
        Extract path per entity, None when a manifest omits the entity.
        Paths may not exist; the reader reports missing files so one
        absent extract only fails its own entity.

    Raises:
        SilverlineIngestError: If the source location itself is missing.
        SilverlineSourceManifestError: If a manifest is invalid.
    """
    source_path = Path(source_uri).expanduser()
    if source_path.suffix.lower() in SOURCE_MANIFEST_SUFFIXES:
        manifest = load_source_manifest(str(source_path))
        return {entity: manifest.sources.get(entity) for entity in entities}
    if not source_path.is_dir():
        raise SilverlineIngestError(
            f"Failed to read raw sources at {source_path}: expected a directory "
            "or a .yaml source manifest."
        )
    available = _index_files(source_path)
    return {
        entity: available.get(
            RAW_SCHEMAS[entity].default_file_name.lower(),
            source_path / RAW_SCHEMAS[entity].default_file_name,
        )
        for entity in entities
    }


def read_raw_batch(entity: EntityName, source_path: Path | None) -> RawBatch:
    """Read one raw CSV extract into typed records.

    Args:
        entity: Entity identifier.
        source_path: CSV extract path, None when no extract is configured.

    Returns:
        Raw batch in extract order.

    Raises:
        SilverlineIngestError: If the file is missing, unreadable, or lacks
            schema columns.
    """
    schema = RAW_SCHEMAS[entity]
    if source_path is None:
        raise SilverlineIngestError(
            f"No raw extract configured for {entity}. Add it to the source manifest."
        )
    if not source_path.is_file():
        raise SilverlineIngestError(
            f"Failed to read raw batch for {entity} at {source_path}: file does not exist. "
            "Provide the extract or remove the entity from the run."
        )
    try:
        with source_path.open("r", encoding=CSV_ENCODING, newline="") as handle:
            reader = csv.reader(handle)
            header = next(reader, None)
            if header is None:
                raise SilverlineIngestError(
                    f"Failed to read raw batch for {entity} at {source_path}: missing header row."
                )
            positions = _column_positions(entity, source_path, header, schema)
            unparseable_cells: Counter[str] = Counter()
            records = [
                _build_record(row, positions, schema, unparseable_cells)
                for row in reader
                if any(cell.strip() for cell in row)
            ]
    except (OSError, UnicodeDecodeError, csv.Error) as error:
        raise SilverlineIngestError(
            f"Failed to read raw batch for {entity} at {source_path}: {error}."
        ) from error
    if unparseable_cells:
        _LOGGER.warning(
            "raw_cells_nulled",
            entity=entity,
            source_uri=str(source_path),
            fields=dict(sorted(unparseable_cells.items())),
        )
    return RawBatch(entity=entity, source_uri=str(source_path), records=tuple(records))


def _column_positions(
    entity: EntityName,
    source_path: Path,
    header: Sequence[str],
    schema: RawSchema,
) -> dict[str, int]:
    normalized_header = [column.strip().lower() for column in header]
    positions: dict[str, int] = {}
    missing_columns: list[str] = []
    for field_name, _ in schema.columns:
        if field_name in normalized_header:
            positions[field_name] = normalized_header.index(field_name)
        else:
            missing_columns.append(field_name)
    if missing_columns:
        raise SilverlineIngestError(
            f"Failed to read raw batch for {entity} at {source_path}: "
            f"missing column(s) {', '.join(missing_columns)}."
        )
    return positions


def _build_record(
    row: Sequence[str],
    positions: Mapping[str, int],
    schema: RawSchema,
    unparseable_cells: Counter[str],
) -> RawRecord:
    """Build one bronze record; cells that fail to parse become null."""
    values: dict[str, object] = {}
    for field_name, parser in schema.columns:
        position = positions[field_name]
        cell = row[position] if position < len(row) else ""
        if not cell.strip():
            values[field_name] = None
            continue
        try:
            values[field_name] = parser(cell)
        except ValueError:
            values[field_name] = None
            unparseable_cells[field_name] += 1
    record: RawRecord = schema.record_type(**values)
    return record


def _index_files(source_dir: Path) -> dict[str, Path]:
    """Index files below a directory by lowercase file name."""
    indexed: dict[str, Path] = {}
    for file_path in sorted(source_dir.rglob("*")):
        if file_path.is_file():
            indexed.setdefault(file_path.name.lower(), file_path)
    return indexed
