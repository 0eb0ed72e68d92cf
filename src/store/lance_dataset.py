"""Lance mirror for published silver outputs.

The JSONL records file is the source of truth. When Apache Lance is
installed, each published version also gets a columnar mirror so
analytical readers can scan it without parsing JSON.
"""

from __future__ import annotations

from dataclasses import fields
from pathlib import Path

from core.constants import LANCE_DIR_NAME
from core.errors import SilverlineStoreError
from core.types import EntityName, SilverRecord
from store.record_payload import SILVER_RECORD_TYPES, silver_record_to_payload


def try_write_lance_mirror(
    version_dir: Path,
    entity: EntityName,
    records: list[SilverRecord],
) -> bool:
    """Attempt to mirror records into an Apache Lance dataset.

    Args:
        version_dir: Staged output version directory.
        entity: Entity identifier, used for the column layout.
        records: Records to mirror.

    Returns:
        Whether the Lance mirror was written.

    Raises:
        SilverlineStoreError: If Lance is installed but the write fails.
    """
    try:
        import lance
        import pyarrow as pa
    except ImportError:
        return False

    column_names = [field.name for field in fields(SILVER_RECORD_TYPES[entity])]
    payloads = [silver_record_to_payload(record) for record in records]
    columns = {}
    for name in column_names:
        values = [payload[name] for payload in payloads]
        columns[name] = pa.array(values, type=_column_type(pa, values))
    table = pa.table(columns)
    lance_uri = str(version_dir / LANCE_DIR_NAME)
    try:
        lance.write_dataset(table, lance_uri, mode="overwrite")
    except Exception as error:
        raise SilverlineStoreError(
            f"Failed to write Lance mirror at {lance_uri}: {error}. "
            "Validate lance/pyarrow compatibility and rerun reconcile."
        ) from error
    return True


def _column_type(pa: object, values: list[object]) -> object:
    """Infer an Arrow type; all-null and text columns become strings."""
    for value in values:
        if isinstance(value, bool):
            break
        if isinstance(value, int):
            return pa.int64()  # type: ignore[attr-defined]
        if value is not None:
            break
    return pa.string()  # type: ignore[attr-defined]
