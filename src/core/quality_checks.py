"""Data quality profiling and silver output verification.

Profiling inspects a raw batch before reconciliation: missing and
repeated natural keys, padded text, and the spread of coded values.
Verification re-checks a published silver output against the guarantees
the reconcilers make, so a corrupted or hand-edited output is caught.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import fields
from datetime import date, timedelta
from typing import Any, Callable, Hashable, Mapping, Sequence

from core.errors import SilverlineQualityCheckError
from core.quality_types import (
    QualityCheckResult,
    QualityCheckStatus,
    RawBatchProfile,
    SilverVerificationReport,
)
from core.types import (
    GENDER_VALUES,
    MAINTENANCE_FLAG_VALUES,
    MARITAL_STATUS_VALUES,
    PRODUCT_LINE_VALUES,
    EntityName,
    OutputManifest,
    RawRecord,
    SilverRecord,
)
from ingest.input_reader import RAW_SCHEMAS
from transforms.entity_reconcilers import get_entity_rules
from transforms.field_normalization import clean_text

CheckCallable = Callable[[EntityName, Sequence[Any]], str]
CheckRow = tuple[str, str, CheckCallable]

CODED_FIELDS: Mapping[EntityName, tuple[str, ...]] = {
    "customer_profile": ("cst_marital_status", "cst_gndr"),
    "product": ("prd_line",),
    "sales_line": (),
    "customer_demographic": ("gen",),
    "customer_location": ("cntry",),
    "product_category": ("maintenance",),
}
SILVER_VOCABULARIES: Mapping[EntityName, Mapping[str, tuple[str, ...]]] = {
    "customer_profile": {
        "cst_marital_status": MARITAL_STATUS_VALUES,
        "cst_gndr": GENDER_VALUES,
    },
    "product": {"prd_line_desc": PRODUCT_LINE_VALUES},
    "sales_line": {},
    "customer_demographic": {"gen": GENDER_VALUES},
    "customer_location": {},
    "product_category": {"maintenance": MAINTENANCE_FLAG_VALUES},
}


def profile_raw_batch(entity: EntityName, records: Sequence[RawRecord]) -> RawBatchProfile:
    """Profile data quality issues of one raw batch.

    Args:
        entity: Entity identifier.
        records: Raw records in extract order.

    Returns:
        Raw batch profile.
    """
    rules = get_entity_rules(entity)
    key_counts: Counter[Hashable] = Counter()
    null_keys = 0
    for record in records:
        key = rules.raw_key(record)
        if key is None:
            null_keys += 1
        else:
            key_counts[key] += 1
    field_names = [field.name for field in fields(RAW_SCHEMAS[entity].record_type)]
    null_counts = {
        name: sum(1 for record in records if getattr(record, name) is None)
        for name in field_names
    }
    whitespace_issues = {
        name: sum(1 for record in records if _has_whitespace_issue(getattr(record, name)))
        for name in field_names
    }
    coded_values = {
        name: dict(
            Counter(
                getattr(record, name) for record in records if getattr(record, name) is not None
            ).most_common()
        )
        for name in CODED_FIELDS[entity]
    }
    return RawBatchProfile(
        entity=entity,
        total_records=len(records),
        unique_keys=len(key_counts),
        null_keys=null_keys,
        duplicate_records=sum(count - 1 for count in key_counts.values()),
        null_counts=null_counts,
        whitespace_issues={name: count for name, count in whitespace_issues.items() if count},
        coded_values=coded_values,
    )


def render_raw_batch_profile(profile: RawBatchProfile) -> str:
    """Render a raw batch profile into stable multi-line text."""
    lines = [
        f"entity={profile.entity}",
        f"total_records={profile.total_records}",
        f"unique_keys={profile.unique_keys}",
        f"null_keys={profile.null_keys}",
        f"duplicate_records={profile.duplicate_records}",
        f"uniqueness_pct={profile.uniqueness_pct:.2f}",
        f"quality_score_pct={profile.quality_score_pct:.2f}",
    ]
    for name, count in profile.null_counts.items():
        if count:
            lines.append(f"null[{name}]={count}")
    for name, count in profile.whitespace_issues.items():
        lines.append(f"whitespace[{name}]={count}")
    for name, distribution in profile.coded_values.items():
        rendered = ", ".join(f"{value!r}:{count}" for value, count in distribution.items())
        lines.append(f"values[{name}]={{{rendered}}}")
    return "\n".join(lines)


def verify_silver_output(
    entity: EntityName,
    records: Sequence[SilverRecord],
) -> tuple[QualityCheckResult, ...]:
    """Run every silver guarantee check over one output set.

    Args:
        entity: Entity identifier.
        records: Silver records of one output version.

    Returns:
        Ordered check results; checks not relevant to the entity pass.
    """
    results: list[QualityCheckResult] = []
    for check_id, title, check_fn in build_silver_checks():
        status, details = _run_single_check(check_fn, entity, records)
        results.append(
            QualityCheckResult(check_id=check_id, title=title, status=status, details=details)
        )
    return tuple(results)


def build_silver_report(
    manifest: OutputManifest,
    records: Sequence[SilverRecord],
) -> SilverVerificationReport:
    """Verify a loaded output version and wrap the results in a report."""
    return SilverVerificationReport(
        entity=manifest.entity,
        version_id=manifest.version_id,
        record_count=len(records),
        checks=verify_silver_output(manifest.entity, records),
    )


def render_silver_report(report: SilverVerificationReport) -> str:
    """Render a verification report into stable multi-line text for CLI output."""
    lines = [
        f"entity={report.entity}",
        f"version_id={report.version_id}",
        f"record_count={report.record_count}",
    ]
    for row in report.checks:
        lines.append(f"[{row.status.upper()}] {row.check_id} {row.title} :: {row.details}")
    lines.append(f"passed={report.passed_count}")
    lines.append(f"failed={report.failed_count}")
    return "\n".join(lines)


def build_silver_checks() -> tuple[CheckRow, ...]:
    """Build the ordered silver check list."""
    return (
        ("S001", "Natural Key Uniqueness", check_key_uniqueness),
        ("S002", "Vocabulary Closure", check_vocabulary_closure),
        ("S003", "Clean Strings", check_clean_strings),
        ("S004", "Sales Amount Consistency", check_sales_amounts),
        ("S005", "Temporal Contiguity", check_temporal_contiguity),
    )


def check_key_uniqueness(entity: EntityName, records: Sequence[Any]) -> str:
    """Validate that natural keys are present and unique."""
    natural_key = get_entity_rules(entity).natural_key
    key_counts = Counter(natural_key(record) for record in records)
    null_keys = [key for key in key_counts if any(part is None for part in key)]
    if null_keys:
        raise SilverlineQualityCheckError(f"Found {len(null_keys)} record(s) with a null key.")
    duplicates = sorted(str(key) for key, count in key_counts.items() if count > 1)
    if duplicates:
        raise SilverlineQualityCheckError(
            f"Found {len(duplicates)} duplicated key(s): {', '.join(duplicates[:5])}."
        )
    return f"unique_keys={len(key_counts)}"


def check_vocabulary_closure(entity: EntityName, records: Sequence[Any]) -> str:
    """Validate that coded fields only hold canonical values."""
    vocabularies = SILVER_VOCABULARIES[entity]
    if not vocabularies:
        return "no coded fields"
    for name, allowed in vocabularies.items():
        unexpected = sorted(
            {str(getattr(record, name)) for record in records} - set(allowed)
        )
        if unexpected:
            raise SilverlineQualityCheckError(
                f"Field '{name}' holds non-canonical value(s): {', '.join(unexpected)}."
            )
    return f"fields={','.join(vocabularies)}"


def check_clean_strings(entity: EntityName, records: Sequence[Any]) -> str:
    """Validate that no text value carries padding or line breaks."""
    checked_values = 0
    for record in records:
        for field in fields(record):
            value = getattr(record, field.name)
            if not isinstance(value, str):
                continue
            checked_values += 1
            if value != clean_text(value):
                raise SilverlineQualityCheckError(
                    f"Field '{field.name}' holds unclean text {value!r}."
                )
    return f"checked_values={checked_values}"


def check_sales_amounts(entity: EntityName, records: Sequence[Any]) -> str:
    """Validate that sales quantities and unit prices are never negative."""
    if entity != "sales_line":
        return "not applicable"
    for record in records:
        if record.sls_quantity < 0 or record.sls_price < 0:
            raise SilverlineQualityCheckError(
                f"Sales line {record.sls_ord_num}/{record.sls_prd_key} has quantity "
                f"{record.sls_quantity} and price {record.sls_price}."
            )
    return f"checked_lines={len(records)}"


def check_temporal_contiguity(entity: EntityName, records: Sequence[Any]) -> str:
    """Validate that product versions end the day before their successor starts.

    Versions with the same start date are ordered by end date; a successor
    without a start date cannot be checked and is skipped.
    """
    if entity != "product":
        return "not applicable"
    histories: dict[str, list[Any]] = {}
    for record in records:
        if record.prd_key is not None:
            histories.setdefault(record.prd_key, []).append(record)
    for prd_key, versions in histories.items():
        ordered = sorted(versions, key=_version_sort_key)
        for current, successor in zip(ordered, ordered[1:]):
            if successor.prd_start_dt is None:
                continue
            expected_end = successor.prd_start_dt - timedelta(days=1)
            if current.prd_end_dt != expected_end:
                raise SilverlineQualityCheckError(
                    f"Product {prd_key} version {current.prd_id} ends {current.prd_end_dt}, "
                    f"expected {expected_end}."
                )
    return f"histories={len(histories)}"


def _run_single_check(
    check_fn: CheckCallable,
    entity: EntityName,
    records: Sequence[Any],
) -> tuple[QualityCheckStatus, str]:
    try:
        return "passed", check_fn(entity, records)
    except SilverlineQualityCheckError as error:
        return "failed", str(error)


def _version_sort_key(record: Any) -> tuple[int, date, int, date]:
    start = record.prd_start_dt
    end = record.prd_end_dt
    return (
        0 if start is None else 1,
        start or date.min,
        1 if end is None else 0,
        end or date.max,
    )


def _has_whitespace_issue(value: object) -> bool:
    return isinstance(value, str) and value != clean_text(value)
