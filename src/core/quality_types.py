"""Typed models for data quality profiling and silver verification."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Mapping

from core.types import EntityName

QualityCheckStatus = Literal["passed", "failed"]


@dataclass(frozen=True)
class RawBatchProfile:
    """Data quality profile of one raw batch.

    Attributes:
        entity: Entity identifier.
        total_records: Number of raw rows.
        unique_keys: Number of distinct usable natural keys.
        null_keys: Rows whose natural key is missing or blank.
        duplicate_records: Rows beyond the first for a repeated key.
        null_counts: Missing values per field.
        whitespace_issues: Text values with padding or line breaks per field.
        coded_values: Raw value distribution of each coded field.
    """

    entity: EntityName
    total_records: int
    unique_keys: int
    null_keys: int
    duplicate_records: int
    null_counts: Mapping[str, int]
    whitespace_issues: Mapping[str, int]
    coded_values: Mapping[str, Mapping[str, int]]

    @property
    def uniqueness_pct(self) -> float:
        """Share of rows carrying a distinct key, in percent."""
        if self.total_records == 0:
            return 100.0
        return round(self.unique_keys / self.total_records * 100, 2)

    @property
    def quality_score_pct(self) -> float:
        """Share of rows free of key problems, in percent."""
        if self.total_records == 0:
            return 100.0
        clean_records = self.total_records - self.null_keys - self.duplicate_records
        return round(clean_records / self.total_records * 100, 2)


@dataclass(frozen=True)
class QualityCheckResult:
    """One silver verification check result row."""

    check_id: str
    title: str
    status: QualityCheckStatus
    details: str


@dataclass(frozen=True)
class SilverVerificationReport:
    """Verification report of one published entity output."""

    entity: EntityName
    version_id: str
    record_count: int
    checks: tuple[QualityCheckResult, ...]

    @property
    def failed_count(self) -> int:
        """Count failed checks in this report."""
        return sum(1 for check in self.checks if check.status == "failed")

    @property
    def passed_count(self) -> int:
        """Count passed checks in this report."""
        return sum(1 for check in self.checks if check.status == "passed")
