"""Silverline exception hierarchy.

Data-level anomalies are absorbed by the reconciliation rules and never
raise. These errors cover pipeline-level faults only, and each one is
fatal for the entity pipeline that raised it.
"""

from __future__ import annotations


class SilverlineError(Exception):
    """Base exception for all Silverline failures."""


class SilverlineConfigError(SilverlineError):
    """Raised for invalid runtime configuration."""


class SilverlineIngestError(SilverlineError):
    """Raised when a raw batch is missing or unreadable."""


class SilverlineSourceManifestError(SilverlineError):
    """Raised for invalid or unsupported source manifest files."""


class SilverlineTransformError(SilverlineError):
    """Raised for reconciliation pipeline failures."""


class SilverlineStoreError(SilverlineError):
    """Raised for silver output persistence and catalog failures."""


class SilverlineDependencyError(SilverlineError):
    """Raised when an optional runtime dependency is missing."""


class SilverlineQualityCheckError(SilverlineError):
    """Raised when silver output verification fails."""
