"""Public SDK surface for Silverline.

This module provides a stable import path for library users.
It re-exports the primary client and typed option models.
"""

from __future__ import annotations

from core.config import SilverlineConfig
from core.quality_types import QualityCheckResult, RawBatchProfile, SilverVerificationReport
from core.types import ENTITY_NAMES, EntityName, EntityRunResult, OutputManifest, ReconcileOptions
from ingest.pipeline import reconcile_entity
from store.silver_sdk import EntityOutput, SilverlineClient
from transforms.entity_reconcilers import reconcile_batch

__all__ = [
    "ENTITY_NAMES",
    "EntityName",
    "EntityOutput",
    "EntityRunResult",
    "OutputManifest",
    "QualityCheckResult",
    "RawBatchProfile",
    "ReconcileOptions",
    "SilverVerificationReport",
    "SilverlineClient",
    "SilverlineConfig",
    "reconcile_batch",
    "reconcile_entity",
]
