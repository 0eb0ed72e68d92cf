"""Reconciliation orchestration.

This module coordinates raw batch loading, per-entity reconciliation,
and silver output publication. Entities are independent: each one runs
in its own pipeline and a failure is reported without stopping others.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from pathlib import Path

from core.config import SilverlineConfig
from core.errors import SilverlineError
from core.logging_config import get_logger
from core.types import (
    ENTITY_NAMES,
    EntityName,
    EntityRunResult,
    OutputWriteRequest,
    ReconcileOptions,
    SilverRecord,
)
from ingest.input_reader import RawBatch, read_raw_batch, resolve_source_paths
from store.snapshot_store import SilverStore
from transforms.entity_reconcilers import get_entity_rules, reconcile_batch

_LOGGER = get_logger(__name__)


class EntityPipelineRunner:
    """Runner for one entity: load raw batch, reconcile, publish."""

    def __init__(
        self,
        entity: EntityName,
        source_path: Path | None,
        processed_at: datetime,
        store: SilverStore,
    ) -> None:
        self._entity = entity
        self._source_path = source_path
        self._processed_at = processed_at
        self._store = store

    def run(self) -> EntityRunResult:
        """Execute the entity pipeline and return its result.

        Raises:
            SilverlineError: If loading, reconciliation, or publication fails.
        """
        raw_batch = read_raw_batch(self._entity, self._source_path)
        silver_records = reconcile_entity(self._entity, raw_batch, self._processed_at)
        write_request = OutputWriteRequest(
            entity=self._entity,
            records=tuple(silver_records),
            processed_at=self._processed_at,
            source_uri=raw_batch.source_uri,
        )
        manifest = self._store.publish_output(write_request)
        _LOGGER.info(
            "entity_reconciled",
            entity=self._entity,
            source_uri=raw_batch.source_uri,
            input_count=len(raw_batch.records),
            output_count=manifest.record_count,
            version_id=manifest.version_id,
            recipe_steps=list(get_entity_rules(self._entity).recipe_steps),
        )
        return EntityRunResult(
            entity=self._entity,
            status="succeeded",
            version_id=manifest.version_id,
            input_count=len(raw_batch.records),
            output_count=manifest.record_count,
        )


def reconcile_entity(
    entity: EntityName,
    raw_batch: RawBatch,
    processed_at: datetime,
) -> list[SilverRecord]:
    """Reconcile one raw batch without persisting it.

    Args:
        entity: Entity identifier.
        raw_batch: Raw batch in extract order.
        processed_at: Processing timestamp stamped on every record.

    Returns:
        Silver records sorted by natural key.

    Raises:
        SilverlineTransformError: If the entity is unknown.
    """
    return reconcile_batch(entity, raw_batch.records, processed_at)


def reconcile_dataset(
    options: ReconcileOptions,
    config: SilverlineConfig,
) -> list[EntityRunResult]:
    """Rebuild silver outputs for the selected entities.

    Args:
        options: Reconcile request options.
        config: Runtime configuration.

    Returns:
        One result per selected entity, in request order without repeats.

    Raises:
        SilverlineIngestError: If the source location itself is unreadable.
        SilverlineSourceManifestError: If the source manifest is invalid.
    """
    entities = tuple(dict.fromkeys(options.entities)) or ENTITY_NAMES
    processed_at = options.processed_at or datetime.now(timezone.utc)
    source_paths = resolve_source_paths(options.source_uri, entities)
    store = SilverStore(config)
    runners = [
        (entity, EntityPipelineRunner(entity, source_paths[entity], processed_at, store))
        for entity in entities
    ]
    max_workers = min(config.max_workers, len(runners))
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = [
            executor.submit(_run_isolated, entity, runner) for entity, runner in runners
        ]
        return [future.result() for future in futures]


def _run_isolated(entity: EntityName, runner: EntityPipelineRunner) -> EntityRunResult:
    """Run one entity pipeline, converting any failure to a failed result.

    Domain errors carry an actionable message; any other exception is a
    defect in a rule and is reported with its type so the run can finish
    the remaining entities.
    """
    try:
        return runner.run()
    except SilverlineError as error:
        _LOGGER.error("entity_failed", entity=entity, error=str(error))
        return EntityRunResult(entity=entity, status="failed", error=str(error))
    except Exception as error:
        message = f"Unexpected {type(error).__name__} while reconciling {entity}: {error}"
        _LOGGER.exception("entity_failed", entity=entity, error=message)
        return EntityRunResult(entity=entity, status="failed", error=message)
