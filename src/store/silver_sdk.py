"""Python SDK for reconciliation operations.

This module exposes high-level APIs for reconciling raw extracts,
inspecting published silver outputs, and running quality checks.
"""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path
from typing import Sequence

from core.config import SilverlineConfig
from core.quality_checks import build_silver_report, profile_raw_batch
from core.quality_types import RawBatchProfile, SilverVerificationReport
from core.types import (
    ENTITY_NAMES,
    EntityName,
    EntityRunResult,
    OutputManifest,
    ReconcileOptions,
    SilverRecord,
    VersionExportRequest,
)
from ingest.input_reader import read_raw_batch, resolve_source_paths
from ingest.pipeline import reconcile_dataset
from store.snapshot_store import SilverStore


class SilverlineClient:
    """Primary SDK entry point for reconciliation workflows."""

    def __init__(self, config: SilverlineConfig | None = None) -> None:
        """Create SDK client.

        Args:
            config: Optional runtime configuration.
        """
        self._config = config or SilverlineConfig.from_env()
        self._store = SilverStore(self._config)

    @property
    def config(self) -> SilverlineConfig:
        """Return the runtime configuration."""
        return self._config

    def reconcile(self, options: ReconcileOptions) -> list[EntityRunResult]:
        """Rebuild silver outputs from raw extracts.

        Args:
            options: Reconcile options.

        Returns:
            One result per entity; failed entities carry their error.

        Raises:
            SilverlineIngestError: If the source location is unreadable.
            SilverlineSourceManifestError: If the source manifest is invalid.
        """
        return reconcile_dataset(options, self._config)

    def entity(self, entity: EntityName) -> "EntityOutput":
        """Get an output handle by entity name.

        Args:
            entity: Entity identifier.

        Returns:
            Entity output handle.
        """
        return EntityOutput(entity, self._store)

    def profile(
        self,
        source_uri: str,
        entities: Sequence[EntityName] = (),
    ) -> list[RawBatchProfile]:
        """Profile raw data quality without publishing anything.

        Args:
            source_uri: Raw extract directory or YAML source manifest.
            entities: Entities to profile; all entities when empty.

        Returns:
            One profile per entity.

        Raises:
            SilverlineIngestError: If a raw batch cannot be read.
        """
        selected = tuple(dict.fromkeys(entities)) or ENTITY_NAMES
        source_paths = resolve_source_paths(source_uri, selected)
        profiles: list[RawBatchProfile] = []
        for entity in selected:
            raw_batch = read_raw_batch(entity, source_paths[entity])
            profiles.append(profile_raw_batch(entity, raw_batch.records))
        return profiles

    def verify(self, entities: Sequence[EntityName] = ()) -> list[SilverVerificationReport]:
        """Verify active silver outputs against reconciliation guarantees.

        Args:
            entities: Entities to verify; all entities when empty.

        Returns:
            One report per entity.

        Raises:
            SilverlineStoreError: If an entity has no readable active output.
        """
        selected = tuple(dict.fromkeys(entities)) or ENTITY_NAMES
        return [self.entity(entity).verify() for entity in selected]

    def with_data_root(self, data_root: str) -> "SilverlineClient":
        """Clone the client with a different local data root.

        Args:
            data_root: New data root path.

        Returns:
            New SDK client instance.
        """
        resolved_root = Path(data_root).expanduser().resolve()
        updated_config = replace(self._config, data_root=resolved_root)
        return SilverlineClient(updated_config)


class EntityOutput:
    """SDK handle for the versioned silver output of one entity."""

    def __init__(self, entity: EntityName, store: SilverStore) -> None:
        """Create entity output handle.

        Args:
            entity: Entity identifier.
            store: Silver store backend.
        """
        self._entity = entity
        self._store = store

    @property
    def name(self) -> EntityName:
        """Return entity identifier."""
        return self._entity

    def list_versions(self) -> list[OutputManifest]:
        """List all published versions.

        Returns:
            Ordered list of output manifests.
        """
        return self._store.list_versions(self._entity)

    def load_records(
        self,
        version_id: str | None = None,
    ) -> tuple[OutputManifest, list[SilverRecord]]:
        """Load records for the active or a target version.

        Args:
            version_id: Optional specific version id.

        Returns:
            Pair of manifest and silver records.
        """
        return self._store.load_records(self._entity, version_id)

    def verify(self, version_id: str | None = None) -> SilverVerificationReport:
        """Run silver checks over the active or a target version."""
        manifest, records = self.load_records(version_id)
        return build_silver_report(manifest, records)

    def export(self, output_uri: str, version_id: str | None = None) -> str:
        """Export an output version to an S3 destination.

        Args:
            output_uri: Destination URI.
            version_id: Optional version id, the active one when omitted.

        Returns:
            Exported version id.
        """
        if version_id is None:
            version_id = self._store.active_manifest(self._entity).version_id
        request = VersionExportRequest(
            entity=self._entity,
            version_id=version_id,
            output_uri=output_uri,
        )
        self._store.export_version_to_s3(request)
        return version_id
