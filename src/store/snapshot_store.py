"""Silver output store and catalog.

This module publishes each entity's reconciled output as an immutable
version directory and flips the entity's active version in one atomic
catalog swap. A failed publish leaves the previous output untouched.
"""

from __future__ import annotations

import shutil
from datetime import datetime, timezone
from pathlib import Path, PurePosixPath
from typing import Any, cast

from core.config import SilverlineConfig
from core.constants import (
    CATALOG_FILE_NAME,
    RECORDS_FILE_NAME,
    SILVER_DIR_NAME,
    STAGING_DIR_PREFIX,
    VERSIONS_DIR_NAME,
)
from core.errors import SilverlineDependencyError, SilverlineStoreError
from core.logging_config import get_logger
from core.s3_uri import S3Location, parse_s3_uri
from core.types import (
    EntityName,
    OutputManifest,
    OutputWriteRequest,
    SilverRecord,
    VersionExportRequest,
)
from store.catalog_io import (
    build_version_id,
    digest_text,
    manifest_from_dict,
    publish_catalog_entry,
    read_catalog_file,
    write_manifest_file,
)
from store.lance_dataset import try_write_lance_mirror
from store.record_payload import read_silver_records_jsonl, render_records_jsonl

_LOGGER = get_logger(__name__)


class SilverStore:
    """Entity output store implementation.

    This class owns entity directories, version manifests,
    and catalog swaps for published silver outputs.
    """

    def __init__(self, config: SilverlineConfig) -> None:
        """Initialize the store from config.

        Args:
            config: Runtime configuration.
        """
        self._config = config
        self._silver_root = config.data_root / SILVER_DIR_NAME
        self._silver_root.mkdir(parents=True, exist_ok=True)

    def publish_output(self, request: OutputWriteRequest) -> OutputManifest:
        """Build a new output version and make it the active one.

        The records are fully written to a staging directory first; only
        then is the directory renamed into place and the catalog swapped.

        Args:
            request: Output write request payload.

        Returns:
            Manifest of the published version.

        Raises:
            SilverlineStoreError: If persistence fails at any step.
        """
        entity_root = self._entity_root(request.entity)
        records = list(request.records)
        records_text = render_records_jsonl(records)
        records_digest = digest_text(records_text)
        version_id = build_version_id(request.entity, records_digest)
        manifest = OutputManifest(
            entity=request.entity,
            version_id=version_id,
            created_at=datetime.now(timezone.utc),
            processed_at=request.processed_at,
            source_uri=request.source_uri,
            record_count=len(records),
            records_digest=records_digest,
        )
        versions_dir = entity_root / VERSIONS_DIR_NAME
        staging_dir = versions_dir / f"{STAGING_DIR_PREFIX}{version_id}"
        version_dir = versions_dir / version_id
        try:
            staging_dir.mkdir(parents=True, exist_ok=False)
            (staging_dir / RECORDS_FILE_NAME).write_text(records_text, encoding="utf-8")
            lance_written = try_write_lance_mirror(staging_dir, request.entity, records)
            write_manifest_file(staging_dir, manifest, lance_written)
            staging_dir.rename(version_dir)
        except (OSError, SilverlineStoreError) as error:
            shutil.rmtree(staging_dir, ignore_errors=True)
            raise SilverlineStoreError(
                f"Failed to stage output for {request.entity} at {staging_dir}: {error}. "
                "The previously active output is unchanged."
            ) from error
        try:
            publish_catalog_entry(entity_root / CATALOG_FILE_NAME, manifest)
        except SilverlineStoreError:
            shutil.rmtree(version_dir, ignore_errors=True)
            raise
        _LOGGER.info(
            "silver_output_published",
            entity=request.entity,
            version_id=version_id,
            record_count=manifest.record_count,
            records_digest=records_digest,
            lance_written=lance_written,
        )
        return manifest

    def list_versions(self, entity: EntityName) -> list[OutputManifest]:
        """List manifests for an entity in publication order.

        Args:
            entity: Entity identifier.

        Returns:
            Ordered manifest list.

        Raises:
            SilverlineStoreError: If the entity catalog does not exist.
        """
        catalog = read_catalog_file(self._entity_root(entity) / CATALOG_FILE_NAME)
        version_payloads = cast(list[dict[str, Any]], catalog["versions"])
        return [manifest_from_dict(item) for item in version_payloads]

    def active_manifest(self, entity: EntityName) -> OutputManifest:
        """Return the manifest of the active output version.

        Raises:
            SilverlineStoreError: If nothing was published for the entity.
        """
        catalog = read_catalog_file(self._entity_root(entity) / CATALOG_FILE_NAME)
        return self._resolve_manifest(entity, catalog.get("active_version"))

    def load_records(
        self,
        entity: EntityName,
        version_id: str | None = None,
    ) -> tuple[OutputManifest, list[SilverRecord]]:
        """Load records of an output version.

        Args:
            entity: Entity identifier.
            version_id: Optional version; the active one when omitted.

        Returns:
            Pair of manifest and loaded records.

        Raises:
            SilverlineStoreError: If the entity or version is missing or corrupt.
        """
        if version_id is None:
            manifest = self.active_manifest(entity)
        else:
            manifest = self._resolve_manifest(entity, version_id)
        records_path = self._version_dir(entity, manifest.version_id) / RECORDS_FILE_NAME
        try:
            records = read_silver_records_jsonl(entity, records_path)
        except (OSError, ValueError) as error:
            raise SilverlineStoreError(
                f"Failed to load output {entity}:{manifest.version_id} from {records_path}: "
                f"{error}. Rerun reconcile to rebuild the entity output."
            ) from error
        return manifest, records

    def export_version_to_s3(self, request: VersionExportRequest) -> None:
        """Export an output version directory to S3.

        Args:
            request: Export request payload.

        Raises:
            SilverlineStoreError: If export fails.
        """
        location = parse_s3_uri(request.output_uri)
        version_dir = self._version_dir(request.entity, request.version_id)
        s3_client = _create_s3_client(self._config)
        _upload_directory(s3_client, version_dir, location)
        _LOGGER.info(
            "silver_output_exported",
            entity=request.entity,
            version_id=request.version_id,
            output_uri=request.output_uri,
        )

    def _entity_root(self, entity: EntityName) -> Path:
        entity_root = self._silver_root / entity
        (entity_root / VERSIONS_DIR_NAME).mkdir(parents=True, exist_ok=True)
        return entity_root

    def _resolve_manifest(self, entity: EntityName, version_id: object) -> OutputManifest:
        """Resolve a target manifest.

        Raises:
            SilverlineStoreError: If the version is not in the catalog.
        """
        for manifest in self.list_versions(entity):
            if manifest.version_id == version_id:
                return manifest
        raise SilverlineStoreError(
            f"Version '{version_id}' not found for entity '{entity}'. "
            "Use the versions command to discover valid version ids."
        )

    def _version_dir(self, entity: EntityName, version_id: str) -> Path:
        """Return an output version directory.

        Raises:
            SilverlineStoreError: If the version directory is missing.
        """
        version_dir = self._entity_root(entity) / VERSIONS_DIR_NAME / version_id
        if not version_dir.is_dir():
            raise SilverlineStoreError(
                f"Missing output directory for {entity}:{version_id} at {version_dir}. "
                "Rerun reconcile to rebuild the entity output."
            )
        return version_dir


def _create_s3_client(config: SilverlineConfig) -> Any:
    """Create boto3 S3 client for exports.

    Args:
        config: Runtime config with optional session settings.

    Returns:
        Boto3 S3 client.

    Raises:
        SilverlineDependencyError: If boto3 is missing.
    """
    try:
        import boto3
    except ImportError as error:
        raise SilverlineDependencyError(
            "S3 export requires boto3, but it is not installed. "
            "Install the 's3' extra to export outputs to s3:// destinations."
        ) from error
    session_kwargs: dict[str, str] = {}
    if config.s3_profile:
        session_kwargs["profile_name"] = config.s3_profile
    if config.s3_region:
        session_kwargs["region_name"] = config.s3_region
    session = boto3.session.Session(**session_kwargs)
    return session.client("s3")


def _upload_directory(s3_client: Any, version_dir: Path, location: S3Location) -> None:
    """Upload all version files to S3.

    Raises:
        SilverlineStoreError: If upload fails.
    """
    for local_file in sorted(version_dir.rglob("*")):
        if not local_file.is_file():
            continue
        relative_path = PurePosixPath(local_file.relative_to(version_dir).as_posix())
        object_key = location.object_key(relative_path)
        try:
            s3_client.upload_file(str(local_file), location.bucket, object_key)
        except Exception as error:
            raise SilverlineStoreError(
                f"Failed to export output file {local_file} to {location.object_uri(object_key)}: "
                f"{error}. Check AWS credentials and retry export."
            ) from error
