"""Catalog and manifest persistence helpers.

This module isolates JSON catalog IO and version id generation.
Catalog writes go through a temporary file and ``os.replace`` so
readers observe either the previous or the new catalog, never a mix.
"""

from __future__ import annotations

import hashlib
import json
import os
import uuid
from dataclasses import asdict
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, cast

from core.constants import HASH_ALGORITHM, MANIFEST_FILE_NAME
from core.errors import SilverlineStoreError
from core.types import EntityName, OutputManifest


def build_version_id(entity: EntityName, records_digest: str) -> str:
    """Build a unique version id from entity, publish time, and content digest.

    Args:
        entity: Entity identifier.
        records_digest: Digest of the records file.

    Returns:
        Version id string.
    """
    timestamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%S%fZ")
    return f"{entity}-{timestamp}-{records_digest[:10]}-{uuid.uuid4().hex[:6]}"


def digest_text(text: str) -> str:
    """Hash text with the configured digest algorithm."""
    hasher = hashlib.new(HASH_ALGORITHM)
    hasher.update(text.encode("utf-8"))
    return hasher.hexdigest()


def write_manifest_file(version_dir: Path, manifest: OutputManifest, lance_written: bool) -> None:
    """Write per-version manifest file.

    Args:
        version_dir: Output version directory.
        manifest: Manifest payload.
        lance_written: Whether a Lance mirror was created.
    """
    manifest_dict = manifest_to_dict(manifest)
    manifest_dict["lance_written"] = lance_written
    manifest_path = version_dir / MANIFEST_FILE_NAME
    manifest_path.write_text(json.dumps(manifest_dict, indent=2) + "\n", encoding="utf-8")


def publish_catalog_entry(catalog_path: Path, manifest: OutputManifest) -> None:
    """Append a manifest and mark it active in one atomic catalog swap.

    Args:
        catalog_path: Catalog JSON path.
        manifest: Manifest of the version being published.

    Raises:
        SilverlineStoreError: If the catalog cannot be read or replaced.
    """
    if catalog_path.exists():
        catalog = read_catalog_file(catalog_path)
    else:
        catalog = {"active_version": None, "versions": []}
    versions = cast(list[dict[str, Any]], catalog["versions"])
    versions.append(manifest_to_dict(manifest))
    catalog["active_version"] = manifest.version_id
    staging_path = catalog_path.with_name(f".{catalog_path.name}.tmp")
    try:
        staging_path.write_text(json.dumps(catalog, indent=2) + "\n", encoding="utf-8")
        os.replace(staging_path, catalog_path)
    except OSError as error:
        staging_path.unlink(missing_ok=True)
        raise SilverlineStoreError(
            f"Failed to publish catalog at {catalog_path}: {error}. "
            "The previously active output is unchanged."
        ) from error


def read_catalog_file(catalog_path: Path) -> dict[str, Any]:
    """Read and validate an entity catalog payload.

    Args:
        catalog_path: Catalog JSON path.

    Returns:
        Parsed catalog object.

    Raises:
        SilverlineStoreError: If catalog is missing or invalid.
    """
    if not catalog_path.exists():
        raise SilverlineStoreError(
            f"Silver catalog not found at {catalog_path}. "
            "Run reconcile before requesting versions."
        )
    try:
        payload = json.loads(catalog_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as error:
        raise SilverlineStoreError(
            f"Failed to parse silver catalog at {catalog_path}: {error.msg}. "
            "Rerun reconcile to rebuild the entity output."
        ) from error
    if not isinstance(payload, dict) or not isinstance(payload.get("versions"), list):
        raise SilverlineStoreError(
            f"Failed to parse silver catalog at {catalog_path}: "
            "expected an object with a 'versions' list."
        )
    return payload


def manifest_to_dict(manifest: OutputManifest) -> dict[str, Any]:
    """Serialize a manifest with ISO timestamps."""
    manifest_dict = asdict(manifest)
    manifest_dict["created_at"] = manifest.created_at.isoformat()
    manifest_dict["processed_at"] = manifest.processed_at.isoformat()
    return manifest_dict


def manifest_from_dict(payload: dict[str, Any]) -> OutputManifest:
    """Deserialize manifest payload from dictionary.

    Args:
        payload: Manifest dictionary.

    Returns:
        Typed output manifest.
    """
    return OutputManifest(
        entity=cast(EntityName, str(payload["entity"])),
        version_id=str(payload["version_id"]),
        created_at=datetime.fromisoformat(str(payload["created_at"])),
        processed_at=datetime.fromisoformat(str(payload["processed_at"])),
        source_uri=str(payload["source_uri"]),
        record_count=int(payload["record_count"]),
        records_digest=str(payload["records_digest"]),
    )
