"""Typed source manifest parsing.

A source manifest is a YAML file naming the raw extract of each entity:

    version: 1
    sources:
      customer_profile: source_crm/cust_info.csv
      product_category: source_erp/PX_CAT_G1V2.csv

Relative paths resolve against the manifest's own directory.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, cast

import yaml

from core.constants import SOURCE_MANIFEST_VERSION
from core.errors import SilverlineSourceManifestError
from core.types import ENTITY_NAMES, EntityName


@dataclass(frozen=True)
class SourceManifest:
    """Validated source manifest.

    Attributes:
        manifest_path: Absolute manifest file path.
        sources: Absolute raw extract path per entity.
    """

    manifest_path: Path
    sources: Mapping[EntityName, Path]


def load_source_manifest(manifest_path: str) -> SourceManifest:
    """Load and validate a YAML source manifest from disk.

    Args:
        manifest_path: File path to the YAML manifest.

    Returns:
        Validated manifest.

    Raises:
        SilverlineSourceManifestError: If the file is missing or invalid.
    """
    manifest_file = Path(manifest_path).expanduser().resolve()
    payload = _load_yaml_payload(manifest_file)
    root_mapping = _expect_mapping(payload, "source manifest root")
    _validate_root_keys(root_mapping)
    _parse_version(root_mapping)
    sources = _parse_sources(root_mapping, manifest_file.parent)
    return SourceManifest(manifest_path=manifest_file, sources=sources)


def _load_yaml_payload(manifest_file: Path) -> object:
    if not manifest_file.exists():
        raise SilverlineSourceManifestError(
            f"Source manifest does not exist at {manifest_file}. Provide a valid YAML file path."
        )
    try:
        payload = cast(object, yaml.safe_load(manifest_file.read_text(encoding="utf-8")))
    except OSError as error:
        raise SilverlineSourceManifestError(
            f"Failed to read source manifest at {manifest_file}: {error}. "
            "Check file permissions and retry."
        ) from error
    except yaml.YAMLError as error:
        raise SilverlineSourceManifestError(
            f"Failed to parse YAML source manifest at {manifest_file}: {error}. "
            "Fix YAML syntax and retry."
        ) from error
    if payload is None:
        raise SilverlineSourceManifestError(
            f"Source manifest at {manifest_file} is empty. Define 'version' and 'sources'."
        )
    return payload


def _expect_mapping(value: object, context: str) -> Mapping[str, object]:
    if isinstance(value, Mapping):
        normalized_mapping = {}
        for key, payload in value.items():
            if not isinstance(key, str):
                raise SilverlineSourceManifestError(
                    f"Invalid {context}: expected string keys, got {type(key).__name__}."
                )
            normalized_mapping[key] = payload
        return normalized_mapping
    raise SilverlineSourceManifestError(
        f"Invalid {context}: expected object mapping, got {type(value).__name__}."
    )


def _parse_version(root_mapping: Mapping[str, object]) -> int:
    raw_version = root_mapping.get("version")
    if not isinstance(raw_version, int) or isinstance(raw_version, bool):
        raise SilverlineSourceManifestError(
            "Source manifest field 'version' must be an integer. "
            f"Set version: {SOURCE_MANIFEST_VERSION}."
        )
    if raw_version != SOURCE_MANIFEST_VERSION:
        raise SilverlineSourceManifestError(
            f"Unsupported source manifest version {raw_version}. "
            f"Use version: {SOURCE_MANIFEST_VERSION}."
        )
    return raw_version


def _parse_sources(
    root_mapping: Mapping[str, object],
    base_dir: Path,
) -> dict[EntityName, Path]:
    raw_sources = root_mapping.get("sources")
    if raw_sources is None:
        raise SilverlineSourceManifestError(
            "Source manifest missing required field 'sources'. Map entities to extract files."
        )
    sources_mapping = _expect_mapping(raw_sources, "source manifest sources")
    if not sources_mapping:
        raise SilverlineSourceManifestError(
            "Source manifest field 'sources' must name at least one entity."
        )
    sources: dict[EntityName, Path] = {}
    for entity, raw_path in sources_mapping.items():
        if entity not in ENTITY_NAMES:
            supported = ", ".join(ENTITY_NAMES)
            raise SilverlineSourceManifestError(
                f"Unknown entity '{entity}' in source manifest. Use one of: {supported}."
            )
        if not isinstance(raw_path, str) or not raw_path.strip():
            raise SilverlineSourceManifestError(
                f"Source manifest entry '{entity}' must be a non-empty path string."
            )
        source_path = Path(raw_path.strip()).expanduser()
        if not source_path.is_absolute():
            source_path = base_dir / source_path
        sources[cast(EntityName, entity)] = source_path.resolve()
    return sources


def _validate_root_keys(root_mapping: Mapping[str, object]) -> None:
    allowed_keys = {"version", "sources"}
    unknown_keys = sorted(set(root_mapping) - allowed_keys)
    if unknown_keys:
        raise SilverlineSourceManifestError(
            f"Source manifest contains unknown root fields: {', '.join(unknown_keys)}."
        )
