"""Core constants used across Silverline modules.

This module centralizes non-domain-specific constants.
Keeping values here avoids magic literals in business logic.
"""

from __future__ import annotations

from pathlib import Path

DEFAULT_DATA_ROOT = Path(".silverline")
DEFAULT_MAX_WORKERS = 4
SILVER_DIR_NAME = "silver"
VERSIONS_DIR_NAME = "versions"
STAGING_DIR_PREFIX = ".staging-"
CATALOG_FILE_NAME = "catalog.json"
MANIFEST_FILE_NAME = "manifest.json"
RECORDS_FILE_NAME = "records.jsonl"
LANCE_DIR_NAME = "data.lance"
HASH_ALGORITHM = "sha256"
SOURCE_MANIFEST_VERSION = 1
SOURCE_MANIFEST_SUFFIXES = (".yaml", ".yml")
CSV_ENCODING = "utf-8-sig"
RAW_DATE_FORMAT = "%Y-%m-%d"
PACKED_DATE_FORMAT = "%Y%m%d"
PACKED_DATE_LENGTH = 8
MONEY_QUANTUM = "0.01"
CATEGORY_CODE_LENGTH = 5
PRODUCT_KEY_SUFFIX_OFFSET = 6
CATEGORY_CODE_SEPARATOR = "-"
CANONICAL_CATEGORY_SEPARATOR = "_"
DEMOGRAPHIC_KEY_TAG = "NAS"
DEMOGRAPHIC_KEY_TAG_WIDTH = 3
