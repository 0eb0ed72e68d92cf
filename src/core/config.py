"""Runtime configuration model for Silverline.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path

from core.constants import DEFAULT_DATA_ROOT, DEFAULT_MAX_WORKERS
from core.errors import SilverlineConfigError


@dataclass(frozen=True)
class SilverlineConfig:
    """Validated runtime configuration.

    Attributes:
        data_root: Local root directory for published silver outputs.
        s3_region: Optional default AWS region for S3 exports.
        s3_profile: Optional AWS profile for boto3 session initialization.
        max_workers: Upper bound of entity pipelines running concurrently.
    """

    data_root: Path
    s3_region: str | None
    s3_profile: str | None
    max_workers: int

    @classmethod
    def from_env(cls) -> "SilverlineConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            SilverlineConfigError: If environment values are invalid.
        """
        data_root_value = os.getenv("SILVERLINE_DATA_ROOT", str(DEFAULT_DATA_ROOT))
        s3_region = os.getenv("SILVERLINE_S3_REGION")
        s3_profile = os.getenv("SILVERLINE_S3_PROFILE")
        max_workers_value = os.getenv("SILVERLINE_MAX_WORKERS", str(DEFAULT_MAX_WORKERS))
        return cls(
            data_root=Path(data_root_value).expanduser().resolve(),
            s3_region=s3_region,
            s3_profile=s3_profile,
            max_workers=_parse_max_workers(max_workers_value),
        )


def _parse_max_workers(raw_value: str) -> int:
    """Parse the worker count environment value.

    Args:
        raw_value: Raw string from environment.

    Returns:
        Parsed positive worker count.

    Raises:
        SilverlineConfigError: If value is not a positive integer.
    """
    try:
        max_workers = int(raw_value)
    except ValueError as error:
        raise SilverlineConfigError(
            "Invalid SILVERLINE_MAX_WORKERS value: "
            f"expected integer, got '{raw_value}'. "
            "Set SILVERLINE_MAX_WORKERS to a positive number."
        ) from error
    if max_workers < 1:
        raise SilverlineConfigError(
            f"Invalid SILVERLINE_MAX_WORKERS value: expected >= 1, got {max_workers}."
        )
    return max_workers
