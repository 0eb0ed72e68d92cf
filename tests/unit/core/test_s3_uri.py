"""Unit tests for S3 URI parsing."""

from __future__ import annotations

from pathlib import PurePosixPath

import pytest

from core.errors import SilverlineStoreError
from core.s3_uri import parse_s3_uri


def test_parse_s3_uri_splits_bucket_and_prefix() -> None:
    """Valid URIs should split into bucket and prefix."""
    location = parse_s3_uri("s3://warehouse/silver/customer_profile")

    assert (location.bucket, location.prefix) == ("warehouse", "silver/customer_profile")


def test_parse_s3_uri_rejects_missing_prefix() -> None:
    """URIs without a prefix should be rejected."""
    with pytest.raises(SilverlineStoreError):
        parse_s3_uri("s3://warehouse")


def test_parse_s3_uri_rejects_other_schemes() -> None:
    """Non-S3 URIs should be rejected."""
    with pytest.raises(SilverlineStoreError):
        parse_s3_uri("gs://warehouse/silver")


def test_object_key_joins_prefix_and_relative_path() -> None:
    """Object keys should nest version files under the prefix."""
    location = parse_s3_uri("s3://warehouse/silver/")

    assert location.object_key(PurePosixPath("data.lance/part-0.lance")) == (
        "silver/data.lance/part-0.lance"
    )
