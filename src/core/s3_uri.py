"""Export destination parsing.

Published silver versions are exported to ``s3://bucket/prefix``
destinations; every file of a version lands under the prefix with
its path relative to the version directory.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import PurePosixPath

from core.errors import SilverlineStoreError

S3_SCHEME = "s3://"


@dataclass(frozen=True)
class S3Location:
    """Bucket and key prefix of an export destination."""

    bucket: str
    prefix: str

    def object_key(self, relative_path: PurePosixPath) -> str:
        """Build the object key of one exported file."""
        return f"{self.prefix.rstrip('/')}/{relative_path.as_posix()}"

    def object_uri(self, object_key: str) -> str:
        """Render an object key back into a full URI for messages."""
        return f"{S3_SCHEME}{self.bucket}/{object_key}"


def parse_s3_uri(uri: str) -> S3Location:
    """Parse an export destination URI.

    Args:
        uri: URI in format ``s3://bucket/prefix``.

    Returns:
        Parsed destination.

    Raises:
        SilverlineStoreError: If the URI lacks the scheme, bucket, or prefix.
    """
    bucket, _, prefix = uri.removeprefix(S3_SCHEME).partition("/")
    if not uri.startswith(S3_SCHEME) or not bucket or not prefix.strip("/"):
        raise SilverlineStoreError(
            f"Invalid export destination '{uri}': expected s3://bucket/prefix. "
            "Provide both a bucket and a key prefix."
        )
    return S3Location(bucket=bucket, prefix=prefix)
