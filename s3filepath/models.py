"""Bucket and resolved-object descriptors."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

from s3filepath.errors import ConfigurationError
from s3filepath.paths import (
    format_timestamp,
    parse_data_path,
    render_config_path,
    render_data_path,
    render_partition_subfolder,
)

__all__ = ["S3Bucket", "S3File"]


@dataclass(frozen=True)
class S3Bucket:
    """The subset of bucket settings needed to address and load exports.

    ``region`` is informational and ``redshift_role_arn`` is passed through
    untouched to whatever issues the warehouse COPY.
    """

    name: str
    region: str = ""
    redshift_role_arn: str = ""

    def __post_init__(self) -> None:
        if not self.name:
            raise ConfigurationError("Bucket name must not be empty", field="name")


@dataclass(frozen=True)
class S3File:
    """Everything needed to run a COPY on one exported table file.

    The suffix is fixed when the object's existence is confirmed;
    instances are never updated.
    """

    bucket: S3Bucket
    schema: str
    table: str
    suffix: str
    data_date: datetime
    subfolder: str
    conf_file: str

    @classmethod
    def build(
        cls,
        bucket: S3Bucket,
        schema: str,
        table: str,
        date: datetime,
        suffix: str = "",
        conf_file: str = "",
    ) -> "S3File":
        """Create a descriptor for a known suffix, deriving the partition
        subfolder and, unless ``conf_file`` is given, the config path."""
        subfolder = render_partition_subfolder(schema, table, date)
        if not conf_file:
            conf_file = render_config_path(bucket, subfolder, schema, table, date)
        return cls(bucket, schema, table, suffix, date, subfolder, conf_file)

    @classmethod
    def from_data_path(cls, path: str, bucket: Optional[S3Bucket] = None) -> "S3File":
        """Rebuild a descriptor from a rendered data path.

        Args:
            path: Data path following the partition layout
            bucket: Bucket to attach; defaults to a bucket carrying only the
                name found in ``path``

        Raises:
            ValueError: If the path does not follow the layout or names a
                different bucket than ``bucket``
        """
        parsed = parse_data_path(path)
        if bucket is None:
            bucket = S3Bucket(name=parsed.bucket)
        elif bucket.name != parsed.bucket:
            raise ValueError(
                f"Path bucket {parsed.bucket!r} does not match {bucket.name!r}"
            )
        return cls.build(bucket, parsed.schema, parsed.table, parsed.date, parsed.suffix)

    @property
    def formatted_date(self) -> str:
        return format_timestamp(self.data_date)

    @property
    def data_path(self) -> str:
        """Full s3:// path of the data object, usable in a COPY command."""
        return render_data_path(
            self.bucket,
            self.subfolder,
            self.schema,
            self.table,
            self.data_date,
            self.suffix,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "bucket": self.bucket.name,
            "region": self.bucket.region,
            "redshift_role_arn": self.bucket.redshift_role_arn,
            "schema": self.schema,
            "table": self.table,
            "suffix": self.suffix,
            "data_date": self.formatted_date,
            "subfolder": self.subfolder,
            "data_path": self.data_path,
            "conf_file": self.conf_file,
        }
