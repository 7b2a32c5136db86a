"""Canonical object-store path construction for exported warehouse tables.

Every exported table lives under a Hive-style date partition::

    s3://{bucket}/{schema}/{table}/_data_timestamp_year=YYYY/
        _data_timestamp_month=MM/_data_timestamp_day=DD/
        {schema}_{table}_{timestamp}.{suffix}

with a companion ``config_{schema}_{table}_{timestamp}.yml`` beside it.
The timestamp is RFC 3339 at second precision, the same string the
exporter wrote, so the rendered paths must match byte for byte.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Tuple

if TYPE_CHECKING:
    from s3filepath.models import S3Bucket

__all__ = [
    "ParsedDataPath",
    "format_timestamp",
    "render_partition_subfolder",
    "render_data_path",
    "render_config_path",
    "split_s3_uri",
    "parse_data_path",
    "is_config_path",
]

S3_SCHEME = "s3://"
CONFIG_PREFIX = "config_"
CONFIG_EXTENSION = ".yml"

_PARTITION_PATTERN = re.compile(
    r"^s3://(?P<bucket>[^/]+)/(?P<schema>[^/]+)/(?P<table>[^/]+)/"
    r"_data_timestamp_year=(?P<year>\d{4})/"
    r"_data_timestamp_month=(?P<month>\d{2})/"
    r"_data_timestamp_day=(?P<day>\d{2})/"
    r"(?P<filename>[^/]+)$"
)
_TIMESTAMP_SUFFIX_PATTERN = re.compile(
    r"^(?P<timestamp>\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(?:Z|[+-]\d{2}:\d{2}))"
    r"(?:\.(?P<suffix>.+))?$"
)


@dataclass(frozen=True)
class ParsedDataPath:
    """Components recovered from a rendered data path."""

    bucket: str
    schema: str
    table: str
    date: datetime
    suffix: str


def _as_aware(date: datetime) -> datetime:
    if date.tzinfo is None or date.utcoffset() is None:
        return date.replace(tzinfo=timezone.utc)
    return date


def format_timestamp(date: datetime) -> str:
    """Render ``date`` as RFC 3339 with second precision.

    UTC renders with a ``Z`` designator, other offsets as ``+HH:MM``.
    Naive datetimes are taken to be UTC.

    Example:
        >>> format_timestamp(datetime(2021, 3, 5, tzinfo=timezone.utc))
        '2021-03-05T00:00:00Z'
    """
    rendered = _as_aware(date).isoformat(timespec="seconds")
    if rendered.endswith("+00:00"):
        rendered = rendered[: -len("+00:00")] + "Z"
    return rendered


def render_partition_subfolder(schema: str, table: str, date: datetime) -> str:
    """Build the date partition folder for a table export."""
    return (
        f"{schema}/{table}"
        f"/_data_timestamp_year={date.year:04d}"
        f"/_data_timestamp_month={date.month:02d}"
        f"/_data_timestamp_day={date.day:02d}"
    )


def render_data_path(
    bucket: "S3Bucket",
    subfolder: str,
    schema: str,
    table: str,
    date: datetime,
    suffix: str,
) -> str:
    """Build the full data object path.

    An empty ``suffix`` drops the dot as well: uncompressed CSV unloads are
    written without any extension. Any other suffix is appended verbatim
    after a dot, so ``".gz"`` yields ``..gz``.
    """
    path = f"{S3_SCHEME}{bucket.name}/{subfolder}/{schema}_{table}_{format_timestamp(date)}"
    if suffix:
        path = f"{path}.{suffix}"
    return path


def render_config_path(
    bucket: "S3Bucket",
    subfolder: str,
    schema: str,
    table: str,
    date: datetime,
) -> str:
    """Build the path of the companion YAML config object."""
    return (
        f"{S3_SCHEME}{bucket.name}/{subfolder}/"
        f"{CONFIG_PREFIX}{schema}_{table}_{format_timestamp(date)}{CONFIG_EXTENSION}"
    )


def split_s3_uri(path: str) -> Tuple[str, str]:
    """Split ``s3://bucket/key`` into ``(bucket, key)``.

    Raises:
        ValueError: If the path is not an s3:// URI with a bucket.
    """
    if not path.startswith(S3_SCHEME):
        raise ValueError(f"Not an s3:// path: {path!r}")
    bucket, _, key = path[len(S3_SCHEME):].partition("/")
    if not bucket:
        raise ValueError(f"Missing bucket in s3 path: {path!r}")
    return bucket, key


def parse_data_path(path: str) -> ParsedDataPath:
    """Recover bucket, schema, table, date and suffix from a data path.

    This is the inverse of :func:`render_data_path` for paths that follow
    the partition layout.

    Raises:
        ValueError: If ``path`` does not follow the layout, or its partition
            folders disagree with the timestamp in the file name.
    """
    match = _PARTITION_PATTERN.match(path)
    if not match:
        raise ValueError(f"Path does not follow the partition layout: {path!r}")

    schema = match.group("schema")
    table = match.group("table")
    filename = match.group("filename")
    prefix = f"{schema}_{table}_"
    if not filename.startswith(prefix):
        raise ValueError(
            f"File name {filename!r} does not start with {prefix!r}: {path!r}"
        )

    rest = _TIMESTAMP_SUFFIX_PATTERN.match(filename[len(prefix):])
    if not rest:
        raise ValueError(f"File name {filename!r} has no RFC 3339 timestamp")

    # fromisoformat only accepts "Z" from Python 3.11 on
    date = datetime.fromisoformat(rest.group("timestamp").replace("Z", "+00:00"))
    partition = (int(match.group("year")), int(match.group("month")), int(match.group("day")))
    if partition != (date.year, date.month, date.day):
        raise ValueError(
            f"Partition folders {partition} disagree with timestamp in {path!r}"
        )

    return ParsedDataPath(
        bucket=match.group("bucket"),
        schema=schema,
        table=table,
        date=date,
        suffix=rest.group("suffix") or "",
    )


def is_config_path(path: str) -> bool:
    """Return True for companion config objects (``*.yml``)."""
    return path.endswith(CONFIG_EXTENSION)
