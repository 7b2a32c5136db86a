"""Resolve which export format was written for a table and date.

The exporter does not record whether it wrote a manifest, gzipped JSON,
JSON, gzipped CSV or an unsuffixed CSV unload. The resolver probes the
candidates in priority order and returns the first one that exists.
"""

from __future__ import annotations

import logging
from datetime import datetime

from s3filepath.checker import PathChecker
from s3filepath.errors import S3FileNotFoundError
from s3filepath.models import S3Bucket, S3File
from s3filepath.paths import (
    format_timestamp,
    render_config_path,
    render_partition_subfolder,
)

logger = logging.getLogger(__name__)

__all__ = ["CANDIDATE_SUFFIXES", "create_s3_file", "resolve"]

# Most authoritative first. First match wins even if later candidates exist.
CANDIDATE_SUFFIXES = (
    "manifest",  # manifest listing the data files
    "json.gz",  # gzipped json
    "json",
    ".gz",  # gzipped csv
    "",  # csv, UNLOAD writes it without an extension
)


def create_s3_file(
    checker: PathChecker,
    bucket: S3Bucket,
    schema: str,
    table: str,
    supplied_conf: str,
    date: datetime,
) -> S3File:
    """Find the exported object for ``schema.table`` on ``date``.

    Args:
        checker: Existence check used for each candidate path
        bucket: Bucket the export was written to
        schema: Warehouse schema name
        table: Warehouse table name
        supplied_conf: Config path to use verbatim; derived when empty
        date: Export timestamp, used for the partition and the file name

    Returns:
        S3File for the first candidate suffix that exists

    Raises:
        S3FileNotFoundError: If none of the candidates exist
    """
    subfolder = render_partition_subfolder(schema, table, date)
    conf_file = supplied_conf or render_config_path(
        bucket, subfolder, schema, table, date
    )

    for suffix in CANDIDATE_SUFFIXES:
        candidate = S3File(bucket, schema, table, suffix, date, subfolder, conf_file)
        path = candidate.data_path
        logger.debug("Probing %s", path)
        if checker.file_exists(path):
            logger.info("Resolved %s.%s to %s", schema, table, path)
            return candidate

    formatted_date = format_timestamp(date)
    logger.warning(
        "No export found for %s.%s at %s in bucket %s",
        schema,
        table,
        formatted_date,
        bucket.name,
    )
    raise S3FileNotFoundError(
        bucket=bucket.name, schema=schema, table=table, date=formatted_date
    )


resolve = create_s3_file
