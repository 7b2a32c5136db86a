"""Resolve object-store paths of warehouse table exports.

Usage:
    from s3filepath import S3Bucket, S3PathChecker, create_s3_file

    bucket = S3Bucket(name="lake", region="us-east-1")
    s3_file = create_s3_file(S3PathChecker(), bucket, "sales", "orders", "", run_date)
    print(s3_file.data_path, s3_file.conf_file)
"""

from s3filepath.checker import LocalPathChecker, PathChecker, S3PathChecker
from s3filepath.errors import ConfigurationError, S3FileNotFoundError, S3FilePathError
from s3filepath.models import S3Bucket, S3File
from s3filepath.paths import (
    format_timestamp,
    is_config_path,
    parse_data_path,
    render_config_path,
    render_data_path,
    render_partition_subfolder,
)
from s3filepath.resolver import CANDIDATE_SUFFIXES, create_s3_file, resolve

__version__ = "1.0.0"

__all__ = [
    "__version__",
    "CANDIDATE_SUFFIXES",
    "ConfigurationError",
    "LocalPathChecker",
    "PathChecker",
    "S3Bucket",
    "S3File",
    "S3FileNotFoundError",
    "S3FilePathError",
    "S3PathChecker",
    "create_s3_file",
    "format_timestamp",
    "is_config_path",
    "parse_data_path",
    "render_config_path",
    "render_data_path",
    "render_partition_subfolder",
    "resolve",
]
