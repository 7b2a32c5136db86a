"""YAML configuration for buckets and existence checks.

Example YAML (lake.yaml):
    bucket:
      name: ${DATA_BUCKET}
      region: us-east-1
      redshift_role_arn: arn:aws:iam::123456789012:role/loader
    checker:
      endpoint_url: http://localhost:9000
      connect_timeout: 5
      read_timeout: 10

String values may reference environment variables as ``${VAR}`` or
``$VAR``; a ``.env`` file can be loaded first with :func:`load_env_file`.
A reference to an unset variable is a configuration error.
"""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from dotenv import load_dotenv

from s3filepath.checker import (
    DEFAULT_CONNECT_TIMEOUT,
    DEFAULT_READ_TIMEOUT,
    S3PathChecker,
)
from s3filepath.errors import ConfigurationError
from s3filepath.models import S3Bucket

logger = logging.getLogger(__name__)

__all__ = [
    "BucketConfig",
    "CheckerSettings",
    "expand_env_vars",
    "expand_options",
    "load_bucket_config",
    "load_env_file",
]

# Pattern for ${VAR_NAME} or $VAR_NAME
ENV_VAR_PATTERN = re.compile(r"\$\{([^}]+)\}|\$([A-Za-z_][A-Za-z0-9_]*)")


def load_env_file(path: Optional[Union[str, Path]] = None) -> bool:
    """Load environment variables from a .env file.

    Variables already set in the environment are kept.

    Returns:
        True if a .env file was found and loaded, False otherwise.
    """
    return load_dotenv(dotenv_path=path)


def expand_env_vars(value: str) -> str:
    """Expand ``${VAR}`` and ``$VAR`` references in a string.

    Raises:
        KeyError: If a referenced variable is not set

    Example:
        >>> os.environ["DATA_BUCKET"] = "lake"
        >>> expand_env_vars("${DATA_BUCKET}")
        'lake'
    """

    def replacer(match: "re.Match[str]") -> str:
        var_name = match.group(1) or match.group(2)
        env_value = os.environ.get(var_name)
        if env_value is None:
            raise KeyError(f"Environment variable not set: {var_name}")
        return env_value

    return ENV_VAR_PATTERN.sub(replacer, value)


def expand_options(options: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively expand environment variables in an options dict."""
    result: Dict[str, Any] = {}

    for key, value in options.items():
        if isinstance(value, str):
            result[key] = expand_env_vars(value)
        elif isinstance(value, dict):
            result[key] = expand_options(value)
        elif isinstance(value, list):
            result[key] = [
                expand_env_vars(item) if isinstance(item, str) else item
                for item in value
            ]
        else:
            result[key] = value

    return result


@dataclass(frozen=True)
class CheckerSettings:
    """Connection settings for :class:`S3PathChecker`."""

    region: Optional[str] = None
    endpoint_url: Optional[str] = None
    connect_timeout: float = DEFAULT_CONNECT_TIMEOUT
    read_timeout: float = DEFAULT_READ_TIMEOUT


@dataclass(frozen=True)
class BucketConfig:
    """A bucket plus the settings used to probe it."""

    bucket: S3Bucket
    checker: CheckerSettings = field(default_factory=CheckerSettings)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BucketConfig":
        """Build from a parsed (and env-expanded) configuration dict.

        Raises:
            ConfigurationError: If the bucket section or its name is missing,
                or a timeout is not a number
        """
        bucket_data = data.get("bucket")
        if not isinstance(bucket_data, dict):
            raise ConfigurationError(
                "Missing 'bucket' section",
                field="bucket",
                suggestion="Add a 'bucket:' mapping with at least 'name'.",
            )

        name = bucket_data.get("name")
        if not name or not isinstance(name, str):
            raise ConfigurationError(
                "Bucket name is required",
                field="bucket.name",
                value=name,
                suggestion="Set bucket.name, or export the variable it references.",
            )

        bucket = S3Bucket(
            name=name,
            region=str(bucket_data.get("region") or ""),
            redshift_role_arn=str(bucket_data.get("redshift_role_arn") or ""),
        )

        checker_data = data.get("checker") or {}
        if not isinstance(checker_data, dict):
            raise ConfigurationError("'checker' must be a mapping", field="checker")

        try:
            checker = CheckerSettings(
                region=checker_data.get("region") or bucket.region or None,
                endpoint_url=checker_data.get("endpoint_url") or None,
                connect_timeout=float(
                    checker_data.get("connect_timeout", DEFAULT_CONNECT_TIMEOUT)
                ),
                read_timeout=float(
                    checker_data.get("read_timeout", DEFAULT_READ_TIMEOUT)
                ),
            )
        except (TypeError, ValueError) as e:
            raise ConfigurationError(
                f"Invalid checker timeout: {e}", field="checker"
            ) from e

        return cls(bucket=bucket, checker=checker)

    def build_checker(self) -> S3PathChecker:
        """Create an S3PathChecker using these settings."""
        return S3PathChecker(
            region=self.checker.region,
            endpoint_url=self.checker.endpoint_url,
            connect_timeout=self.checker.connect_timeout,
            read_timeout=self.checker.read_timeout,
        )


def load_bucket_config(path: Union[str, Path]) -> BucketConfig:
    """Load a bucket configuration from a YAML file.

    Raises:
        ConfigurationError: If the file is missing, is not valid YAML, or
            does not describe a bucket
    """
    config_path = Path(path)
    if not config_path.exists():
        raise ConfigurationError(
            f"Bucket config not found: {config_path}", field="path", value=config_path
        )

    try:
        with config_path.open(encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(
            f"Invalid YAML in {config_path}: {e}", field="path", value=config_path
        ) from e

    if not isinstance(raw, dict):
        raise ConfigurationError(
            f"Bucket config must be a mapping: {config_path}",
            field="path",
            value=config_path,
        )

    try:
        expanded = expand_options(raw)
    except KeyError as e:
        raise ConfigurationError(
            f"{e.args[0]} (in {config_path})", field="path", value=config_path
        ) from e

    config = BucketConfig.from_dict(expanded)
    logger.debug("Loaded bucket config for '%s' from %s", config.bucket.name, config_path)
    return config
