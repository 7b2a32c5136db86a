"""Existence checks for candidate export objects.

A checker answers one question, "does an object exist at this path", by
trying to open it. Checkers never raise for a missing object: absence,
permission errors and transport failures all come back as ``False``.

Any object with a ``file_exists(path) -> bool`` method satisfies
:class:`PathChecker`, which keeps the resolver testable without a store.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional, Protocol, Union

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from s3filepath.paths import split_s3_uri

logger = logging.getLogger(__name__)

__all__ = ["PathChecker", "S3PathChecker", "LocalPathChecker"]

DEFAULT_CONNECT_TIMEOUT = 10
DEFAULT_READ_TIMEOUT = 30


class PathChecker(Protocol):
    """Determines whether a path in the object store exists."""

    def file_exists(self, path: str) -> bool:
        ...


class S3PathChecker:
    """Checks S3 objects by opening them with boto3.

    Supports AWS S3, MinIO, and any S3-compatible object storage.

    Example:
        >>> checker = S3PathChecker(region="us-east-1")
        >>> checker.file_exists("s3://lake/sales/orders/.../sales_orders_2021-03-05T00:00:00Z.json")
        False
    """

    def __init__(
        self,
        client: Any = None,
        *,
        region: Optional[str] = None,
        endpoint_url: Optional[str] = None,
        connect_timeout: float = DEFAULT_CONNECT_TIMEOUT,
        read_timeout: float = DEFAULT_READ_TIMEOUT,
    ) -> None:
        """Initialize the checker.

        Args:
            client: Pre-built boto3 S3 client; built lazily when omitted
            region: AWS region for the lazily built client
            endpoint_url: Custom S3 endpoint (MinIO, LocalStack, etc.)
            connect_timeout: Seconds to wait for a connection per probe
            read_timeout: Seconds to wait for a response per probe
        """
        self._client = client
        self.region = region
        self.endpoint_url = endpoint_url
        self.connect_timeout = connect_timeout
        self.read_timeout = read_timeout

    @property
    def client(self) -> Any:
        """Lazy-load the S3 client."""
        if self._client is None:
            self._client = boto3.client(
                "s3",
                region_name=self.region,
                endpoint_url=self.endpoint_url,
                config=Config(
                    connect_timeout=self.connect_timeout,
                    read_timeout=self.read_timeout,
                ),
            )
            logger.debug(
                "Created S3 client with endpoint: %s",
                self.endpoint_url or "default",
            )
        return self._client

    def file_exists(self, path: str) -> bool:
        """Return True if the object at ``path`` can be opened."""
        try:
            bucket, key = split_s3_uri(path)
        except ValueError as e:
            logger.debug("Not checking %s: %s", path, e)
            return False

        try:
            response = self.client.get_object(Bucket=bucket, Key=key)
        except (BotoCoreError, ClientError) as e:
            logger.debug("Unable to open %s: %s", path, e)
            return False

        response["Body"].close()
        return True


class LocalPathChecker:
    """Checks s3:// paths against a local directory tree.

    ``s3://bucket/key`` maps onto ``<root>/bucket/key``. Useful for local
    development against a copy of an export.
    """

    def __init__(self, root: Union[str, Path]) -> None:
        self.root = Path(root)

    def local_path(self, path: str) -> Path:
        bucket, key = split_s3_uri(path)
        return self.root / bucket / key

    def file_exists(self, path: str) -> bool:
        """Return True if the mapped local file can be opened."""
        try:
            with self.local_path(path).open("rb"):
                return True
        except (OSError, ValueError) as e:
            logger.debug("Unable to open %s: %s", path, e)
            return False
