"""Pytest configuration and fixtures."""

import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, List

import pytest

# Add the project root to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from s3filepath.models import S3Bucket  # noqa: E402


class ScriptedPathChecker:
    """In-memory checker that answers from a fixed set of existing paths
    and records every checked path."""

    def __init__(self, existing: Iterable[str] = ()) -> None:
        self.existing = set(existing)
        self.calls: List[str] = []

    def file_exists(self, path: str) -> bool:
        self.calls.append(path)
        return path in self.existing


@pytest.fixture
def scripted_checker():
    """Factory for ScriptedPathChecker instances."""
    return ScriptedPathChecker


@pytest.fixture
def bucket():
    return S3Bucket(name="lake", region="us-east-1")


@pytest.fixture
def export_date():
    return datetime(2021, 3, 5, tzinfo=timezone.utc)


@pytest.fixture
def partition():
    return "sales/orders/_data_timestamp_year=2021/_data_timestamp_month=03/_data_timestamp_day=05"


@pytest.fixture
def aws_credentials(monkeypatch):
    """Mock AWS credentials for moto."""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")
