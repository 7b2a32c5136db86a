"""Tests for ordered candidate resolution."""

import logging
from datetime import timedelta

import pytest

from s3filepath.errors import S3FileNotFoundError
from s3filepath.models import S3File
from s3filepath.resolver import CANDIDATE_SUFFIXES, create_s3_file, resolve

TIMESTAMP = "2021-03-05T00:00:00Z"


def _data_path(partition, suffix):
    path = f"s3://lake/{partition}/sales_orders_{TIMESTAMP}"
    return f"{path}.{suffix}" if suffix else path


def test_candidate_order():
    assert CANDIDATE_SUFFIXES == ("manifest", "json.gz", "json", ".gz", "")


def test_resolve_is_create_s3_file():
    assert resolve is create_s3_file


class TestResolution:
    def test_manifest_only(self, scripted_checker, bucket, partition, export_date):
        checker = scripted_checker([_data_path(partition, "manifest")])

        s3_file = create_s3_file(checker, bucket, "sales", "orders", "", export_date)

        assert s3_file.suffix == "manifest"
        assert s3_file.bucket == bucket
        assert s3_file.subfolder == partition
        assert s3_file.data_path.endswith(f"sales_orders_{TIMESTAMP}.manifest")
        assert s3_file.conf_file == (
            f"s3://lake/{partition}/config_sales_orders_{TIMESTAMP}.yml"
        )
        assert checker.calls == [_data_path(partition, "manifest")]

    def test_earlier_candidate_wins_and_stops(
        self, scripted_checker, bucket, partition, export_date
    ):
        checker = scripted_checker(
            [_data_path(partition, "json.gz"), _data_path(partition, "json")]
        )

        s3_file = create_s3_file(checker, bucket, "sales", "orders", "", export_date)

        assert s3_file.suffix == "json.gz"
        assert checker.calls == [
            _data_path(partition, "manifest"),
            _data_path(partition, "json.gz"),
        ]

    @pytest.mark.parametrize("suffix", ["json", ".gz", ""])
    def test_later_candidates(self, suffix, scripted_checker, bucket, partition, export_date):
        checker = scripted_checker([_data_path(partition, suffix)])

        s3_file = create_s3_file(checker, bucket, "sales", "orders", "", export_date)

        assert s3_file.suffix == suffix
        assert s3_file.data_path == _data_path(partition, suffix)
        assert len(checker.calls) == CANDIDATE_SUFFIXES.index(suffix) + 1

    def test_unsuffixed_csv_path(self, scripted_checker, bucket, partition, export_date):
        checker = scripted_checker([_data_path(partition, "")])

        s3_file = create_s3_file(checker, bucket, "sales", "orders", "", export_date)

        assert s3_file.data_path == f"s3://lake/{partition}/sales_orders_{TIMESTAMP}"

    def test_supplied_config_overrides(self, scripted_checker, bucket, partition, export_date):
        checker = scripted_checker([_data_path(partition, "json")])

        s3_file = create_s3_file(
            checker, bucket, "sales", "orders", "s3://conf/custom.yml", export_date
        )

        assert s3_file.conf_file == "s3://conf/custom.yml"

    def test_matches_build(self, scripted_checker, bucket, partition, export_date):
        checker = scripted_checker([_data_path(partition, "json")])

        s3_file = create_s3_file(checker, bucket, "sales", "orders", "", export_date)

        assert s3_file == S3File.build(bucket, "sales", "orders", export_date, suffix="json")

    def test_logs_hit(self, scripted_checker, bucket, partition, export_date, caplog):
        checker = scripted_checker([_data_path(partition, "json")])

        with caplog.at_level(logging.INFO, logger="s3filepath.resolver"):
            create_s3_file(checker, bucket, "sales", "orders", "", export_date)

        assert "Resolved sales.orders" in caplog.text


class TestNotFound:
    def test_raises_with_context(self, scripted_checker, bucket, partition, export_date):
        checker = scripted_checker()

        with pytest.raises(S3FileNotFoundError) as exc_info:
            create_s3_file(checker, bucket, "sales", "orders", "", export_date)

        err = exc_info.value
        assert err.bucket == "lake"
        assert err.schema == "sales"
        assert err.table == "orders"
        assert err.date == TIMESTAMP
        assert "bucket: lake schema: sales, table: orders date: 2021-03-05T00:00:00Z" in str(err)
        assert checker.calls == [_data_path(partition, s) for s in CANDIDATE_SUFFIXES]

    def test_logs_miss_as_warning(self, scripted_checker, bucket, export_date, caplog):
        with caplog.at_level(logging.WARNING, logger="s3filepath.resolver"):
            with pytest.raises(S3FileNotFoundError):
                create_s3_file(scripted_checker(), bucket, "sales", "orders", "", export_date)

        warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
        assert len(warnings) == 1
        assert warnings[0].getMessage() == (
            f"No export found for sales.orders at {TIMESTAMP} in bucket lake"
        )

    def test_config_file_alone_is_not_a_hit(
        self, scripted_checker, bucket, partition, export_date
    ):
        checker = scripted_checker(
            [f"s3://lake/{partition}/config_sales_orders_{TIMESTAMP}.yml"]
        )

        with pytest.raises(S3FileNotFoundError):
            create_s3_file(checker, bucket, "sales", "orders", "", export_date)

    def test_other_date_not_found(self, scripted_checker, bucket, partition, export_date):
        checker = scripted_checker([_data_path(partition, "json")])

        with pytest.raises(S3FileNotFoundError):
            create_s3_file(
                checker, bucket, "sales", "orders", "", export_date + timedelta(hours=1)
            )

    def test_to_dict(self, scripted_checker, bucket, export_date):
        with pytest.raises(S3FileNotFoundError) as exc_info:
            create_s3_file(scripted_checker(), bucket, "sales", "orders", "", export_date)

        data = exc_info.value.to_dict()
        assert data["error_type"] == "S3FileNotFoundError"
        assert data["details"]["bucket"] == "lake"
        assert data["suggestion"]
