"""Tests for the exception hierarchy."""

from s3filepath.errors import ConfigurationError, S3FileNotFoundError, S3FilePathError


def test_plain_message():
    err = S3FilePathError("boom")
    assert str(err) == "boom"
    assert err.to_dict()["details"] == {}


def test_not_found_is_base_error():
    err = S3FileNotFoundError(bucket="lake", schema="sales", table="orders", date="2021-03-05T00:00:00Z")

    assert isinstance(err, S3FilePathError)
    assert err.message == (
        "s3 file not found at: bucket: lake schema: sales, table: orders "
        "date: 2021-03-05T00:00:00Z"
    )
    assert "Suggestion:" in str(err)


def test_not_found_custom_suggestion():
    err = S3FileNotFoundError(
        bucket="lake", schema="s", table="t", date="d", suggestion="Try tomorrow."
    )
    assert err.suggestion == "Try tomorrow."


def test_configuration_error_details():
    err = ConfigurationError("Bucket name is required", field="bucket.name", value="")

    assert err.details == {"field": "bucket.name", "value": ""}
    assert "field: bucket.name" in str(err)
