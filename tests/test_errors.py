"""Tests for error formatting and code extraction."""

from botocore.exceptions import ClientError

from synctarget.errors import (
    BackendUnavailableError,
    BucketNotFoundError,
    ConfigurationError,
    bucket_not_found_message,
    error_code,
    error_message,
    format_error_message,
)


def test_format_with_code():
    assert format_error_message("Access Denied", "AccessDenied") == "Access Denied (Code AccessDenied)"


def test_format_without_code():
    assert format_error_message("boom") == "boom"
    assert format_error_message("boom", "") == "boom"


def test_str_includes_code():
    error = BackendUnavailableError("connect failed", code="NetworkingError")
    assert str(error) == "connect failed (Code NetworkingError)"
    assert error.message == "connect failed"
    assert error.code == "NetworkingError"


def test_configuration_error_has_no_code():
    error = ConfigurationError("No valid credentials specified")
    assert str(error) == "No valid credentials specified"
    assert error_code(error) is None


def test_bucket_not_found_is_backend_error():
    error = BucketNotFoundError(bucket_not_found_message("notes"))
    assert isinstance(error, BackendUnavailableError)
    assert "notes" in str(error)


def test_client_error_code_and_message():
    error = ClientError({"Error": {"Code": "AccessDenied", "Message": "Access Denied"}}, "HeadBucket")
    assert error_code(error) == "AccessDenied"
    assert error_message(error) == "Access Denied"


def test_plain_exception():
    assert error_code(ValueError("bad")) is None
    assert error_message(ValueError("bad")) == "bad"
    assert error_message(RuntimeError()) == "RuntimeError"
