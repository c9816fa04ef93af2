"""Error types raised by the S3 sync target."""

from __future__ import annotations

from botocore.exceptions import ClientError


def format_error_message(message: str, code: str | None = None) -> str:
    if code:
        return f"{message} (Code {code})"
    return message


class SyncTargetError(Exception):
    """Base error carrying a message and an optional provider error code."""

    def __init__(self, message: str, code: str | None = None):
        self.message = message
        self.code = code
        super().__init__(message)

    def __str__(self) -> str:
        return format_error_message(self.message, self.code)


class ConfigurationError(SyncTargetError):
    """Settings are missing or structurally invalid. Raised before any network call."""


class BackendUnavailableError(SyncTargetError):
    """The storage service or the network path to it failed."""


class BucketNotFoundError(BackendUnavailableError):
    """The configured bucket does not exist or cannot be reached."""


def error_code(error: BaseException) -> str | None:
    if isinstance(error, SyncTargetError):
        return error.code
    if isinstance(error, ClientError):
        return error.response.get("Error", {}).get("Code") or None
    code = getattr(error, "code", None)
    return str(code) if code else None


def error_message(error: BaseException) -> str:
    """Message without the code suffix, falling back to the exception type name."""
    if isinstance(error, SyncTargetError):
        return error.message
    if isinstance(error, ClientError):
        message = error.response.get("Error", {}).get("Message")
        if message:
            return message
    return str(error) or type(error).__name__


def bucket_not_found_message(bucket: str) -> str:
    return f"AWS S3 bucket not found: {bucket}"
