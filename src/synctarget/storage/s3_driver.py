from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from botocore.exceptions import (
    BotoCoreError,
    ClientError,
    ConnectionClosedError,
    ConnectTimeoutError,
    EndpointConnectionError,
    NoCredentialsError,
    PartialCredentialsError,
    ProfileNotFound,
    ReadTimeoutError,
)

from synctarget.errors import (
    BackendUnavailableError,
    BucketNotFoundError,
    ConfigurationError,
    SyncTargetError,
    bucket_not_found_message,
    error_message,
)
from synctarget.logging_config import get_logger

NETWORKING_ERROR_CODE = "NetworkingError"
_NOT_FOUND_CODES = {"404", "NoSuchKey", "NotFound"}
_NETWORK_ERRORS = (EndpointConnectionError, ConnectTimeoutError, ReadTimeoutError, ConnectionClosedError)
_CREDENTIAL_ERRORS = (NoCredentialsError, PartialCredentialsError, ProfileNotFound)
# delete_objects accepts at most 1000 keys per request
_DELETE_BATCH_SIZE = 1000

logger = get_logger(__name__)


@dataclass(frozen=True)
class RemoteItem:
    path: str
    updated_time: int
    is_dir: bool = False
    size: int | None = None


@dataclass(frozen=True)
class ListResult:
    items: list[RemoteItem]
    has_more: bool = False
    context: str | None = None


def translate_error(error: Exception) -> SyncTargetError:
    if isinstance(error, SyncTargetError):
        return error
    if isinstance(error, ClientError):
        code = error.response.get("Error", {}).get("Code") or None
        return BackendUnavailableError(error_message(error), code=code)
    if isinstance(error, _CREDENTIAL_ERRORS):
        return ConfigurationError(str(error))
    if isinstance(error, _NETWORK_ERRORS):
        return BackendUnavailableError(str(error), code=NETWORKING_ERROR_CODE)
    if isinstance(error, BotoCoreError):
        return BackendUnavailableError(str(error))
    raise TypeError(f"Cannot translate {type(error).__name__} into a storage error") from error


def _error_code(error: ClientError) -> str | None:
    return error.response.get("Error", {}).get("Code")


def _to_timestamp_ms(value: datetime | None) -> int:
    if value is None:
        return 0
    return int(value.timestamp() * 1000)


class FileApiDriverAmazonS3:
    """Storage driver over a boto3 S3 client, scoped to a single bucket."""

    def __init__(self, api, bucket_name: str):
        self._api = api
        self.bucket_name = bucket_name

    @property
    def api(self):
        return self._api

    def _object_key(self, path: str) -> str:
        return path.lstrip("/")

    def _request(self, operation: str, **params):
        method = getattr(self._api, operation)
        try:
            return method(Bucket=self.bucket_name, **params)
        except (ClientError, BotoCoreError) as e:
            raise translate_error(e) from e

    def head_bucket(self):
        try:
            return self._api.head_bucket(Bucket=self.bucket_name)
        except ClientError as e:
            code = _error_code(e)
            if code in _NOT_FOUND_CODES or code == "NoSuchBucket":
                raise BucketNotFoundError(bucket_not_found_message(self.bucket_name), code=code) from e
            raise translate_error(e) from e
        except BotoCoreError as e:
            raise translate_error(e) from e

    def stat(self, path: str) -> RemoteItem | None:
        key = self._object_key(path)
        try:
            response = self._api.head_object(Bucket=self.bucket_name, Key=key)
        except ClientError as e:
            if _error_code(e) in _NOT_FOUND_CODES:
                return None
            raise translate_error(e) from e
        except BotoCoreError as e:
            raise translate_error(e) from e
        return RemoteItem(
            path=path,
            updated_time=_to_timestamp_ms(response.get("LastModified")),
            size=response.get("ContentLength"),
        )

    def get(self, path: str, target: str | Path | None = None) -> bytes | str | None:
        """Read an object.

        Returns the body as bytes, or writes it to ``target`` and returns that
        path. Returns None when the object does not exist.
        """
        key = self._object_key(path)
        try:
            response = self._api.get_object(Bucket=self.bucket_name, Key=key)
        except ClientError as e:
            if _error_code(e) in _NOT_FOUND_CODES:
                return None
            raise translate_error(e) from e
        except BotoCoreError as e:
            raise translate_error(e) from e

        body = response["Body"].read()
        if target is None:
            return body
        target_path = Path(target)
        target_path.parent.mkdir(parents=True, exist_ok=True)
        target_path.write_bytes(body)
        return str(target_path)

    def put(self, path: str, content: bytes | str | None = None, source: str | Path | None = None) -> None:
        if source is not None:
            data = Path(source).read_bytes()
        elif isinstance(content, str):
            data = content.encode("utf-8")
        elif content is not None:
            data = content
        else:
            raise ValueError("put() requires either content or source.")
        self._request("put_object", Key=self._object_key(path), Body=data)

    def delete(self, path: str) -> None:
        self._request("delete_object", Key=self._object_key(path))

    def mkdir(self, path: str) -> None:
        # S3 has no directories; keys with a shared prefix behave as one.
        return None

    def list(self, path: str = "", context: str | None = None) -> ListResult:
        prefix = self._object_key(path)
        if prefix and not prefix.endswith("/"):
            prefix += "/"
        params = {"Prefix": prefix}
        if context:
            params["ContinuationToken"] = context
        response = self._request("list_objects_v2", **params)

        items = []
        for obj in response.get("Contents", []):
            relative = obj["Key"][len(prefix):]
            if not relative:
                continue
            items.append(
                RemoteItem(
                    path=relative,
                    updated_time=_to_timestamp_ms(obj.get("LastModified")),
                    size=obj.get("Size"),
                )
            )
        has_more = bool(response.get("IsTruncated"))
        return ListResult(items=items, has_more=has_more, context=response.get("NextContinuationToken") if has_more else None)

    def clear_root(self, base_path: str = "") -> int:
        """Delete every object under ``base_path``. Returns the number of keys removed."""
        prefix = self._object_key(base_path)
        prefix = f"{prefix.rstrip('/')}/" if prefix else ""
        deleted = 0
        context = None
        while True:
            listing = self.list(base_path, context=context)
            keys = [{"Key": prefix + item.path} for item in listing.items]
            for start in range(0, len(keys), _DELETE_BATCH_SIZE):
                batch = keys[start:start + _DELETE_BATCH_SIZE]
                response = self._request("delete_objects", Delete={"Objects": batch, "Quiet": True})
                # S3 reports per-key failures in a 200 response.
                errors = response.get("Errors") or []
                deleted += len(batch) - len(errors)
                if errors:
                    logger.error(
                        "Failed to delete objects: bucket=%s failed=%s deleted=%s keys=%s",
                        self.bucket_name,
                        len(errors),
                        deleted,
                        [error.get("Key") for error in errors],
                    )
                    first = errors[0]
                    message = first.get("Message") or f"Failed to delete {first.get('Key')}"
                    raise BackendUnavailableError(message, code=first.get("Code") or None)
            if not listing.has_more:
                break
            context = listing.context
        logger.info("Cleared remote root: bucket=%s prefix=%s deleted=%s", self.bucket_name, base_path, deleted)
        return deleted
