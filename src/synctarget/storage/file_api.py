from __future__ import annotations

import posixpath
import time
from typing import Any, Callable, TypeVar

from synctarget.errors import BackendUnavailableError
from synctarget.logging_config import get_logger, with_context
from synctarget.storage.s3_driver import FileApiDriverAmazonS3, ListResult, RemoteItem

T = TypeVar("T")

DEFAULT_REQUEST_REPEAT_COUNT = 3
DEFAULT_RETRY_DELAY_SECONDS = 1.0
# Codes that will fail the same way on every attempt.
NON_RETRYABLE_CODES = frozenset(
    {
        "AccessDenied",
        "InvalidAccessKeyId",
        "SignatureDoesNotMatch",
        "NoSuchBucket",
        "InvalidBucketName",
        "403",
        "404",
    }
)

logger = get_logger(__name__)


class FileApi:
    """Path-based file operations over a storage driver, rooted at ``base_dir``.

    Every request runs through a retry loop: ``request_repeat_count`` extra
    attempts on transient backend errors, with a linear backoff. Set it to 0
    for a single attempt.
    """

    def __init__(self, base_dir: str, driver: FileApiDriverAmazonS3):
        self._base_dir = base_dir
        self._driver = driver
        self._sync_target_id: int | None = None
        self.request_repeat_count = DEFAULT_REQUEST_REPEAT_COUNT
        self.retry_delay = DEFAULT_RETRY_DELAY_SECONDS

    @property
    def driver(self) -> FileApiDriverAmazonS3:
        return self._driver

    @property
    def base_dir(self) -> str:
        return self._base_dir

    @property
    def sync_target_id(self) -> int | None:
        return self._sync_target_id

    def set_sync_target_id(self, sync_target_id: int) -> None:
        self._sync_target_id = sync_target_id

    def full_path(self, path: str) -> str:
        if not self._base_dir:
            return path
        if not path:
            return self._base_dir
        return posixpath.join(self._base_dir, path)

    def _should_retry(self, error: BackendUnavailableError) -> bool:
        return error.code not in NON_RETRYABLE_CODES

    def run_request(self, name: str, request: Callable[[], T]) -> T:
        attempt = 0
        while True:
            try:
                return request()
            except BackendUnavailableError as e:
                if attempt >= self.request_repeat_count or not self._should_retry(e):
                    raise
                attempt += 1
                delay = self.retry_delay * attempt
                with_context(logger, request=name, sync_target_id=self._sync_target_id).warning(
                    "Retrying storage request: attempt=%s delay_seconds=%.1f error=%s",
                    attempt,
                    delay,
                    e,
                )
                time.sleep(delay)

    def stat(self, path: str) -> RemoteItem | None:
        return self.run_request("stat", lambda: self._driver.stat(self.full_path(path)))

    def get(self, path: str, target: Any = None) -> bytes | str | None:
        return self.run_request("get", lambda: self._driver.get(self.full_path(path), target=target))

    def put(self, path: str, content: bytes | str | None = None, source: Any = None) -> None:
        return self.run_request("put", lambda: self._driver.put(self.full_path(path), content=content, source=source))

    def delete(self, path: str) -> None:
        return self.run_request("delete", lambda: self._driver.delete(self.full_path(path)))

    def mkdir(self, path: str) -> None:
        return self.run_request("mkdir", lambda: self._driver.mkdir(self.full_path(path)))

    def list(self, path: str = "", context: str | None = None) -> ListResult:
        return self.run_request("list", lambda: self._driver.list(self.full_path(path), context=context))

    def clear_root(self) -> int:
        return self.run_request("clear_root", lambda: self._driver.clear_root(self._base_dir))
