from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from synctarget.config.connection_config import ConnectionConfig, build_config, create_s3_client
from synctarget.config.settings import S3SyncSettings
from synctarget.errors import (
    BucketNotFoundError,
    ConfigurationError,
    bucket_not_found_message,
    error_code,
    error_message,
    format_error_message,
)
from synctarget.logging_config import get_logger, with_context
from synctarget.storage.file_api import FileApi
from synctarget.storage.s3_driver import FileApiDriverAmazonS3
from synctarget.sync_target.base import BaseSyncTarget

logger = get_logger(__name__)

# The config check reports the first failure instead of waiting on retries.
CHECK_TOTAL_MAX_ATTEMPTS = 1


class CheckConfigResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    ok: bool = Field(False, description="True when the bucket was reached with the given settings.")
    error_message: str = Field("", alias="errorMessage", description="Why the check failed; empty on success.")

    @model_validator(mode="after")
    def _message_matches_outcome(self) -> "CheckConfigResult":
        if self.ok and self.error_message:
            raise ValueError("A successful check cannot carry an error message.")
        if not self.ok and not self.error_message:
            raise ValueError("A failed check must carry an error message.")
        return self

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class SyncTargetAmazonS3(BaseSyncTarget):
    """Sync target for AWS S3 and S3-compatible services (MinIO, SeaweedFS, ...).

    The boto3 client is created on first use and kept for the life of the
    instance. Discard the instance to pick up changed connection settings.
    """

    def __init__(self, db: Any, settings, options=None):
        super().__init__(db, settings, options)
        self._api = None

    @classmethod
    def id(cls) -> int:
        return 8

    @classmethod
    def target_name(cls) -> str:
        return "amazon_s3"

    @classmethod
    def label(cls) -> str:
        return "AWS S3 (Beta)"

    @classmethod
    def supports_config_check(cls) -> bool:
        return True

    def is_authenticated(self) -> bool:
        # Credentials are only verified by check_config or the first real request.
        return True

    def s3_settings(self) -> S3SyncSettings:
        return S3SyncSettings.from_settings(self.settings(), self.id())

    def s3_bucket_name(self) -> str:
        return self.s3_settings().path

    def s3_config(self) -> ConnectionConfig:
        return build_config(self.s3_settings())

    def api(self):
        if self._api is None:
            self._api = create_s3_client(self.s3_config())
        return self._api

    @classmethod
    def _new_file_api(cls, options: S3SyncSettings) -> FileApi:
        config = build_config(options)
        client = create_s3_client(config, total_max_attempts=CHECK_TOTAL_MAX_ATTEMPTS)
        driver = FileApiDriverAmazonS3(client, config.bucket)
        file_api = FileApi("", driver)
        file_api.set_sync_target_id(cls.id())
        return file_api

    @classmethod
    def check_config(cls, options: S3SyncSettings) -> CheckConfigResult:
        """Try to reach the bucket described by ``options``.

        Uses its own client, never the one cached on an instance, and makes
        exactly one attempt. Never raises: failures come back in the result.
        """
        bucket = getattr(options, "path", "")
        log = with_context(logger, bucket=bucket, sync_target=cls.target_name())
        try:
            if not bucket:
                raise ConfigurationError("No bucket specified")
            file_api = cls._new_file_api(options)
            file_api.request_repeat_count = 0
            result = file_api.run_request("head_bucket", file_api.driver.head_bucket)
            if not result:
                raise BucketNotFoundError(bucket_not_found_message(bucket))
        except Exception as e:
            code = error_code(e)
            message = format_error_message(error_message(e), code)
            log.warning("S3 config check failed: code=%s error=%s", code, message)
            return CheckConfigResult(ok=False, error_message=message)

        log.info("S3 config check passed")
        return CheckConfigResult(ok=True)

    def init_file_api(self) -> FileApi:
        file_api = FileApi("", FileApiDriverAmazonS3(self.api(), self.s3_bucket_name()))
        file_api.set_sync_target_id(self.id())
        return file_api

    def init_synchronizer(self) -> Any:
        synchronizer_factory = self.option("synchronizer_factory")
        if synchronizer_factory is None:
            raise ConfigurationError("No synchronizer factory configured for the S3 sync target")
        return synchronizer_factory(self.db(), self.file_api(), self.settings().value("appType"))
