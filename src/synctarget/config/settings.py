from __future__ import annotations

import os
from typing import Any, Mapping, Optional, Protocol

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SettingsReader(Protocol):
    def value(self, key: str) -> Any: ...


class MappingSettings:
    """Read-only settings backed by a plain mapping. Unknown keys read as ''."""

    def __init__(self, values: Mapping[str, Any] | None = None):
        self._values = dict(values or {})

    def value(self, key: str) -> Any:
        return self._values.get(key, "")


class EnvironmentSettings:
    """Settings read from environment variables.

    ``sync.8.sharedCredentialFile`` is looked up as ``SYNCTARGET_SYNC_8_SHAREDCREDENTIALFILE``.
    """

    def __init__(self, prefix: str = "SYNCTARGET_", environ: Mapping[str, str] | None = None):
        self.prefix = prefix
        self._environ = os.environ if environ is None else environ

    def env_var_name(self, key: str) -> str:
        return self.prefix + key.replace(".", "_").upper()

    def value(self, key: str) -> Any:
        return self._environ.get(self.env_var_name(key), "")


def sync_setting_key(sync_target_id: int, name: str) -> str:
    return f"sync.{sync_target_id}.{name}"


class S3SyncSettings(BaseModel):
    """Connection settings for an S3 sync target.

    Also used as the candidate ``options`` for a config check, so a settings
    screen can test values before they are saved.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)

    path: str = Field("", description="Bucket name.")
    username: str = Field("", description="Access key id.")
    password: str = Field("", description="Secret access key.", repr=False)
    url: str = Field("", description="Endpoint URL; empty means the service default.")
    shared_credential_file: str = Field("", alias="sharedCredentialFile", description="Path to a shared credentials file.")
    profile: str = Field("", description="Profile inside the shared credentials file; empty means default.")

    @field_validator("*", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Optional[Any]) -> Any:
        if value is None:
            return ""
        return value

    @field_validator("path", "username", "url", "shared_credential_file", "profile", mode="after")
    @classmethod
    def _strip(cls, value: str) -> str:
        # The secret is kept verbatim.
        return value.strip()

    @classmethod
    def from_settings(cls, settings: SettingsReader, sync_target_id: int) -> "S3SyncSettings":
        return cls.model_validate(
            {
                "path": settings.value(sync_setting_key(sync_target_id, "path")),
                "username": settings.value(sync_setting_key(sync_target_id, "username")),
                "password": settings.value(sync_setting_key(sync_target_id, "password")),
                "url": settings.value(sync_setting_key(sync_target_id, "url")),
                "sharedCredentialFile": settings.value(sync_setting_key(sync_target_id, "sharedCredentialFile")),
                "profile": settings.value(sync_setting_key(sync_target_id, "profile")),
            }
        )
