from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

from synctarget.config.settings import S3SyncSettings
from synctarget.errors import ConfigurationError


@dataclass(frozen=True)
class ExplicitCredentials:
    access_key_id: str
    secret_access_key: str = field(repr=False)

    def __post_init__(self):
        if not self.access_key_id or not self.secret_access_key:
            raise ConfigurationError("ExplicitCredentials requires both access_key_id and secret_access_key.")


@dataclass(frozen=True)
class SharedFileCredentials:
    filename: str
    profile: str = ""

    def __post_init__(self):
        if not self.filename:
            raise ConfigurationError("SharedFileCredentials requires a credentials file path.")


Credentials = Union[ExplicitCredentials, SharedFileCredentials]


def resolve_credentials(settings: S3SyncSettings) -> Credentials:
    """Pick the credential source to use.

    Explicit access keys win over a shared credentials file. A key id without
    its secret (or the reverse) does not count as explicit credentials. There
    is no fallback to environment or instance credentials.
    """
    if settings.username and settings.password.strip():
        return ExplicitCredentials(access_key_id=settings.username, secret_access_key=settings.password)
    if settings.shared_credential_file:
        return SharedFileCredentials(filename=settings.shared_credential_file, profile=settings.profile)
    raise ConfigurationError("No valid credentials specified")
