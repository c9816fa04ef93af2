from __future__ import annotations

from dataclasses import dataclass

import boto3
import botocore.session
from botocore.config import Config
from botocore.credentials import CredentialResolver, SharedCredentialProvider

from synctarget.config.credentials import Credentials, ExplicitCredentials, SharedFileCredentials, resolve_credentials
from synctarget.config.settings import S3SyncSettings
from synctarget.errors import ConfigurationError
from synctarget.logging_config import get_logger

DEFAULT_REGION = "us-east-1"
DEFAULT_TOTAL_MAX_ATTEMPTS = 3

logger = get_logger(__name__)


@dataclass(frozen=True)
class ConnectionConfig:
    bucket: str
    credentials: Credentials
    endpoint: str = ""
    force_path_style: bool = True
    use_arn_region: bool = True

    def __post_init__(self):
        if not isinstance(self.credentials, (ExplicitCredentials, SharedFileCredentials)):
            raise ConfigurationError(
                "ConnectionConfig requires either an access key pair or a shared credentials file."
            )

    @property
    def credential_kind(self) -> str:
        return "explicit" if isinstance(self.credentials, ExplicitCredentials) else "shared_file"


def build_config(settings: S3SyncSettings) -> ConnectionConfig:
    return ConnectionConfig(
        bucket=settings.path,
        credentials=resolve_credentials(settings),
        endpoint=settings.url,
        force_path_style=True,
        use_arn_region=True,
    )


def _create_session(credentials: Credentials) -> boto3.session.Session:
    if isinstance(credentials, ExplicitCredentials):
        return boto3.session.Session(
            aws_access_key_id=credentials.access_key_id,
            aws_secret_access_key=credentials.secret_access_key,
        )
    # Only the named file is consulted, never env vars or instance metadata.
    core_session = botocore.session.Session()
    provider = SharedCredentialProvider(
        creds_filename=credentials.filename,
        profile_name=credentials.profile or None,
    )
    core_session.register_component("credential_provider", CredentialResolver(providers=[provider]))
    return boto3.session.Session(botocore_session=core_session)


def create_s3_client(config: ConnectionConfig, total_max_attempts: int = DEFAULT_TOTAL_MAX_ATTEMPTS):
    """Build a boto3 S3 client for ``config``. No request is sent.

    ``total_max_attempts`` counts the first request too; 1 disables botocore retries.
    """
    session = _create_session(config.credentials)
    client_kwargs = {
        "region_name": session.region_name or DEFAULT_REGION,
        "config": Config(
            signature_version="s3v4",
            s3={
                "addressing_style": "path" if config.force_path_style else "auto",
                "use_arn_region": config.use_arn_region,
            },
            retries={"total_max_attempts": total_max_attempts, "mode": "standard"},
        ),
    }
    if config.endpoint:
        client_kwargs["endpoint_url"] = config.endpoint
    logger.info(
        "Creating S3 client: bucket=%s endpoint=%s credentials=%s total_max_attempts=%s",
        config.bucket,
        config.endpoint or "<default>",
        config.credential_kind,
        total_max_attempts,
    )
    return session.client("s3", **client_kwargs)
