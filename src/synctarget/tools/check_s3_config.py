"""Check that S3 sync settings can reach their bucket, without touching sync state."""

from __future__ import annotations

import argparse
import json
import sys

from synctarget.config.settings import EnvironmentSettings, S3SyncSettings
from synctarget.logging_config import configure_logging, get_logger
from synctarget.sync_target.amazon_s3 import SyncTargetAmazonS3

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--env", action="store_true", help="Read settings from SYNCTARGET_SYNC_8_* environment variables.")
    parser.add_argument("--bucket", default="", help="Bucket name (sync.8.path).")
    parser.add_argument("--endpoint", default="", help="Endpoint URL for S3-compatible services (sync.8.url).")
    parser.add_argument("--access-key", default="", help="Access key id (sync.8.username).")
    parser.add_argument("--secret-key", default="", help="Secret access key (sync.8.password).")
    parser.add_argument("--shared-credential-file", default="", help="Shared credentials file (sync.8.sharedCredentialFile).")
    parser.add_argument("--profile", default="", help="Profile inside the shared credentials file (sync.8.profile).")
    parser.add_argument("--log-level", default=None)
    return parser


def options_from_args(args: argparse.Namespace) -> S3SyncSettings:
    if args.env:
        return S3SyncSettings.from_settings(EnvironmentSettings(), SyncTargetAmazonS3.id())
    return S3SyncSettings(
        path=args.bucket,
        url=args.endpoint,
        username=args.access_key,
        password=args.secret_key,
        shared_credential_file=args.shared_credential_file,
        profile=args.profile,
    )


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(level=args.log_level, service="synctarget.tools.check_s3_config")
    options = options_from_args(args)
    logger.info("Checking S3 sync configuration: bucket=%s endpoint=%s", options.path, options.url or "<default>")
    result = SyncTargetAmazonS3.check_config(options)
    print(json.dumps(result.to_dict()))
    return 0 if result.ok else 1


if __name__ == "__main__":
    sys.exit(main())
