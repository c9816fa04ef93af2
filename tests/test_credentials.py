"""Tests for credential precedence and the connection config built from it."""

import pytest

from synctarget.config.connection_config import ConnectionConfig, build_config
from synctarget.config.credentials import ExplicitCredentials, SharedFileCredentials, resolve_credentials
from synctarget.config.settings import S3SyncSettings
from synctarget.errors import ConfigurationError


class TestResolveCredentials:
    def test_explicit_keys_win(self):
        settings = S3SyncSettings(
            username="AKID",
            password="secret",
            shared_credential_file="/home/me/.aws/credentials",
            profile="work",
        )
        creds = resolve_credentials(settings)
        assert creds == ExplicitCredentials(access_key_id="AKID", secret_access_key="secret")

    @pytest.mark.parametrize(
        ("username", "password"),
        [
            ("AKID", ""),
            ("", "secret"),
            ("", ""),
        ],
    )
    def test_partial_keys_fall_back_to_shared_file(self, username, password):
        settings = S3SyncSettings(
            username=username,
            password=password,
            shared_credential_file="/home/me/.aws/credentials",
            profile="work",
        )
        creds = resolve_credentials(settings)
        assert creds == SharedFileCredentials(filename="/home/me/.aws/credentials", profile="work")

    def test_shared_file_with_empty_profile(self):
        creds = resolve_credentials(S3SyncSettings(shared_credential_file="/creds"))
        assert isinstance(creds, SharedFileCredentials)
        assert creds.profile == ""

    @pytest.mark.parametrize(
        ("username", "password"),
        [
            ("AKID", ""),
            ("", "secret"),
            ("", ""),
            ("   ", "  "),
        ],
    )
    def test_no_source_raises(self, username, password):
        with pytest.raises(ConfigurationError, match="No valid credentials specified"):
            resolve_credentials(S3SyncSettings(username=username, password=password))

    def test_secret_with_spaces_is_passed_through(self):
        creds = resolve_credentials(S3SyncSettings(username="AKID", password=" s3cret "))
        assert creds == ExplicitCredentials(access_key_id="AKID", secret_access_key=" s3cret ")

    def test_blank_secret_is_not_explicit(self):
        settings = S3SyncSettings(username="AKID", password="   ", shared_credential_file="/creds")
        assert isinstance(resolve_credentials(settings), SharedFileCredentials)

    def test_secret_not_in_repr(self):
        creds = ExplicitCredentials(access_key_id="AKID", secret_access_key="do-not-print")
        assert "do-not-print" not in repr(creds)


class TestBuildConfig:
    @pytest.mark.parametrize(
        "settings",
        [
            S3SyncSettings(path="b", username="AKID", password="secret"),
            S3SyncSettings(path="b", url="https://minio.local", shared_credential_file="/creds"),
            S3SyncSettings(path="", url="", username="AKID", password="secret"),
        ],
    )
    def test_flags_always_on(self, settings):
        config = build_config(settings)
        assert config.force_path_style is True
        assert config.use_arn_region is True

    def test_carries_endpoint_bucket_and_credentials(self):
        config = build_config(S3SyncSettings(path="notes", url="http://localhost:9000", username="AKID", password="s"))
        assert config.bucket == "notes"
        assert config.endpoint == "http://localhost:9000"
        assert config.credentials == ExplicitCredentials("AKID", "s")
        assert config.credential_kind == "explicit"

    def test_empty_endpoint_is_kept(self):
        config = build_config(S3SyncSettings(path="notes", shared_credential_file="/creds"))
        assert config.endpoint == ""
        assert config.credential_kind == "shared_file"

    def test_fresh_config_each_call(self):
        settings = S3SyncSettings(path="notes", username="AKID", password="s")
        assert build_config(settings) is not build_config(settings)

    def test_propagates_missing_credentials(self):
        with pytest.raises(ConfigurationError):
            build_config(S3SyncSettings(path="notes"))

    def test_config_requires_a_credential_variant(self):
        with pytest.raises(ConfigurationError):
            ConnectionConfig(bucket="notes", credentials=None)
