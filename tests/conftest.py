from unittest.mock import MagicMock

import pytest

from synctarget.config.settings import MappingSettings


@pytest.fixture(autouse=True)
def clean_aws_env(monkeypatch, tmp_path):
    for var in [
        "AWS_ACCESS_KEY_ID",
        "AWS_SECRET_ACCESS_KEY",
        "AWS_SESSION_TOKEN",
        "AWS_PROFILE",
        "AWS_DEFAULT_PROFILE",
        "AWS_DEFAULT_REGION",
        "AWS_REGION",
        "AWS_SHARED_CREDENTIALS_FILE",
    ]:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("AWS_CONFIG_FILE", str(tmp_path / "no-such-aws-config"))


@pytest.fixture()
def s3_api():
    return MagicMock()


@pytest.fixture()
def explicit_settings() -> MappingSettings:
    return MappingSettings(
        {
            "sync.8.path": "notes-bucket",
            "sync.8.username": "AKIDEXAMPLE",
            "sync.8.password": "secret-example",
            "sync.8.url": "http://localhost:9000",
            "appType": "desktop",
        }
    )
