"""
Pytest configuration and fixtures for OpenProject provider tests.
"""

import pytest

from openproject_provider.models import ConnectionContext, UserSpec
from openproject_provider import settings as settings_module
from openproject_provider.settings import reload_settings

BASE_URL = "https://openproject.example.com"
USERS_URL = f"{BASE_URL}/api/v3/users"


@pytest.fixture
def context():
    """Connection context pointing at a fake OpenProject."""
    return ConnectionContext(base_url=BASE_URL, api_key="secret-key")


@pytest.fixture
def spec():
    """The jdoe user used throughout the tests."""
    return UserSpec(
        username="jdoe",
        email="j@x.com",
        firstname="J",
        lastname="Doe",
        password="pw",
    )


@pytest.fixture
def user_body():
    """Body of GET /api/v3/users/42 for jdoe."""
    return {
        "_type": "User",
        "id": 42,
        "login": "jdoe",
        "email": "j@x.com",
        "firstName": "J",
        "lastName": "Doe",
        "status": "active",
    }


@pytest.fixture
def clean_settings(monkeypatch, tmp_path):
    """Settings built from a clean environment and an empty working directory."""
    for name in (
        "OP_APP_URL",
        "OP_APIKEY",
        "OP_REQUEST_TIMEOUT",
        "OP_LOG_LEVEL",
        "OP_PULUMI_STATE_DIR",
        "OP_STACK_NAME",
        "PULUMI_CONFIG_PASSPHRASE",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    settings = reload_settings()
    yield settings
    settings_module._settings = None
