"""Pytest configuration and shared fixtures for chat-settings tests."""

import pytest

from chat_settings.app.account_store import AccountStore, User
from tests.harness import FakeCredentials, FakeHeader, FakeTransport


@pytest.fixture
def user():
    return User(id="u1", email="a@example.com", username="a", tag="1")


@pytest.fixture
def account(user):
    return AccountStore(user)


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def credentials():
    return FakeCredentials()


@pytest.fixture
def header():
    return FakeHeader()


@pytest.fixture
def tmp_settings(tmp_path, monkeypatch):
    """Redirect settings file to a temp directory."""
    settings_file = tmp_path / "settings.json"
    monkeypatch.setattr(
        "chat_settings.io.settings.get_config_path",
        lambda: settings_file,
    )
    return settings_file
