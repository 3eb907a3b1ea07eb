import importlib

import pytest

import pushover_client
from pushover_client import config
from pushover_client.config import options_from_env


@pytest.fixture(autouse=True)
def _clear_pushover_env(monkeypatch):
    for name in ("PUSHOVER_TOKEN", "PUSHOVER_USER_KEY", "PUSHOVER_BASE_URL", "PUSHOVER_TIMEOUT"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture()
def reload_config(monkeypatch):
    yield lambda: importlib.reload(config)
    monkeypatch.delenv("PUSHOVER_TIMEOUT", raising=False)
    importlib.reload(config)


def test_options_from_env_reads_credentials(monkeypatch):
    monkeypatch.setenv("PUSHOVER_TOKEN", "app-token")
    monkeypatch.setenv("PUSHOVER_USER_KEY", "user-key")
    monkeypatch.setenv("PUSHOVER_BASE_URL", "https://push.internal/1")

    assert options_from_env() == {
        "token": "app-token",
        "user_key": "user-key",
        "base_url": "https://push.internal/1",
    }


def test_missing_env_is_reported_by_client_validation(monkeypatch):
    monkeypatch.setenv("PUSHOVER_USER_KEY", "user-key")

    options = options_from_env()
    assert options == {"user_key": "user-key"}

    client, err = pushover_client.new(options)
    assert client is None
    assert err == "`opts.token` is required"


def test_timeout_defaults_to_ten_seconds(reload_config):
    assert reload_config().DEFAULT_TIMEOUT == 10.0


def test_timeout_read_from_env(monkeypatch, reload_config):
    monkeypatch.setenv("PUSHOVER_TIMEOUT", "2.5")
    assert reload_config().DEFAULT_TIMEOUT == 2.5


def test_invalid_timeout_fails_at_import(monkeypatch, reload_config):
    monkeypatch.setenv("PUSHOVER_TIMEOUT", "abc")
    with pytest.raises(ValueError):
        reload_config()
