"""Tests for environment and timeout configuration."""

import importlib

import pytest

from schedule_service.config import environment
from schedule_service.config.timeouts import TimeoutConfig


@pytest.fixture
def reload_environment(monkeypatch):
    def _reload():
        return importlib.reload(environment)
    yield _reload
    monkeypatch.undo()
    importlib.reload(environment)


def test_server_settings_from_env(monkeypatch, reload_environment):
    monkeypatch.setenv("ENVIRONMENT", "Production")
    monkeypatch.setenv("HOST", "127.0.0.1")
    monkeypatch.setenv("PORT", "9090")

    env = reload_environment()

    assert env.IS_PRODUCTION_ENVIRONMENT is True
    assert env.SERVER_HOST == "127.0.0.1"
    assert env.SERVER_PORT == 9090


def test_unknown_environment_falls_back_to_development(monkeypatch, reload_environment):
    monkeypatch.setenv("ENVIRONMENT", "staging")
    monkeypatch.delenv("PORT", raising=False)

    env = reload_environment()

    assert env.ENVIRONMENT == "development"
    assert env.IS_PRODUCTION_ENVIRONMENT is False
    assert env.SERVER_PORT == env.DEFAULT_PORT


def test_invalid_port_is_rejected(monkeypatch, reload_environment):
    monkeypatch.setenv("PORT", "eighty")
    with pytest.raises(ValueError):
        reload_environment()


def test_timeouts_from_env(monkeypatch):
    monkeypatch.setenv("REQUEST_TIMEOUT_SECONDS", "2")
    monkeypatch.setenv("STORE_TIMEOUT_SECONDS", "5")
    monkeypatch.delenv("PING_TIMEOUT_SECONDS", raising=False)

    timeouts = TimeoutConfig()

    assert timeouts.request_timeout == 2
    # Capped by the request timeout
    assert timeouts.store_timeout == 2
    assert timeouts.ping_timeout == 5
