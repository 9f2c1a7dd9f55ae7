"""Unit tests for CancellationConfig."""

import os

import pytest

from cancellation.config import CancellationConfig, _load_env_files
from cancellation.errors import ConfigurationError

ENV_NAMES = [
    "CANCELLATION_API_BASE_URL",
    "CANCELLATION_API_TIMEOUT",
    "CANCELLATION_DENIAL_CODES",
    "CANCELLATION_STORE_BACKEND",
    "CANCELLATION_STORE_PATH",
    "CANCELLATION_EXECUTION_MODE",
    "CANCELLATION_SUPPORT_EMAIL",
    "REDIS_URL",
    "LOG_LEVEL",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_NAMES:
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    cfg = CancellationConfig(env_files={})

    assert cfg.API_BASE_URL == "http://localhost:3000"
    assert cfg.API_TIMEOUT == 30.0
    assert cfg.STORE_BACKEND == "file"
    assert cfg.STORE_PATH == os.path.expanduser("~/.staykaru/cancellation_requests.json")
    assert cfg.EXECUTION_MODE == "production"
    assert cfg.REDIS_URL is None
    assert "CANCELLATION_DENIED" in cfg.DENIAL_CODES


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("CANCELLATION_API_BASE_URL", "https://api.example.test")
    monkeypatch.setenv("CANCELLATION_API_TIMEOUT", "5")
    monkeypatch.setenv("CANCELLATION_STORE_BACKEND", "Redis")
    monkeypatch.setenv("CANCELLATION_DENIAL_CODES", " landlord_only , ,policy_locked")

    cfg = CancellationConfig(env_files={})

    assert cfg.API_BASE_URL == "https://api.example.test"
    assert cfg.API_TIMEOUT == 5.0
    assert cfg.STORE_BACKEND == "redis"
    assert cfg.DENIAL_CODES == ["LANDLORD_ONLY", "POLICY_LOCKED"]


def test_env_file_values_used_when_environment_unset():
    cfg = CancellationConfig(env_files={"CANCELLATION_SUPPORT_EMAIL": "ops@example.test"})

    assert cfg.SUPPORT_EMAIL == "ops@example.test"


def test_environment_beats_env_file(monkeypatch):
    monkeypatch.setenv("CANCELLATION_SUPPORT_EMAIL", "env@example.test")

    cfg = CancellationConfig(env_files={"CANCELLATION_SUPPORT_EMAIL": "file@example.test"})

    assert cfg.SUPPORT_EMAIL == "env@example.test"


def test_env_local_takes_precedence(tmp_path):
    (tmp_path / ".env").write_text("LOG_LEVEL=WARNING\nREDIS_URL=redis://base\n")
    (tmp_path / ".env.local").write_text("LOG_LEVEL=DEBUG\n")

    values = _load_env_files(tmp_path)

    assert values["LOG_LEVEL"] == "DEBUG"
    assert values["REDIS_URL"] == "redis://base"


def test_to_dict_lists_settings():
    data = CancellationConfig(env_files={}).to_dict()

    assert data["STORE_BACKEND"] == "file"
    assert "_file_values" not in data


@pytest.mark.parametrize("timeout", ["thirty", "30s"])
def test_non_numeric_timeout_is_a_configuration_error(monkeypatch, timeout):
    monkeypatch.setenv("CANCELLATION_API_TIMEOUT", timeout)

    with pytest.raises(ConfigurationError, match="CANCELLATION_API_TIMEOUT"):
        CancellationConfig(env_files={})


def test_non_numeric_timeout_in_env_file():
    with pytest.raises(ConfigurationError):
        CancellationConfig(env_files={"CANCELLATION_API_TIMEOUT": "abc"})
