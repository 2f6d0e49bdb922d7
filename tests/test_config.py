"""Tests for settings loading."""

import pytest
from pydantic import ValidationError

from jobboard.config import Settings, load_settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in Settings.model_fields:
        monkeypatch.delenv(f"JOBBOARD_{name.upper()}", raising=False)


def test_defaults_when_env_is_empty():
    settings = load_settings()
    assert settings.data_file == "data/jobs.json"
    assert settings.session_ttl == 3600
    assert settings.cleanup_interval == 300
    assert settings.generate_delay == 0.0


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("JOBBOARD_SESSION_TTL", "60")
    monkeypatch.setenv("JOBBOARD_GENERATE_DELAY", "1.5")
    monkeypatch.setenv("JOBBOARD_LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("SESSION_TTL", "1")
    settings = load_settings()
    assert settings.session_ttl == 60
    assert settings.generate_delay == 1.5
    assert settings.log_level == "DEBUG"


@pytest.mark.parametrize("key, value", [
    ("JOBBOARD_SESSION_TTL", "0"),
    ("JOBBOARD_SEED_DELAY", "-1"),
    ("JOBBOARD_CLEANUP_INTERVAL", "soon"),
])
def test_invalid_values_raise(monkeypatch, key, value):
    monkeypatch.setenv(key, value)
    with pytest.raises(ValidationError):
        load_settings()
