"""Dashboard gate and settings resolution."""
from dataclasses import replace
from datetime import timedelta
from pathlib import Path

import pytest
import streamlit as st

import workerverify.core.config as config
from workerverify.core.config import Settings, load_settings
from workerverify.core.session import open_session, session_is_valid
from workerverify.core.utils import get_config_value


@pytest.fixture
def settings() -> Settings:
    return Settings(dashboard_passkey="s3cret", session_ttl_hours=24)


def test_wrong_passkey_opens_nothing(settings, fixed_now):
    assert open_session("0000", settings, now=fixed_now) is None
    assert session_is_valid(None, fixed_now) is False


def test_session_expires_after_ttl(settings, fixed_now):
    session = open_session("s3cret", settings, now=fixed_now)

    assert session.expires_at == fixed_now + timedelta(hours=24)
    assert session_is_valid(session, fixed_now + timedelta(hours=23, minutes=59))
    assert not session_is_valid(session, fixed_now + timedelta(hours=24, seconds=1))


def test_zero_ttl_never_expires(settings, fixed_now):
    session = open_session("s3cret", replace(settings, session_ttl_hours=0), now=fixed_now)

    assert session.expires_at is None
    assert session.is_active(fixed_now + timedelta(days=365))


@pytest.fixture
def fresh_env_flag(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(config, "_ENV_LOADED", False)


def test_load_settings_defaults(fresh_env_flag, caplog):
    caplog.set_level("WARNING")

    settings = load_settings()

    assert settings.table == "workers"
    assert settings.store_page_size == 1000
    assert settings.dashboard_page_size == 10
    assert settings.match_policy == "split"
    assert settings.match_case_sensitive is None
    assert settings.update_guard is True
    assert settings.dashboard_passkey == "0000"
    assert "DASHBOARD_PASSKEY is not set" in caplog.text


def test_load_settings_reads_environment(fresh_env_flag, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("STORE_URL", "https://example.supabase.co/")
    monkeypatch.setenv("STORE_KEY", "anon")
    monkeypatch.setenv("MATCH_POLICY", "FIXED")
    monkeypatch.setenv("MATCH_CASE_SENSITIVE", "0")
    monkeypatch.setenv("DASHBOARD_PAGE_SIZE", "21")
    monkeypatch.setenv("STORE_PAGE_SIZE", "0")
    monkeypatch.setenv("UPDATE_GUARD", "0")
    monkeypatch.setenv("VERIFY_DELAY_SECONDS", "not-a-number")

    settings = load_settings()

    assert settings.store_url == "https://example.supabase.co"
    assert settings.match_policy == "fixed"
    assert settings.match_case_sensitive is False
    assert settings.dashboard_page_size == 21
    assert settings.store_page_size == 1
    assert settings.update_guard is False
    assert settings.verify_delay == 0.8
    settings.require_store()


def test_env_file_seeds_missing_values(fresh_env_flag, monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    env_file = tmp_path / "portal.env"
    env_file.write_text('# comment\nWORKER_TABLE="ftc_workers"\nDASHBOARD_PASSKEY=from-file\n', encoding="utf-8")
    monkeypatch.setenv("PORTAL_ENV_FILE", str(env_file))
    monkeypatch.setenv("DASHBOARD_PASSKEY", "from-env")
    monkeypatch.setenv("WORKER_TABLE", "placeholder")
    monkeypatch.delenv("WORKER_TABLE")

    settings = load_settings()

    assert settings.table == "ftc_workers"
    assert settings.dashboard_passkey == "from-env"


class _Secrets:
    def __init__(self, values=None, error=None):
        self.values = values or {}
        self.error = error

    def __contains__(self, key):
        if self.error is not None:
            raise self.error
        return key in self.values

    def __getitem__(self, key):
        return self.values[key]


def test_streamlit_secrets_take_precedence(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(st, "secrets", _Secrets({"WORKER_TABLE": "from_secrets"}))
    monkeypatch.setenv("WORKER_TABLE", "from_env")

    assert get_config_value("WORKER_TABLE") == "from_secrets"


def test_missing_secrets_file_falls_back_to_environment(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(st, "secrets", _Secrets(error=FileNotFoundError("no secrets.toml")))
    monkeypatch.setenv("WORKER_TABLE", "from_env")

    assert get_config_value("WORKER_TABLE") == "from_env"


def test_unexpected_secrets_errors_propagate(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(st, "secrets", _Secrets(error=RuntimeError("secrets.toml is not valid TOML")))

    with pytest.raises(RuntimeError, match="not valid TOML"):
        get_config_value("WORKER_TABLE", "workers")
