"""Runtime settings assembled from Streamlit secrets, env files, and the environment."""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from workerverify.core.utils import get_config_value, load_env_file

logger = logging.getLogger(__name__)

DEFAULT_ENV_FILE = Path("secrets/portal.env")
DEFAULT_PASSKEY = "0000"
_ENV_LOADED = False


def _ensure_portal_env() -> None:
    """Populate portal env vars from secrets/portal.env once per process."""

    global _ENV_LOADED
    if _ENV_LOADED:
        return
    _ENV_LOADED = True

    env_path = Path(os.getenv("PORTAL_ENV_FILE", DEFAULT_ENV_FILE))
    load_env_file(env_path)


def _as_int(key: str, default: int) -> int:
    raw = get_config_value(key, str(default)).strip()
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring non-integer %s=%r; using %d", key, raw, default)
        return default


def _as_float(key: str, default: float) -> float:
    raw = get_config_value(key, str(default)).strip()
    try:
        return float(raw)
    except ValueError:
        logger.warning("Ignoring non-numeric %s=%r; using %s", key, raw, default)
        return default


def _as_flag(key: str, default: bool) -> bool:
    return get_config_value(key, "1" if default else "0").strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    store_url: str = ""
    store_key: str = ""
    table: str = "workers"
    store_page_size: int = 1000
    store_timeout: float = 30.0
    match_policy: str = "split"
    match_case_sensitive: Optional[bool] = None
    verify_delay: float = 0.8
    update_guard: bool = True
    dashboard_passkey: str = DEFAULT_PASSKEY
    session_ttl_hours: float = 24.0
    dashboard_page_size: int = 10
    handbook_url: str = ""
    organization_name: str = "Worker Verification"
    export_date_format: str = "%d/%m/%Y"
    sheets_spreadsheet_id: str = ""
    sheets_worksheet: str = "Workers Data"
    sheets_service_account: str = ""

    def require_store(self) -> None:
        """Raise when the remote store is not configured."""

        missing = [name for name, value in (("STORE_URL", self.store_url), ("STORE_KEY", self.store_key)) if not value]
        if missing:
            raise ValueError(
                f"Missing {', '.join(missing)}. Set them in the environment, Streamlit secrets, "
                f"or {DEFAULT_ENV_FILE}."
            )


def load_settings() -> Settings:
    """Read every portal setting, falling back to the documented defaults."""

    _ensure_portal_env()
    case_raw = get_config_value("MATCH_CASE_SENSITIVE", "").strip()
    passkey = get_config_value("DASHBOARD_PASSKEY", "")
    if not passkey:
        logger.warning("DASHBOARD_PASSKEY is not set; using the built-in default passkey.")
        passkey = DEFAULT_PASSKEY

    return Settings(
        store_url=get_config_value("STORE_URL", "").rstrip("/"),
        store_key=get_config_value("STORE_KEY", ""),
        table=get_config_value("WORKER_TABLE", "workers"),
        store_page_size=max(1, _as_int("STORE_PAGE_SIZE", 1000)),
        store_timeout=_as_float("STORE_TIMEOUT", 30.0),
        match_policy=get_config_value("MATCH_POLICY", "split").strip().lower(),
        match_case_sensitive=(case_raw.lower() in {"1", "true", "yes", "on"}) if case_raw else None,
        verify_delay=_as_float("VERIFY_DELAY_SECONDS", 0.8),
        update_guard=_as_flag("UPDATE_GUARD", True),
        dashboard_passkey=passkey,
        session_ttl_hours=_as_float("SESSION_TTL_HOURS", 24.0),
        dashboard_page_size=max(1, _as_int("DASHBOARD_PAGE_SIZE", 10)),
        handbook_url=get_config_value("HANDBOOK_URL", ""),
        organization_name=get_config_value("ORGANIZATION_NAME", "Worker Verification"),
        export_date_format=get_config_value("EXPORT_DATE_FORMAT", "%d/%m/%Y"),
        sheets_spreadsheet_id=get_config_value("GOOGLE_SHEETS_SPREADSHEET_ID", ""),
        sheets_worksheet=get_config_value("GOOGLE_SHEETS_WORKSHEET", "Workers Data"),
        sheets_service_account=get_config_value("GOOGLE_SHEETS_SERVICE_ACCOUNT", ""),
    )
