"""Passkey-gated dashboard session with an explicit expiry check."""
from __future__ import annotations

import hmac
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from workerverify.core.config import Settings
from workerverify.core.utils import utc_now

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DashboardSession:
    """Access grant for the dashboard; ``expires_at=None`` never expires."""

    granted_at: datetime
    expires_at: Optional[datetime] = None

    def is_active(self, now: Optional[datetime] = None) -> bool:
        if self.expires_at is None:
            return True
        return (now or utc_now()) <= self.expires_at


def open_session(passkey: str, settings: Settings, now: Optional[datetime] = None) -> Optional[DashboardSession]:
    """Return a new session when ``passkey`` matches, otherwise ``None``."""

    if not hmac.compare_digest(passkey.encode("utf-8"), settings.dashboard_passkey.encode("utf-8")):
        logger.info("Rejected dashboard passkey attempt")
        return None

    granted = now or utc_now()
    expires = granted + timedelta(hours=settings.session_ttl_hours) if settings.session_ttl_hours > 0 else None
    logger.info("Dashboard session opened (expires %s)", expires.isoformat() if expires else "never")
    return DashboardSession(granted_at=granted, expires_at=expires)


def session_is_valid(session: Optional[DashboardSession], now: Optional[datetime] = None) -> bool:
    """Check the gate before rendering the dashboard."""

    return session is not None and session.is_active(now)
