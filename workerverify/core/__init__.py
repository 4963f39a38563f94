"""Core building blocks for the verification portal."""
from workerverify.core.config import Settings, load_settings
from workerverify.core.errors import (
    ConflictError,
    NotFoundError,
    PortalError,
    TransportError,
    ValidationError,
)
from workerverify.core.logging import configure_logging
from workerverify.core.models import (
    CountBreakdown,
    SeriesRow,
    VerificationStats,
    WorkerRecord,
    normalize_factory,
)
from workerverify.core.session import DashboardSession, open_session, session_is_valid

__all__ = [
    "ConflictError",
    "CountBreakdown",
    "DashboardSession",
    "NotFoundError",
    "PortalError",
    "SeriesRow",
    "Settings",
    "TransportError",
    "ValidationError",
    "VerificationStats",
    "WorkerRecord",
    "configure_logging",
    "load_settings",
    "normalize_factory",
    "open_session",
    "session_is_valid",
]
