"""Worker identity verification portal: store access, matching, aggregation, exports."""
from workerverify.core import (
    DashboardSession,
    Settings,
    VerificationStats,
    WorkerRecord,
    configure_logging,
    load_settings,
    open_session,
)
from workerverify.processing import (
    DashboardFilters,
    MatchPolicy,
    VerificationFlow,
    apply_filters,
    compute_series,
    compute_stats,
    match,
    paginate,
)
from workerverify.processing.pipeline import export_listing, export_progress, run_export
from workerverify.reporting import EXPORT_HEADERS, records_to_export_rows
from workerverify.store import LoadResult, WorkerStore, load_all

__all__ = [
    "DashboardFilters",
    "DashboardSession",
    "EXPORT_HEADERS",
    "LoadResult",
    "MatchPolicy",
    "Settings",
    "VerificationFlow",
    "VerificationStats",
    "WorkerRecord",
    "WorkerStore",
    "apply_filters",
    "compute_series",
    "compute_stats",
    "configure_logging",
    "export_listing",
    "export_progress",
    "load_all",
    "load_settings",
    "match",
    "open_session",
    "paginate",
    "records_to_export_rows",
    "run_export",
]
