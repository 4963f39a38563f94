"""Matching, verification, aggregation, and listing projections."""
from workerverify.processing.aggregation import compute_series, compute_stats, factory_keys, series_totals
from workerverify.processing.matcher import (
    DEFAULT_POLICY,
    FIXED_SUFFIX_POLICY,
    SPLIT_SUFFIX_POLICY,
    MatchPolicy,
    match,
    policy_for,
)
from workerverify.processing.verification import (
    VerificationFlow,
    VerificationState,
    VerificationStatus,
    replace_record,
)
from workerverify.processing.views import (
    DashboardFilters,
    ListingState,
    Page,
    StatusFilter,
    apply_filters,
    department_options,
    paginate,
    reconcile_filters,
)

__all__ = [
    "DEFAULT_POLICY",
    "FIXED_SUFFIX_POLICY",
    "SPLIT_SUFFIX_POLICY",
    "DashboardFilters",
    "ListingState",
    "MatchPolicy",
    "Page",
    "StatusFilter",
    "VerificationFlow",
    "VerificationState",
    "VerificationStatus",
    "apply_filters",
    "compute_series",
    "compute_stats",
    "department_options",
    "factory_keys",
    "match",
    "paginate",
    "policy_for",
    "reconcile_filters",
    "replace_record",
    "series_totals",
]
