"""Derived counts and the verification-over-time series.

Everything here is recomputed from the full collection on each call.
"""
from __future__ import annotations

from collections import Counter, defaultdict
from typing import Dict, Iterable, List, Optional, Sequence

from workerverify.core.models import (
    CountBreakdown,
    SeriesRow,
    VerificationStats,
    WorkerRecord,
    normalize_factory,
)


def factory_keys(records: Iterable[WorkerRecord]) -> List[str]:
    """Sorted distinct factory keys present in ``records``."""

    return sorted({record.factory for record in records})


def _breakdown(records: Sequence[WorkerRecord], factories: Sequence[str]) -> CountBreakdown:
    per_factory = Counter(record.factory for record in records)
    return CountBreakdown(
        overall=len(records),
        by_factory={factory: per_factory.get(factory, 0) for factory in factories},
    )


def compute_stats(records: Iterable[WorkerRecord], factories: Optional[Iterable[str]] = None) -> VerificationStats:
    """Total, verified, and unverified counts, each broken down by factory."""

    record_list = list(records)
    keys = [normalize_factory(key) for key in factories] if factories is not None else factory_keys(record_list)
    verified = [record for record in record_list if record.verified]
    unverified = [record for record in record_list if not record.verified]
    return VerificationStats(
        total=_breakdown(record_list, keys),
        verified=_breakdown(verified, keys),
        unverified=_breakdown(unverified, keys),
    )


def compute_series(records: Iterable[WorkerRecord], factories: Optional[Iterable[str]] = None) -> List[SeriesRow]:
    """One row per distinct UTC verification date, ascending, with per-factory counts.

    Dates with no verifications are not filled in.
    """

    tracked = [record for record in records if record.verified and record.verified_at is not None]
    keys = [normalize_factory(key) for key in factories] if factories is not None else factory_keys(tracked)

    buckets: Dict[str, Counter] = defaultdict(Counter)
    for record in tracked:
        buckets[record.verified_at.date().isoformat()][record.factory] += 1

    return [
        SeriesRow(date=date, counts={factory: buckets[date].get(factory, 0) for factory in keys})
        for date in sorted(buckets)
    ]


def series_totals(series: Iterable[SeriesRow]) -> Dict[str, int]:
    """Per-factory sums across the series plus the overall ``"total"``."""

    totals: Counter = Counter()
    overall = 0
    for row in series:
        totals.update(row.counts)
        overall += row.total
    result = dict(totals)
    result["total"] = overall
    return result
