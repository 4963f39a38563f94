"""Fetch-all loader and remote count queries built on ``WorkerStore``."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Protocol

from workerverify.core.errors import TransportError
from workerverify.core.models import CountBreakdown, VerificationStats, WorkerRecord

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 1000


class PagedSource(Protocol):
    def fetch_page(self, offset: int, limit: int) -> List[dict]: ...


class CountingSource(Protocol):
    def count(self, **equals) -> int: ...


@dataclass
class LoadResult:
    """Records gathered by ``load_all``; ``complete`` is False after a failed page."""

    records: List[WorkerRecord]
    complete: bool = True
    alerts: List[str] = field(default_factory=list)


def load_all(store: PagedSource, page_size: int = DEFAULT_PAGE_SIZE) -> LoadResult:
    """Read the whole table page by page, sequentially, starting at offset 0.

    A failed page stops paging and returns what was accumulated so far.
    """

    if page_size < 1:
        raise ValueError(f"page_size must be at least 1, got {page_size}")

    records: List[WorkerRecord] = []
    alerts: List[str] = []
    complete = True
    offset = 0

    logger.info("Loading worker records in pages of %d", page_size)

    while True:
        try:
            rows = store.fetch_page(offset, page_size)
        except TransportError:
            logger.exception("Failed to fetch workers %d-%d", offset, offset + page_size - 1)
            alerts.append(f"Failed to load workers {offset}-{offset + page_size - 1}")
            complete = False
            break

        if not rows:
            break

        for row in rows:
            row_id = row.get("id") if isinstance(row, dict) else None
            try:
                records.append(WorkerRecord.from_row(row))
            except (KeyError, TypeError, ValueError):
                logger.exception("Skipping malformed worker row %s", row_id)
                alerts.append(f"Skipped malformed worker row {row_id}")

        logger.debug("Fetched %d rows at offset %d", len(rows), offset)
        offset += page_size
        if len(rows) < page_size:
            break

    if complete:
        logger.info("Loaded %d worker records", len(records))
    else:
        logger.warning("Loaded %d worker records; the list is incomplete", len(records))

    return LoadResult(records=records, complete=complete, alerts=alerts)


def count_stats(store: CountingSource, factories: Iterable[str]) -> VerificationStats:
    """Build verification stats from exact remote count queries."""

    factory_list = list(factories)

    def _breakdown(**equals) -> CountBreakdown:
        return CountBreakdown(
            overall=store.count(**equals),
            by_factory={factory: store.count(factory=factory, **equals) for factory in factory_list},
        )

    return VerificationStats(
        total=_breakdown(),
        verified=_breakdown(status=True),
        unverified=_breakdown(status=False),
    )
