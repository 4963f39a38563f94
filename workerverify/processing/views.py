"""Filtering and pagination for the dashboard worker listing."""
from __future__ import annotations

import math
from dataclasses import dataclass, replace
from enum import Enum
from typing import Iterable, List, Optional, Sequence

from workerverify.core.models import WorkerRecord, normalize_factory


class StatusFilter(str, Enum):
    ALL = "all"
    VERIFIED = "verified"
    UNVERIFIED = "unverified"


@dataclass(frozen=True)
class DashboardFilters:
    """Listing constraints; ``None`` or an empty search means no constraint."""

    status: StatusFilter = StatusFilter.ALL
    factory: Optional[str] = None
    department: Optional[str] = None
    search: str = ""


def _matches(record: WorkerRecord, filters: DashboardFilters) -> bool:
    if filters.status == StatusFilter.VERIFIED and not record.verified:
        return False
    if filters.status == StatusFilter.UNVERIFIED and record.verified:
        return False
    if filters.factory is not None and record.factory != normalize_factory(filters.factory):
        return False
    if filters.department is not None and record.department != filters.department:
        return False
    term = filters.search.lower()
    if term and term not in record.name.lower() and term not in record.nik.lower():
        return False
    return True


def apply_filters(records: Iterable[WorkerRecord], filters: DashboardFilters) -> List[WorkerRecord]:
    return [record for record in records if _matches(record, filters)]


def department_options(records: Iterable[WorkerRecord], factory: Optional[str] = None) -> List[str]:
    """Distinct departments among records of ``factory`` (all records when None)."""

    key = normalize_factory(factory) if factory is not None else None
    return sorted({record.department for record in records if key is None or record.factory == key})


def reconcile_filters(records: Sequence[WorkerRecord], filters: DashboardFilters) -> DashboardFilters:
    """Drop a department constraint that the selected factory no longer offers."""

    if filters.department is None:
        return filters
    if filters.department in department_options(records, filters.factory):
        return filters
    return replace(filters, department=None)


@dataclass(frozen=True)
class Page:
    items: List[WorkerRecord]
    number: int
    size: int
    total_items: int
    total_pages: int

    @property
    def start_index(self) -> int:
        """Zero-based position of the first item within the filtered sequence."""

        return (self.number - 1) * self.size


def total_pages(count: int, page_size: int) -> int:
    return math.ceil(count / page_size) if count else 0


def clamp_page(page_number: int, count: int, page_size: int) -> int:
    return min(max(page_number, 1), max(total_pages(count, page_size), 1))


def paginate(records: Sequence[WorkerRecord], page_size: int, page_number: int) -> Page:
    """Slice one page; the page number is clamped into the valid range."""

    if page_size < 1:
        raise ValueError("page_size must be at least 1")
    count = len(records)
    number = clamp_page(page_number, count, page_size)
    start = (number - 1) * page_size
    return Page(
        items=list(records[start:start + page_size]),
        number=number,
        size=page_size,
        total_items=count,
        total_pages=total_pages(count, page_size),
    )


@dataclass(frozen=True)
class ListingState:
    """Filters plus the current page; any filter change goes back to page 1."""

    filters: DashboardFilters = DashboardFilters()
    page: int = 1

    def with_filters(self, filters: DashboardFilters) -> "ListingState":
        if filters == self.filters:
            return self
        return ListingState(filters=filters, page=1)

    def with_page(self, page: int) -> "ListingState":
        return replace(self, page=page)
