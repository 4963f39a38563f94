"""Data models for worker records and the projections derived from them."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Mapping, Optional

from workerverify.core.utils import parse_timestamp


def normalize_factory(value: Any) -> str:
    """Return the comparable string form of a factory-grouping key."""

    if value is None:
        return ""
    return str(value).strip()


@dataclass(frozen=True)
class WorkerRecord:
    """A single worker identity entry as stored in the remote table."""

    id: int
    factory: str
    nik: str
    ktp: str
    name: str
    department: str
    verified: bool = False
    verified_at: Optional[datetime] = None
    # verified_date text as stored; guarded updates compare against it verbatim
    verified_date_raw: Optional[str] = field(default=None, compare=False, repr=False)

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "WorkerRecord":
        """Build a record from a remote table row (``status``/``verified_date`` columns)."""

        raw_date = row.get("verified_date")
        return cls(
            id=int(row["id"]),
            factory=normalize_factory(row.get("factory")),
            nik=str(row.get("nik") or "").strip(),
            ktp=str(row.get("ktp") or "").strip(),
            name=str(row.get("name") or "").strip(),
            department=str(row.get("department") or "").strip(),
            verified=bool(row.get("status")),
            verified_at=parse_timestamp(raw_date),
            verified_date_raw=str(raw_date) if raw_date else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Return the remote-table representation of the record."""

        return {
            "id": self.id,
            "factory": self.factory,
            "nik": self.nik,
            "ktp": self.ktp,
            "name": self.name,
            "department": self.department,
            "status": self.verified,
            "verified_date": self.verified_date_raw or (self.verified_at.isoformat() if self.verified_at else None),
        }


@dataclass(frozen=True)
class CountBreakdown:
    """An overall count with the same count restricted to each factory."""

    overall: int
    by_factory: Dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class VerificationStats:
    total: CountBreakdown
    verified: CountBreakdown
    unverified: CountBreakdown


@dataclass(frozen=True)
class SeriesRow:
    """Verification counts for one calendar date, keyed by factory."""

    date: str
    counts: Dict[str, int]

    @property
    def total(self) -> int:
        return sum(self.counts.values())
