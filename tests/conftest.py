"""Pytest configuration to make the local package importable without installation."""
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest

# Ensure repository root is on sys.path for module resolution
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from workerverify.core.errors import TransportError
from workerverify.core.models import WorkerRecord


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep local secrets files and Google Sheets settings out of the tests."""

    monkeypatch.setenv("PORTAL_ENV_FILE", str(tmp_path / "missing-portal.env"))
    for key in (
        "STORE_URL",
        "STORE_KEY",
        "STORE_PAGE_SIZE",
        "WORKER_TABLE",
        "MATCH_POLICY",
        "MATCH_CASE_SENSITIVE",
        "DASHBOARD_PASSKEY",
        "GOOGLE_SHEETS_SPREADSHEET_ID",
        "GOOGLE_SHEETS_WORKSHEET",
        "GOOGLE_SHEETS_SERVICE_ACCOUNT",
    ):
        monkeypatch.delenv(key, raising=False)


def make_record(
    id: int,
    factory: str = "2",
    nik: str = "",
    ktp: str = "",
    name: str = "Worker",
    department: str = "Sewing",
    verified: bool = False,
    verified_at: Optional[str] = None,
) -> WorkerRecord:
    """Build a record the same way the loader does, from a table row."""

    return WorkerRecord.from_row(
        {
            "id": id,
            "factory": factory,
            "nik": nik or f"{id:010d}",
            "ktp": ktp or f"3201{id:012d}",
            "name": name,
            "department": department,
            "status": verified,
            "verified_date": verified_at,
        }
    )


@pytest.fixture
def sample_records() -> List[WorkerRecord]:
    """A small mixed collection across two factories."""

    return [
        make_record(1, "2", nik="1234567890", ktp="3201000011112222", name="Siti Aminah", department="Sewing"),
        make_record(2, "2", nik="2234567891", ktp="3201000011113333", name="Budi Santoso", department="Cutting",
                    verified=True, verified_at="2024-01-01T08:15:00Z"),
        make_record(3, "3", nik="1234567890", ktp="3201000011114444", name="Dewi Lestari", department="Sewing",
                    verified=True, verified_at="2024-01-01T09:00:00+07:00"),
        make_record(4, "3", nik="4434567892", ktp="3201000011115555", name="Agus Salim", department="Packing",
                    verified=True, verified_at="2024-01-02T10:30:00Z"),
        make_record(5, "2", nik="5534567893", ktp="3201000011116666", name="Rina Wati", department="Packing"),
    ]


def table_rows(count: int, factory: str = "2") -> List[Dict[str, Any]]:
    return [
        {
            "id": index,
            "factory": factory,
            "nik": f"{index:010d}",
            "ktp": f"3201{index:012d}",
            "name": f"Worker {index}",
            "department": "Sewing",
            "status": False,
            "verified_date": None,
        }
        for index in range(1, count + 1)
    ]


class FakeStore:
    """In-memory stand-in for ``WorkerStore``."""

    def __init__(
        self,
        rows: Optional[List[Dict[str, Any]]] = None,
        fail_at_offset: Optional[int] = None,
        update_error: Optional[Exception] = None,
    ) -> None:
        self.rows = rows or []
        self.fail_at_offset = fail_at_offset
        self.update_error = update_error
        self.page_calls: List[tuple] = []
        self.updates: List[tuple] = []

    def fetch_page(self, offset: int, limit: int) -> List[Dict[str, Any]]:
        self.page_calls.append((offset, limit))
        if self.fail_at_offset is not None and offset >= self.fail_at_offset:
            raise TransportError()
        return self.rows[offset:offset + limit]

    def count(self, **equals: Any) -> int:
        def _matches(row: Dict[str, Any]) -> bool:
            return all(str(row.get(column)) == str(value) for column, value in equals.items())

        return sum(1 for row in self.rows if _matches(row))

    def mark_verified(self, record: WorkerRecord, verified_at: datetime, guard: bool = True) -> WorkerRecord:
        self.updates.append((record.id, verified_at, guard))
        if self.update_error is not None:
            raise self.update_error
        return WorkerRecord.from_row({**record.to_dict(), "status": True, "verified_date": verified_at.isoformat()})


@pytest.fixture
def fake_store() -> FakeStore:
    return FakeStore(rows=table_rows(3))


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2024, 3, 5, 7, 30, tzinfo=timezone.utc)

