"""HTTP client for the hosted worker table (PostgREST / Supabase REST API)."""
from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from typing import Any, Dict, List, Optional

import requests

from workerverify.core.config import Settings
from workerverify.core.errors import ConflictError, TransportError
from workerverify.core.models import WorkerRecord

logger = logging.getLogger(__name__)


def _literal(value: Any) -> str:
    """Render a Python value as a PostgREST filter literal."""

    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _parse_content_range(header: Optional[str]) -> int:
    """Return the total from a ``Content-Range`` header such as ``0-9/123`` or ``*/0``."""

    if not header or "/" not in header:
        raise TransportError("The worker database did not return a record count.")
    total = header.rsplit("/", 1)[1].strip()
    if not total.isdigit():
        raise TransportError("The worker database did not return an exact record count.")
    return int(total)


class WorkerStore:
    """Minimal table contract: exact counts, paged reads, partial update by id."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        table: str = "workers",
        timeout: float = 30.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.endpoint = f"{base_url.rstrip('/')}/rest/v1/{table}"
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update(
            {"apikey": api_key, "Authorization": f"Bearer {api_key}"}
        )

    @classmethod
    def from_settings(cls, settings: Settings, session: Optional[requests.Session] = None) -> "WorkerStore":
        settings.require_store()
        return cls(
            settings.store_url,
            settings.store_key,
            table=settings.table,
            timeout=settings.store_timeout,
            session=session,
        )

    def _request(
        self,
        method: str,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
        json: Optional[Dict[str, Any]] = None,
    ) -> requests.Response:
        try:
            response = self.session.request(
                method,
                self.endpoint,
                params=params,
                headers=headers,
                json=json,
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.RequestException as exc:
            logger.error("%s %s failed: %s", method, self.endpoint, exc)
            raise TransportError() from exc
        return response

    def fetch_page(self, offset: int, limit: int) -> List[Dict[str, Any]]:
        """Return up to ``limit`` rows starting at ``offset``, all columns, ordered by id."""

        response = self._request(
            "GET",
            params={"select": "*", "order": "id.asc", "offset": offset, "limit": limit},
        )
        try:
            rows = response.json()
        except ValueError as exc:
            raise TransportError("The worker database returned an unreadable page.") from exc
        if not isinstance(rows, list):
            raise TransportError("The worker database returned an unexpected page payload.")
        return rows

    def count(self, **equals: Any) -> int:
        """Exact row count, optionally restricted by column equality predicates."""

        params: Dict[str, Any] = {"select": "id"}
        params.update({column: f"eq.{_literal(value)}" for column, value in equals.items()})
        response = self._request("HEAD", params=params, headers={"Prefer": "count=exact"})
        return _parse_content_range(response.headers.get("Content-Range"))

    def mark_verified(self, record: WorkerRecord, verified_at: datetime, guard: bool = True) -> WorkerRecord:
        """Set the verified flag and timestamp for exactly one record.

        With ``guard`` the update only applies while the row still carries the
        status and timestamp observed at load time; otherwise a concurrent
        change raises ``ConflictError``.
        """

        stamp = verified_at.isoformat()
        params: Dict[str, Any] = {"id": f"eq.{record.id}"}
        if guard:
            params["status"] = f"eq.{_literal(record.verified)}"
            observed = record.verified_date_raw or (record.verified_at.isoformat() if record.verified_at else None)
            params["verified_date"] = f"eq.{observed}" if observed else "is.null"

        response = self._request(
            "PATCH",
            params=params,
            headers={"Prefer": "return=representation"},
            json={"status": True, "verified_date": stamp},
        )
        try:
            rows = response.json()
        except ValueError as exc:
            raise TransportError("The worker database returned an unreadable update result.") from exc

        if not rows:
            if guard:
                logger.warning("Guarded update for worker %s affected no rows", record.id)
                raise ConflictError()
            raise TransportError(f"Worker {record.id} no longer exists.")

        logger.info("Marked worker %s verified at %s", record.id, stamp)
        try:
            return WorkerRecord.from_row(rows[0])
        except (KeyError, TypeError, ValueError):
            return replace(record, verified=True, verified_at=verified_at, verified_date_raw=stamp)


def fetch_document(url: str, timeout: float = 30.0) -> bytes:
    """Download a reference document (the worker handbook) as raw bytes."""

    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as exc:
        logger.error("Downloading %s failed: %s", url, exc)
        raise TransportError("The document could not be downloaded.") from exc
    return response.content
