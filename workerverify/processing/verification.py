"""Single verification attempt: validate, match, confirm remotely."""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Callable, List, Optional, Protocol, Sequence

from workerverify.core.errors import NotFoundError, PortalError, TransportError, ValidationError
from workerverify.core.models import WorkerRecord
from workerverify.core.utils import utc_now
from workerverify.processing.matcher import DEFAULT_POLICY, MatchPolicy, match

logger = logging.getLogger(__name__)

UPDATE_FAILED_MESSAGE = "Verification succeeded but failed to update status. Please try again."


class StatusWriter(Protocol):
    def mark_verified(self, record: WorkerRecord, verified_at: datetime, guard: bool = True) -> WorkerRecord: ...


class VerificationStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class VerificationState:
    status: VerificationStatus = VerificationStatus.IDLE
    worker: Optional[WorkerRecord] = None
    error: str = ""


class VerificationFlow:
    """State machine ``idle -> loading -> success|error -> idle`` for one portal view.

    The worker is only reported verified after the remote update is confirmed.
    """

    def __init__(
        self,
        store: StatusWriter,
        policy: MatchPolicy = DEFAULT_POLICY,
        delay: float = 0.8,
        guard: bool = True,
        clock: Callable[[], datetime] = utc_now,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.store = store
        self.policy = policy
        self.delay = delay
        self.guard = guard
        self.clock = clock
        self.sleep = sleep
        self.state = VerificationState()

    def submit(self, records: Sequence[WorkerRecord], factory_key: Optional[str], raw_input: str) -> VerificationState:
        """Run one attempt and return the resulting state."""

        try:
            worker = self._verify(records, factory_key, raw_input)
        except PortalError as exc:
            self.state = VerificationState(status=VerificationStatus.ERROR, error=exc.message)
        else:
            self.state = VerificationState(status=VerificationStatus.SUCCESS, worker=worker)
        return self.state

    def reset(self) -> VerificationState:
        self.state = VerificationState()
        return self.state

    def _verify(self, records: Sequence[WorkerRecord], factory_key: Optional[str], raw_input: str) -> WorkerRecord:
        if not factory_key or not (raw_input or "").strip():
            raise ValidationError()

        self.state = VerificationState(status=VerificationStatus.LOADING)
        if self.delay > 0:
            self.sleep(self.delay)

        matched = match(records, factory_key, raw_input, self.policy)
        if matched is None:
            logger.info("No worker matched in factory %s", factory_key)
            raise NotFoundError()

        try:
            updated = self.store.mark_verified(matched, self.clock(), guard=self.guard)
        except TransportError as exc:
            logger.warning("Worker %s matched but the status update failed: %s", matched.id, exc.message)
            raise TransportError(UPDATE_FAILED_MESSAGE) from exc

        logger.info("Worker %s verified", updated.id)
        return updated


def replace_record(records: Sequence[WorkerRecord], updated: WorkerRecord) -> List[WorkerRecord]:
    """Return a copy of ``records`` with the entry sharing ``updated.id`` swapped in."""

    return [updated if record.id == updated.id else record for record in records]
