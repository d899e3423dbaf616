import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import AsyncIterator, Awaitable, Callable, Optional

from . import config, metrics
from .errors import InvalidInputError
from .models import Job, JobStatus
from .store import JobStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SubmitResult:
    id: str
    status: JobStatus
    submitted_at: datetime


@dataclass(frozen=True)
class StatusView:
    id: str
    status: JobStatus
    result: Optional[str]
    prompt: str
    submitted_at: datetime
    previous_id: Optional[str]

    @classmethod
    def from_job(cls, job: Job) -> "StatusView":
        return cls(
            id=job.id,
            status=job.status,
            result=job.result,
            prompt=job.prompt,
            submitted_at=job.created_at,
            previous_id=job.previous_id,
        )


class GenerationFacade:
    """Submit/status operations shared by every protocol adapter.

    Adapters translate their wire format to these calls and map
    InvalidInputError / JobNotFoundError to their own error codes. No adapter
    keeps job state of its own.
    """

    def __init__(self, store: JobStore, stream_interval: float = config.STREAM_INTERVAL_SECONDS,
                 sleep: Callable[[float], Awaitable[None]] = asyncio.sleep):
        self.store = store
        self.stream_interval = stream_interval
        self._sleep = sleep

    def submit(self, prompt: Optional[str], previous_id: Optional[str] = None) -> SubmitResult:
        if previous_id is not None and not previous_id.strip():
            previous_id = None
        try:
            job = self.store.create(prompt or "", previous_id)
        except InvalidInputError:
            metrics.jobs_rejected_total.inc()
            raise
        metrics.jobs_submitted_total.inc()
        return SubmitResult(id=job.id, status=job.status, submitted_at=job.created_at)

    def status(self, job_id: Optional[str]) -> StatusView:
        if job_id is None or not job_id.strip():
            raise InvalidInputError("Request ID cannot be empty.")
        return StatusView.from_job(self.store.get(job_id))

    async def stream_status(self, job_id: str) -> AsyncIterator[StatusView]:
        """Yield the job's status every ``stream_interval`` seconds until it is terminal.

        Closing the generator only stops the emission; the job keeps running.
        """
        while True:
            view = self.status(job_id)
            yield view
            if view.status.is_terminal:
                logger.info("stream for %s finished with %s", job_id, view.status.value)
                return
            await self._sleep(self.stream_interval)
