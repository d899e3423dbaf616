import dataclasses
import itertools
import logging
import threading
import uuid
from typing import Dict, Optional

from .errors import InvalidInputError, InvalidTransitionError, JobNotFoundError
from .models import Job, JobStatus, can_transition

logger = logging.getLogger(__name__)


class JobStore:
    """In-memory, thread-safe collection of jobs keyed by id.

    Handlers call submit/get from the event loop or the threadpool while the
    dispatcher reads next_pending and writes set_status. Every access goes
    through one lock, and readers only ever receive copies, so nobody sees a
    half-written record.
    """

    def __init__(self):
        self._jobs: Dict[str, Job] = {}
        self._lock = threading.Lock()
        self._seq = itertools.count()

    def __len__(self) -> int:
        with self._lock:
            return len(self._jobs)

    def submit(self, prompt: str, previous_id: Optional[str] = None) -> str:
        return self.create(prompt, previous_id).id

    def create(self, prompt: str, previous_id: Optional[str] = None) -> Job:
        """Insert a new PENDING job and return a snapshot taken under the lock."""
        if prompt is None or not prompt.strip():
            raise InvalidInputError("Prompt cannot be empty.")
        with self._lock:
            job_id = uuid.uuid4().hex
            while job_id in self._jobs:
                job_id = uuid.uuid4().hex
            job = Job(id=job_id, prompt=prompt, seq=next(self._seq), previous_id=previous_id)
            self._jobs[job.id] = job
            snapshot = dataclasses.replace(job)
        logger.info("job %s submitted (prompt_len=%d previous_id=%s)", job.id, len(prompt), previous_id)
        return snapshot

    def get(self, job_id: str) -> Job:
        with self._lock:
            job = self._jobs.get(job_id)
            if job is None:
                raise JobNotFoundError(job_id)
            return dataclasses.replace(job)

    def next_pending(self) -> Optional[Job]:
        with self._lock:
            pending = [j for j in self._jobs.values() if j.status is JobStatus.pending]
            if not pending:
                return None
            oldest = min(pending, key=lambda j: (j.submitted_at, j.seq))
            return dataclasses.replace(oldest)

    def set_status(self, job_id: str, status: JobStatus, result: Optional[str] = None) -> None:
        if result is not None and not status.is_terminal:
            raise ValueError(f"result can only be set with a terminal status, got {status.value}")
        with self._lock:
            job = self._jobs.get(job_id)
            if job is None:
                logger.warning("status update for unknown job %s dropped (status=%s)", job_id, status.value)
                return
            if not can_transition(job.status, status):
                raise InvalidTransitionError(job_id, job.status, status)
            job.status = status
            job.result = result
        logger.debug("job %s -> %s", job_id, status.value)

    def counts(self) -> Dict[JobStatus, int]:
        totals = {s: 0 for s in JobStatus}
        with self._lock:
            for job in self._jobs.values():
                totals[job.status] += 1
        return totals
