import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, FrozenSet, Optional


class JobStatus(str, Enum):
    pending = "PENDING"
    processing = "PROCESSING"
    complete = "COMPLETE"
    failed = "FAILED"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES


TERMINAL_STATUSES: FrozenSet[JobStatus] = frozenset({JobStatus.complete, JobStatus.failed})

# Allowed forward moves; terminal states have none.
TRANSITIONS: Dict[JobStatus, FrozenSet[JobStatus]] = {
    JobStatus.pending: frozenset({JobStatus.processing}),
    JobStatus.processing: frozenset({JobStatus.complete, JobStatus.failed}),
    JobStatus.complete: frozenset(),
    JobStatus.failed: frozenset(),
}


def can_transition(current: JobStatus, target: JobStatus) -> bool:
    return target in TRANSITIONS[current]


@dataclass
class Job:
    id: str
    prompt: str
    seq: int
    previous_id: Optional[str] = None
    status: JobStatus = JobStatus.pending
    result: Optional[str] = None
    submitted_at: float = field(default_factory=time.monotonic)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
