from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from .facade import StatusView, SubmitResult
from .models import JobStatus


class GenerateRequest(BaseModel):
    prompt: str
    previous_id: Optional[str] = None


class SubmitResponse(BaseModel):
    id: str
    status: JobStatus
    submitted_at: datetime

    @classmethod
    def from_result(cls, result: SubmitResult) -> "SubmitResponse":
        return cls(id=result.id, status=result.status, submitted_at=result.submitted_at)


class StatusResponse(BaseModel):
    id: str
    status: JobStatus
    result: Optional[str] = None
    prompt: str
    submitted_at: datetime
    previous_id: Optional[str] = None

    @classmethod
    def from_view(cls, view: StatusView) -> "StatusResponse":
        return cls(
            id=view.id,
            status=view.status,
            result=view.result,
            prompt=view.prompt,
            submitted_at=view.submitted_at,
            previous_id=view.previous_id,
        )
