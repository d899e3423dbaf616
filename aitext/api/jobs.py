import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import StreamingResponse

from ..facade import GenerationFacade
from ..schemas import GenerateRequest, StatusResponse, SubmitResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


def get_facade(request: Request) -> GenerationFacade:
    return request.app.state.facade


def sse(event: str, data: str) -> str:
    return f"event: {event}\n" + "\n".join(f"data: {line}" for line in data.splitlines() or [""]) + "\n\n"


@router.post("/generate", response_model=SubmitResponse)
def submit_request(req: GenerateRequest, facade: GenerationFacade = Depends(get_facade)):
    result = facade.submit(req.prompt, req.previous_id)
    logger.info("[REST] created request %s", result.id)
    return SubmitResponse.from_result(result)


@router.get("/status/{job_id}", response_model=StatusResponse)
def get_status(job_id: str, facade: GenerationFacade = Depends(get_facade)):
    return StatusResponse.from_view(facade.status(job_id))


@router.get("/status/{job_id}/stream")
async def stream_status(job_id: str, request: Request, facade: GenerationFacade = Depends(get_facade)):
    # Unknown ids fail with 404 before any bytes are streamed
    facade.status(job_id)

    async def event_iter():
        updates = facade.stream_status(job_id)
        try:
            async for view in updates:
                if await request.is_disconnected():
                    logger.info("[REST] stream client for %s disconnected", job_id)
                    return
                yield sse("status", StatusResponse.from_view(view).model_dump_json())
            yield sse("done", "")
        finally:
            await updates.aclose()

    headers = {"Cache-Control": "no-store", "X-Accel-Buffering": "no"}
    return StreamingResponse(event_iter(), media_type="text/event-stream", headers=headers)
