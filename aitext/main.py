import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from . import config
from .api import jobs as jobs_api
from .dispatcher import build_dispatcher
from .error_handlers import register_error_handlers
from .facade import GenerationFacade
from .log import RequestLogMiddleware, configure_logging
from .metrics import metrics_response
from .models import JobStatus
from .store import JobStore

configure_logging()
logger = logging.getLogger("aitext")

SHUTDOWN_GRACE_SECONDS = 1.0

store = JobStore()


@asynccontextmanager
async def lifespan(app: FastAPI):
    task = None
    if config.DISPATCHER_ENABLED:
        dispatcher = build_dispatcher(app.state.facade.store)
        app.state.dispatcher = dispatcher
        task = asyncio.create_task(dispatcher.run())
    logger.info("AiText relay listening on http://%s:%s/api/", config.HOST, config.PORT)
    try:
        yield
    finally:
        if task is not None:
            app.state.dispatcher.stop()
            done, _ = await asyncio.wait([task], timeout=SHUTDOWN_GRACE_SECONDS)
            if not done:
                task.cancel()
                await asyncio.gather(task, return_exceptions=True)


app = FastAPI(title="AiText Relay", lifespan=lifespan)
app.state.facade = GenerationFacade(store)
app.state.dispatcher = None
app.add_middleware(RequestLogMiddleware)
register_error_handlers(app)
app.include_router(jobs_api.router)


@app.get("/healthz")
async def healthz():
    return {"status": "ok"}


@app.get("/readyz")
async def readyz():
    dispatcher = app.state.dispatcher
    counts = app.state.facade.store.counts()
    return {
        "ready": bool(dispatcher and dispatcher.running),
        "jobs": {status.value: counts[status] for status in JobStatus},
    }


@app.get("/metrics")
async def metrics():
    return metrics_response()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=config.HOST, port=config.PORT)
