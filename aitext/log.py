import logging
import time
from typing import Callable

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from . import config
from .metrics import request_latency_seconds

logger = logging.getLogger("aitext.request")


def configure_logging(level: str = config.LOG_LEVEL) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )


class RequestLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: Callable):
        start = time.perf_counter()
        method = request.method
        path = request.url.path
        try:
            response = await call_next(request)
            duration_ms = (time.perf_counter() - start) * 1000.0
            logger.info("method=%s path=%s status=%s duration_ms=%.2f",
                        method, path, response.status_code, duration_ms)
            return response
        except Exception:
            duration_ms = (time.perf_counter() - start) * 1000.0
            logger.exception("method=%s path=%s status=500 duration_ms=%.2f UNHANDLED",
                             method, path, duration_ms)
            raise
        finally:
            request_latency_seconds.observe(time.perf_counter() - start)
