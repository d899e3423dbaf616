import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .errors import InvalidInputError, JobNotFoundError

logger = logging.getLogger("aitext.errors")


def register_error_handlers(app: FastAPI):
    @app.exception_handler(InvalidInputError)
    async def invalid_input_handler(request: Request, exc: InvalidInputError):
        logger.warning("InvalidInput path=%s detail=%s", request.url.path, exc)
        return JSONResponse(status_code=400, content={"error": str(exc)})

    @app.exception_handler(JobNotFoundError)
    async def not_found_handler(request: Request, exc: JobNotFoundError):
        logger.warning("NotFound path=%s job_id=%s", request.url.path, exc.job_id)
        return JSONResponse(status_code=404, content={"error": str(exc)})

    @app.exception_handler(RequestValidationError)
    async def validation_exc_handler(request: Request, exc: RequestValidationError):
        logger.warning("ValidationError path=%s errors=%s", request.url.path, exc.errors())
        return JSONResponse(
            status_code=422,
            content={"error": "Validation error", "details": jsonable_encoder(exc.errors())},
        )

    @app.exception_handler(Exception)
    async def unhandled_exc_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error at path=%s", request.url.path)
        return JSONResponse(status_code=500, content={"error": "Internal server error"})
