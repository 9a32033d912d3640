import logging
from typing import Type

from fastapi import FastAPI, Request, HTTPException
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from shared.helpers.json_response_helper import failure_payload
from shared.utils.app_status_code import AppStatusCode

logger = logging.getLogger(__name__)


def setup_exception_handlers(app: FastAPI, domain_error: Type[Exception] = None):

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        # error_response() already wraps its detail
        if isinstance(exc.detail, dict) and "status_code" in exc.detail:
            wrapped = exc.detail
        else:
            wrapped = failure_payload(str(exc.detail), str(exc.status_code))
        return JSONResponse(content=wrapped, status_code=exc.status_code or 400)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        wrapped = failure_payload(str(exc), AppStatusCode.INVALID_INPUT)
        return JSONResponse(content=wrapped, status_code=422)

    if domain_error is not None:
        @app.exception_handler(domain_error)
        async def domain_exception_handler(request: Request, exc):
            wrapped = failure_payload(exc.message, exc.status_code)
            return JSONResponse(content=wrapped, status_code=exc.http_status)

    # Catch all unhandled exceptions
    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled exception on %s", request.url.path)

        wrapped = failure_payload(str(exc), AppStatusCode.OPERATION_FAILED)
        return JSONResponse(content=wrapped, status_code=500)
