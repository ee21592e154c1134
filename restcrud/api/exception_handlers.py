from http import HTTPStatus

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from restcrud.core.exceptions import CRUDError, CRUDErrorException
from restcrud.infrastructure.middleware.correlation import get_correlation_id

logger = structlog.get_logger(__name__)

UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred!"


def _error_response(error: CRUDError) -> JSONResponse:
    correlation_id = get_correlation_id()
    return JSONResponse(
        status_code=error.code,
        content=error.model_dump(),
        headers={"X-Correlation-ID": correlation_id} if correlation_id else {},
    )


async def crud_error_exception_handler(
    request: Request, exc: CRUDErrorException
) -> JSONResponse:
    logger.warning(
        "crud_error",
        code=exc.error.code,
        message=exc.error.message,
        path=request.url.path,
    )
    return _error_response(exc.error)


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = [
        f"{'.'.join(str(loc) for loc in error['loc'])}: {error['msg']}"
        for error in exc.errors()
    ]

    logger.warning("validation_error", errors=errors, path=request.url.path)

    error = CRUDError.of(
        HTTPStatus.BAD_REQUEST, "Request validation failed: " + "; ".join(errors)
    )
    return _error_response(error)


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "unhandled_exception",
        error=str(exc),
        error_type=type(exc).__name__,
        path=request.url.path,
        exc_info=exc,
    )
    # Internal details stay in the logs
    return _error_response(
        CRUDError.of(HTTPStatus.INTERNAL_SERVER_ERROR, UNEXPECTED_ERROR_MESSAGE)
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(CRUDErrorException, crud_error_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)
