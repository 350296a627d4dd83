"""Exception handlers for structured error responses: ``{error, message, details}``."""

import logging

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ..exceptions import ErrorCode, StashException, StorageError

logger = logging.getLogger(__name__)


async def stash_exception_handler(request: Request, exc: StashException) -> JSONResponse:
    """
    Handle domain exceptions and return structured JSON responses.

    Client errors log at INFO; upstream/server errors at ERROR. A storage
    failure's provider message goes to the log, never to the caller.
    """
    extra = {
        "error_code": exc.error_code.value,
        "path": request.url.path,
        "method": request.method,
        "details": exc.details,
        "status_code": exc.status_code,
    }
    if isinstance(exc, StorageError) and exc.original_error is not None:
        extra["cause"] = repr(exc.original_error)

    if exc.status_code >= 500:
        logger.error(f"StashException: {exc.error_code.value}", extra=extra)
    else:
        logger.info(f"StashException: {exc.error_code.value}", extra=extra)

    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed body, query or form parameters -> 400 INVALID_INPUT."""
    errors = [
        {
            "field": ".".join(str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")),
            "message": err.get("msg", ""),
        }
        for err in exc.errors()
    ]
    logger.info(
        "Request validation failed",
        extra={"path": request.url.path, "method": request.method, "errors": errors},
    )
    return JSONResponse(
        status_code=400,
        content={
            "error": ErrorCode.INVALID_INPUT.value,
            "message": "Invalid request parameters",
            "details": {"errors": errors},
        },
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Anything else (database errors included): log the traceback, return a generic 500."""
    logger.error(
        "Unhandled exception",
        extra={"path": request.url.path, "method": request.method},
        exc_info=exc,
    )
    return JSONResponse(
        status_code=500,
        content={
            "error": ErrorCode.INTERNAL_ERROR.value,
            "message": "Internal server error",
            "details": {},
        },
    )
