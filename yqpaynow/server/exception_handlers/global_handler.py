"""
Exception handlers for the FastAPI application.

``domain_exception_handler`` renders :class:`YQPayError` subclasses raised by
services. ``global_exception_handler`` catches every other unhandled
exception and logs the full request context plus traceback under an error ID
that clients can quote when reporting issues.
"""

import traceback

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from yqpaynow.core.errors import YQPayError
from yqpaynow.core.logging_config import get_logger
from yqpaynow.core.monitoring import log_error

logger = get_logger(__name__)


async def domain_exception_handler(request: Request, exc: YQPayError) -> JSONResponse:
    """
    Render a domain error as ``{"detail", "code", "details"?}``.

    Server-side failures (5xx) are logged at ERROR, client errors at INFO.
    """
    if exc.status_code >= 500:
        logger.error(
            f"{type(exc).__name__} in {request.method} {request.url.path}: {exc.message}",
            extra={"code": exc.code, "path": request.url.path, "error_type": type(exc).__name__},
        )
        log_error(type(exc).__name__, exc.message, {"code": exc.code, "path": request.url.path})
    else:
        logger.info(f"{request.method} {request.url.path} -> {exc.status_code} {exc.code}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Log an unhandled exception and return a 500 with its error ID.

    Args:
        request: The HTTP request that caused the exception
        exc: The exception that was raised

    Returns:
        JSONResponse with error details and error ID
    """
    error_id = id(exc)

    logger.error(
        f"Unhandled exception [{error_id}] in {request.method} {request.url.path}: {str(exc)}",
        exc_info=True,
        extra={
            "error_id": error_id,
            "method": request.method,
            "path": request.url.path,
            "query_params": dict(request.query_params),
            "client": request.client.host if request.client else "unknown",
            "error_type": type(exc).__name__,
            "traceback": traceback.format_exc(),
        },
    )

    return JSONResponse(
        status_code=500,
        content={
            "detail": "Internal server error",
            "error_id": error_id,
            "error_type": type(exc).__name__,
        },
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """
    Register exception handlers with the FastAPI application.

    Args:
        app: The FastAPI application instance
    """
    app.add_exception_handler(YQPayError, domain_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)
    logger.debug("Exception handlers registered successfully")
