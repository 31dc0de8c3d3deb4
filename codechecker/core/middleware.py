"""
Middleware - request tracing and a uniform error response format.
"""
import time
import traceback
from typing import Callable, Optional
from uuid import uuid4

from fastapi import Request, Response, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from codechecker.core.config import get_settings
from codechecker.core.errors import BaseApplicationError
from codechecker.core.logging import LogEvent, bind_request_context, get_logger

logger = get_logger(__name__)


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Attach a request id and the processing time to every response.

    The id is also bound to the logging context, so service and engine events
    logged while handling the request carry it.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = str(uuid4())
        request.state.request_id = request_id
        bind_request_context(request_id=request_id, path=request.url.path)
        start_time = time.time()

        response = await call_next(request)

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Process-Time"] = str(time.time() - start_time)
        return response


def _create_error_response(
    request_id: Optional[str],
    status_code: int,
    error_code: str,
    message: str,
    details: Optional[dict] = None
) -> JSONResponse:
    content = {
        "error": {
            "code": error_code,
            "message": message,
            "details": details or {},
            "request_id": request_id
        }
    }
    headers = {"X-Request-ID": request_id} if request_id else None
    return JSONResponse(status_code=status_code, content=content, headers=headers)


async def application_error_handler(request: Request, exc: BaseApplicationError) -> JSONResponse:
    """Render application errors with their own status and code."""
    request_id = getattr(request.state, "request_id", None)
    logger.warning(
        LogEvent.REQUEST_FAILED,
        path=request.url.path,
        error_code=exc.error_code.value,
        message=exc.message,
        request_id=request_id,
    )
    return _create_error_response(
        request_id=request_id,
        status_code=exc.status_code,
        error_code=exc.error_code.value,
        message=exc.message,
        details=exc.details
    )


async def error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all handler for unexpected exceptions."""
    request_id = getattr(request.state, "request_id", None)
    logger.error(
        LogEvent.REQUEST_FAILED,
        path=request.url.path,
        error=str(exc),
        request_id=request_id,
        exc_info=exc,
    )
    details = {"type": type(exc).__name__}
    if not get_settings().is_production:
        details["traceback"] = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    return _create_error_response(
        request_id=request_id,
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        error_code="INTERNAL_ERROR",
        message="An unexpected error occurred",
        details=details
    )
