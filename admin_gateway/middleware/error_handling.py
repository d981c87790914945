"""
Error handling middleware for the admin gateway.

Catches application and unexpected errors, logs them with a request id,
and answers with a consistent ErrorResponse body.
"""

import logging
import traceback
import uuid
from typing import Any, Callable, Dict, Optional

from fastapi import Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from admin_gateway.domain.exceptions import AdminApiError
from admin_gateway.schemas.responses import ErrorResponse

logger = logging.getLogger(__name__)


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """
    Middleware for centralized error handling.

    Application errors keep their status code and error code; anything
    else becomes a 500 INTERNAL_ERROR without leaking details.
    """

    def __init__(self, app, enable_error_logging: bool = True):
        """
        Initialize the error handling middleware.

        Args:
            app: FastAPI application instance
            enable_error_logging: Whether to log full tracebacks for unexpected errors
        """
        super().__init__(app)
        self.enable_error_logging = enable_error_logging

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        try:
            return await call_next(request)

        except AdminApiError as e:
            return self._handle_application_error(request, e)

        except StarletteHTTPException as e:
            return self._handle_http_exception(request, e)

        except Exception as e:
            return self._handle_unexpected_exception(request, e)

    def _request_id(self, request: Request) -> str:
        return getattr(request.state, "request_id", None) or str(uuid.uuid4())

    def _details(self, request: Request, **extra: Any) -> Dict[str, Any]:
        details = {
            "path": str(request.url.path),
            "method": request.method,
            "request_id": self._request_id(request),
        }
        details.update(extra)
        return details

    def _json_error(self, status_code: int, error: str, error_code: Optional[str],
                    details: Dict[str, Any]) -> JSONResponse:
        error_response = ErrorResponse(
            success=False,
            error=error,
            error_code=error_code,
            details=details,
        )
        return JSONResponse(status_code=status_code, content=error_response.model_dump(mode="json"))

    def _handle_application_error(self, request: Request, exc: AdminApiError) -> JSONResponse:
        logger.warning(
            f"🚨 {exc.error_code} ({exc.status_code}) for {request.method} {request.url.path}: {exc.message}"
        )
        return self._json_error(
            exc.status_code,
            exc.message,
            exc.error_code,
            self._details(request, status_code=exc.status_code),
        )

    def _handle_http_exception(self, request: Request, exc: StarletteHTTPException) -> JSONResponse:
        logger.warning(
            f"🚨 HTTP {exc.status_code} error for {request.method} {request.url.path}: {exc.detail}"
        )
        return self._json_error(
            exc.status_code,
            str(exc.detail),
            f"HTTP_{exc.status_code}",
            self._details(request, status_code=exc.status_code),
        )

    def _handle_unexpected_exception(self, request: Request, exc: Exception) -> JSONResponse:
        logger.error(f"💥 Unexpected error for {request.method} {request.url.path}: {exc}")

        if self.enable_error_logging:
            logger.error(f"📋 Full traceback:\n{traceback.format_exc()}")

        return self._json_error(
            500,
            "Internal server error",
            "INTERNAL_ERROR",
            self._details(request, error_type=type(exc).__name__),
        )


async def request_validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Answer FastAPI parameter validation failures with a 400 ErrorResponse.

    The message names the first offending parameter, e.g. ``Invalid limit: ...``.
    """
    errors = [
        {"field": ".".join(str(part) for part in error["loc"][1:]), "message": error["msg"]}
        for error in exc.errors()
    ]
    first = errors[0] if errors else {"field": "request", "message": "validation failed"}
    message = f"Invalid {first['field']}: {first['message']}"
    logger.warning(f"🚨 BAD_REQUEST (400) for {request.method} {request.url.path}: {message}")

    error_response = ErrorResponse(
        success=False,
        error=message,
        error_code="BAD_REQUEST",
        details={
            "path": str(request.url.path),
            "method": request.method,
            "request_id": getattr(request.state, "request_id", None) or str(uuid.uuid4()),
            "status_code": 400,
            "errors": errors,
        },
    )
    return JSONResponse(status_code=400, content=error_response.model_dump(mode="json"))
