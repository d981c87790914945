"""
Logging middleware for the admin gateway.

Logs every request and response with timing information and tags each
request with an id that error responses echo back.
"""

import json
import logging
import time
import uuid
from datetime import datetime
from typing import Any, Callable, Dict

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

SENSITIVE_HEADERS = {"authorization", "cookie", "x-api-key", "x-auth-token"}


class LoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for request/response logging."""

    def __init__(self, app, enable_detailed_logging: bool = False):
        """
        Initialize the logging middleware.

        Args:
            app: FastAPI application instance
            enable_detailed_logging: Whether to log request details at DEBUG level
        """
        super().__init__(app)
        self.enable_detailed_logging = enable_detailed_logging

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.time()
        request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        request.state.request_id = request_id

        client_ip = request.client.host if request.client else None
        logger.info(f"📥 {request.method} {request.url.path} - {client_ip}")

        if self.enable_detailed_logging:
            logger.debug(f"📋 Request details: {json.dumps(self._extract_request_info(request), indent=2)}")

        try:
            response = await call_next(request)
        except Exception as e:
            process_time = time.time() - start_time
            logger.error(
                f"💥 {request.method} {request.url.path} - ERROR - {process_time:.3f}s - {e}"
            )
            raise

        process_time = time.time() - start_time
        logger.info(
            f"📤 {request.method} {request.url.path} - {response.status_code} - {process_time:.3f}s"
        )

        response.headers["X-Process-Time"] = str(process_time)
        response.headers["X-Request-Id"] = request_id
        return response

    def _extract_request_info(self, request: Request) -> Dict[str, Any]:
        return {
            "method": request.method,
            "path": str(request.url.path),
            "query_params": dict(request.query_params),
            "client_ip": request.client.host if request.client else None,
            "user_agent": request.headers.get("user-agent"),
            "headers": {
                k: v for k, v in request.headers.items() if k.lower() not in SENSITIVE_HEADERS
            },
            "timestamp": datetime.now().isoformat(),
        }
