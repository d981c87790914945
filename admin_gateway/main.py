#!/usr/bin/env python3
"""
Admin Log Gateway

Administrative REST API exposing the logs of the monitored services.

Usage:
    python -m admin_gateway.main

Endpoints:
- GET /api/v1/health - Health check
- GET /api/v1/logs - Query logs (service, level, startDate, endDate, searchTerm, limit)
- GET /api/v1/logs/stream - Server-Sent Events stream of new log lines
"""

import logging

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from admin_gateway.api.v1 import health, logs
from admin_gateway.config import settings
from admin_gateway.dependencies import configure_logging
from admin_gateway.middleware import (
    ErrorHandlingMiddleware,
    LoggingMiddleware,
    request_validation_exception_handler,
)

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    configure_logging()

    app = FastAPI(
        title="Admin Log Gateway",
        description="Administrative API for querying and streaming service logs",
        version=settings.APP_VERSION,
    )

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Last added is outermost: logging wraps error handling
    app.add_middleware(ErrorHandlingMiddleware, enable_error_logging=True)
    app.add_middleware(LoggingMiddleware, enable_detailed_logging=False)

    # Query parameter validation failures answer 400 like other bad requests
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)

    # Mount routers
    app.include_router(health.router, prefix="/api/v1")
    app.include_router(logs.router, prefix="/api/v1")

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    logger.info(f"🚀 Starting {settings.APP_NAME} on port {settings.PORT}")
    uvicorn.run(
        "admin_gateway.main:app",
        host="0.0.0.0",
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )
