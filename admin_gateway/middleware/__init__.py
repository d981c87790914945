"""
Middleware package for the admin gateway.

Cross-cutting request handling: logging and error handling.
"""

from .error_handling import ErrorHandlingMiddleware, request_validation_exception_handler
from .logging import LoggingMiddleware

__all__ = [
    "ErrorHandlingMiddleware",
    "LoggingMiddleware",
    "request_validation_exception_handler",
]
