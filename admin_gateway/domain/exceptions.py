"""Application errors translated into HTTP responses by ErrorHandlingMiddleware."""


class AdminApiError(Exception):
    """Base error carrying the HTTP status and a machine-readable code."""

    def __init__(self, message: str, status_code: int = 500, error_code: str = "INTERNAL_ERROR"):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.error_code = error_code


class BadRequestError(AdminApiError):
    def __init__(self, message: str):
        super().__init__(message, 400, "BAD_REQUEST")


class NotFoundError(AdminApiError):
    def __init__(self, message: str):
        super().__init__(message, 404, "NOT_FOUND")
