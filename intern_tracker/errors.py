# intern_tracker/errors.py
"""Error taxonomy shared by every route.

Each error is an ``HTTPException`` so the application-level handler in
``main.py`` renders it as ``{"error": detail}`` with the matching status.
"""
from fastapi import HTTPException


class ApiError(HTTPException):
    status_code = 500
    default_detail = "Internal server error"

    def __init__(self, detail: str = None):
        super().__init__(status_code=self.status_code, detail=detail or self.default_detail)


class Unauthorized(ApiError):
    status_code = 401
    default_detail = "Unauthorized"


class InvalidToken(ApiError):
    status_code = 401
    default_detail = "Invalid token"


class Forbidden(ApiError):
    status_code = 403
    default_detail = "Admin access required"


class ValidationFailed(ApiError):
    status_code = 400
    default_detail = "Validation error"


class NotFound(ApiError):
    status_code = 404
    default_detail = "Not found"


class Conflict(ApiError):
    status_code = 409
    default_detail = "Conflict"


class InternalError(ApiError):
    status_code = 500
    default_detail = "Internal server error"
