"""
utils/exceptions.py

Application errors raised by routers and services. Each one carries the HTTP
status and a stable error code; middlewares/error_handler.py turns them into
the shared JSON error envelope.

    from utils.exceptions import NotFoundError

    stayback = db.get(StaybackModel, stayback_id)
    if stayback is None:
        raise NotFoundError("Stayback not found")
"""

from typing import Any, Dict, Optional


class AppError(Exception):
    """Base class for every error the API reports on purpose"""

    status_code: int = 500
    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, details: Optional[Any] = None, code: Optional[str] = None):
        self.message = message
        self.details = details
        if code is not None:
            self.code = code
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body


# ==========================================================
# 400 / 401 / 403 / 404
# ==========================================================

class ValidationError(AppError):
    """Missing or malformed input (absent delete id, bad time window, ...)"""
    status_code = 400
    code = "VALIDATION_ERROR"


class AuthError(AppError):
    """No session, or the session token could not be verified"""
    status_code = 401
    code = "UNAUTHORIZED"

    def __init__(self, message: str = "Unauthorized", details: Optional[Any] = None):
        super().__init__(message, details)


class PermissionDeniedError(AppError):
    status_code = 403
    code = "FORBIDDEN"

    def __init__(self, message: str = "Forbidden", details: Optional[Any] = None):
        super().__init__(message, details)


class NotFoundError(AppError):
    status_code = 404
    code = "NOT_FOUND"
