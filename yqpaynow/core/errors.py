"""
Domain error types.

Services raise these instead of HTTP exceptions; the server maps them to
JSON responses carrying ``detail``, a machine readable ``code`` and optional
``details``.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class YQPayError(Exception):
    """Base class for all domain errors."""

    status_code: int = 400
    default_code: str = "ERROR"

    def __init__(
        self,
        message: str,
        *,
        code: Optional[str] = None,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        if status_code is not None:
            self.status_code = status_code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"detail": self.message, "code": self.code}
        if self.details:
            body["details"] = self.details
        return body


class ValidationFailedError(YQPayError):
    status_code = 400
    default_code = "VALIDATION_ERROR"


class AuthenticationError(YQPayError):
    status_code = 401
    default_code = "AUTH_REQUIRED"


class PermissionDeniedError(YQPayError):
    status_code = 403
    default_code = "INSUFFICIENT_PERMISSIONS"


class NotFoundError(YQPayError):
    status_code = 404
    default_code = "NOT_FOUND"


class ConflictError(YQPayError):
    status_code = 409
    default_code = "CONFLICT"


class ExternalServiceError(YQPayError):
    """An upstream provider (SMS gateway) failed or rejected the call."""

    status_code = 502
    default_code = "EXTERNAL_SERVICE_ERROR"
