"""Error types raised by :class:`~yqpaynow.client.ApiClient`.

Catch ``ApiClientError`` for general failures and inspect ``status_code`` or
``details``; catch ``ApiNotFoundError`` for 404 responses.
"""

from __future__ import annotations

from typing import Any, Optional


class ApiClientError(Exception):
    """Base error for API failures.

    Args:
        message: Human-readable error description.
        status_code: Optional HTTP status code associated with the failure.
        details: Optional structured payload from the server (e.g., JSON body).
    """

    def __init__(self, message: str, *, status_code: Optional[int] = None, details: Optional[Any] = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.details = details


class ApiNotFoundError(ApiClientError):
    """Raised when the server answers 404."""
