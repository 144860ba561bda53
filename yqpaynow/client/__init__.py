"""Async API client with response caching and request de-duplication."""

from .cache import RequestDeduplicator, ResponseCache
from .client import ApiClient, clean_token
from .errors import ApiClientError, ApiNotFoundError

__all__ = [
    "ApiClient",
    "ApiClientError",
    "ApiNotFoundError",
    "RequestDeduplicator",
    "ResponseCache",
    "clean_token",
]
