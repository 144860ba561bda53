"""YQPayNow API client

Overview
--------
Async HTTP client for the YQPayNow REST API, used by consoles, kiosks and
scripts. Read requests are cached in memory with a TTL and concurrent reads
of the same resource share one in-flight request. Writes bypass the cache
and invalidate every cached read under the written resource.

Authentication
--------------
A Bearer token is attached only when it looks like a JWT (three
dot-separated parts) after surrounding whitespace and quotes are stripped.
Anything else is ignored so a corrupted stored token never reaches the server.

Errors
------
Non-2xx responses raise ``ApiClientError`` (``ApiNotFoundError`` for 404)
with the status code and the decoded body in ``details``.
"""

from __future__ import annotations

import asyncio
import time
from typing import Any, Dict, Iterable, List, Mapping, Optional
from urllib.parse import urlencode

import httpx

from yqpaynow.core.logging_config import get_logger

from .cache import RequestDeduplicator, ResponseCache
from .errors import ApiClientError, ApiNotFoundError

logger = get_logger(__name__)


def clean_token(token: Optional[str]) -> Optional[str]:
    """Strip whitespace and quotes; return None unless the result has three dot-separated parts."""
    if not token:
        return None
    cleaned = token.strip().strip("\"'").strip()
    if cleaned.lower().startswith("bearer "):
        cleaned = cleaned[7:].strip()
    parts = cleaned.split(".")
    if len(parts) != 3 or not all(parts):
        logger.debug("Ignoring malformed auth token")
        return None
    return cleaned


class ApiClient:
    """Cached async client for the REST API.

    Args:
        base_url: Server root, e.g. ``http://localhost:8000/api/v1``
        token: Optional access token
        default_ttl: Cache lifetime in seconds for GET responses
        client: Optional preconfigured ``httpx.AsyncClient``
        timeout: Default HTTP timeout for the internal client
    """

    def __init__(
        self,
        base_url: str,
        *,
        token: Optional[str] = None,
        default_ttl: float = 300.0,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 30.0,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._token = clean_token(token)
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._owns_client = client is None
        self.cache = ResponseCache(default_ttl=default_ttl)
        self._dedup = RequestDeduplicator()

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    @property
    def token(self) -> Optional[str]:
        return self._token

    def set_token(self, token: Optional[str]) -> None:
        """Replace the token; cached reads belong to the previous identity and are dropped."""
        self._token = clean_token(token)
        self.cache.clear()

    def _headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    def _url(self, path: str) -> str:
        if path.startswith(("http://", "https://")):
            return path
        return f"{self.base_url}/{path.lstrip('/')}"

    @staticmethod
    def cache_key(path: str, params: Optional[Mapping[str, Any]] = None) -> str:
        """Path plus sorted query string; ``None`` params are skipped."""
        clean = {k: v for k, v in (params or {}).items() if v is not None}
        key = "/" + path.lstrip("/")
        if clean:
            key += "?" + urlencode(sorted(clean.items()), doseq=True)
        return key

    @staticmethod
    def _resource_prefix(path: str) -> str:
        """Collection a write touches: ``/roles/5/permissions`` invalidates ``/roles``."""
        segments = [segment for segment in path.split("?", 1)[0].strip("/").split("/") if segment]
        return "/" + segments[0] if segments else "/"

    async def _send(self, method: str, path: str, **kwargs: Any) -> Any:
        started = time.perf_counter()
        response = await self._client.request(method, self._url(path), headers=self._headers(), **kwargs)
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.debug(f"{method} {path} -> {response.status_code} in {elapsed_ms:.1f}ms")

        if response.is_success:
            if not response.content:
                return None
            try:
                return response.json()
            except ValueError:
                return response.text

        try:
            details: Any = response.json()
        except ValueError:
            details = response.text
        message = f"HTTP {response.status_code}: {response.reason_phrase}"
        error_cls = ApiNotFoundError if response.status_code == 404 else ApiClientError
        raise error_cls(message, status_code=response.status_code, details=details)

    async def get(
        self,
        path: str,
        *,
        params: Optional[Mapping[str, Any]] = None,
        ttl: Optional[float] = None,
        force_refresh: bool = False,
        prefetch: bool = False,
        cache_key: Optional[str] = None,
    ) -> Any:
        """
        Fetch JSON, served from cache when fresh.

        Args:
            path: Path relative to ``base_url``
            params: Query parameters
            ttl: Cache lifetime override for this response
            force_refresh: Skip the cached value and refetch
            prefetch: Fetch without storing the result in the cache
            cache_key: Explicit cache key

        Returns:
            Decoded JSON body
        """
        key = cache_key or self.cache_key(path, params)
        if not force_refresh and not prefetch:
            cached = self.cache.get(key)
            if cached is not None:
                logger.debug(f"Cache hit {key}")
                return cached
        logger.debug(f"Cache miss {key}")

        clean_params = {k: v for k, v in (params or {}).items() if v is not None}
        data = await self._dedup.run(key, lambda: self._send("GET", path, params=clean_params))
        if not prefetch and data is not None:
            self.cache.set(key, data, ttl)
        return data

    async def prefetch(self, path: str, *, params: Optional[Mapping[str, Any]] = None) -> Any:
        """Warm-up read that is never stored in the cache."""
        return await self.get(path, params=params, prefetch=True)

    async def get_many(self, paths: Iterable[str], *, ttl: Optional[float] = None) -> List[Any]:
        """Fetch several paths in parallel; results keep the input order."""
        return list(await asyncio.gather(*(self.get(path, ttl=ttl) for path in paths)))

    async def _write(self, method: str, path: str, **kwargs: Any) -> Any:
        try:
            return await self._send(method, path, **kwargs)
        finally:
            removed = self.cache.invalidate_prefix(self._resource_prefix(path))
            if removed:
                logger.debug(f"Invalidated {removed} cached response(s) after {method} {path}")

    async def post(self, path: str, *, json: Any = None, data: Any = None, files: Any = None) -> Any:
        return await self._write("POST", path, json=json, data=data, files=files)

    async def put(self, path: str, *, json: Any = None, data: Any = None, files: Any = None) -> Any:
        return await self._write("PUT", path, json=json, data=data, files=files)

    async def patch(self, path: str, *, json: Any = None) -> Any:
        return await self._write("PATCH", path, json=json)

    async def delete(self, path: str) -> Any:
        return await self._write("DELETE", path)

    async def login(self, identifier: str, password: str) -> Dict[str, Any]:
        """Log in and keep the returned access token (admins and theater owners)."""
        field = "email" if "@" in identifier else "username"
        body = await self.post("/auth/login", json={field: identifier, "password": password})
        if body and body.get("token"):
            self.set_token(body["token"])
        return body

    async def validate_pin(self, user_id: int, theater_id: int, pin: str) -> Dict[str, Any]:
        """Complete a staff login with the PIN and keep the returned token."""
        body = await self.post("/auth/validate-pin", json={"user_id": user_id, "theater_id": theater_id, "pin": pin})
        if body and body.get("token"):
            self.set_token(body["token"])
        return body
