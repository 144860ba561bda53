"""
Unit tests for the request logging middleware.

This test suite covers:
- Reporting of method, path and status
- The X-Process-Time header
- Slow request warnings
- Failed requests
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi import FastAPI, Request
from starlette.responses import Response
from starlette.testclient import TestClient

from yqpaynow.server.middleware import RequestLoggingMiddleware

MIDDLEWARE_MODULE = "yqpaynow.server.middleware.request_logging"


def _request(method: str = "GET", path: str = "/api/v1/products/1"):
    request = AsyncMock(spec=Request)
    request.method = method
    request.url.path = path
    request.state = MagicMock()
    return request


class TestRequestLoggingDispatch:
    @pytest.mark.asyncio
    async def test_reports_successful_request(self):
        async def call_next(request):
            return Response(content="ok", status_code=200)

        middleware = RequestLoggingMiddleware(app=AsyncMock())

        with patch(f"{MIDDLEWARE_MODULE}.log_api_request") as mock_log:
            response = await middleware.dispatch(_request(), call_next)

        assert response.status_code == 200
        mock_log.assert_called_once()
        kwargs = mock_log.call_args[1]
        assert kwargs["method"] == "GET"
        assert kwargs["path"] == "/api/v1/products/1"
        assert kwargs["status_code"] == 200
        assert kwargs["duration_ms"] >= 0

    @pytest.mark.asyncio
    async def test_adds_process_time_header(self):
        async def call_next(request):
            return Response(content="created", status_code=201)

        middleware = RequestLoggingMiddleware(app=AsyncMock())

        with patch(f"{MIDDLEWARE_MODULE}.log_api_request"):
            response = await middleware.dispatch(_request("POST", "/api/v1/orders/theater"), call_next)

        assert float(response.headers["X-Process-Time"]) >= 0

    @pytest.mark.asyncio
    async def test_stores_start_time_on_request(self):
        request = _request()

        async def call_next(req):
            return Response(status_code=204)

        middleware = RequestLoggingMiddleware(app=AsyncMock())

        with patch(f"{MIDDLEWARE_MODULE}.log_api_request"):
            await middleware.dispatch(request, call_next)

        assert isinstance(request.state.start_time, float)

    @pytest.mark.asyncio
    async def test_warns_on_slow_request(self):
        async def call_next(request):
            return Response(status_code=200)

        middleware = RequestLoggingMiddleware(app=AsyncMock())

        with (
            patch(f"{MIDDLEWARE_MODULE}.log_api_request"),
            patch(f"{MIDDLEWARE_MODULE}.logger") as mock_logger,
            patch(f"{MIDDLEWARE_MODULE}.time", **{"time.side_effect": [100.0, 102.5]}),
        ):
            await middleware.dispatch(_request(), call_next)

        mock_logger.warning.assert_called_once()
        assert "Slow API request" in mock_logger.warning.call_args[0][0]
        assert mock_logger.warning.call_args[1]["extra"]["duration_ms"] == 2500.0

    @pytest.mark.asyncio
    async def test_fast_request_does_not_warn(self):
        async def call_next(request):
            return Response(status_code=200)

        middleware = RequestLoggingMiddleware(app=AsyncMock())

        with (
            patch(f"{MIDDLEWARE_MODULE}.log_api_request"),
            patch(f"{MIDDLEWARE_MODULE}.logger") as mock_logger,
            patch(f"{MIDDLEWARE_MODULE}.time", **{"time.side_effect": [100.0, 100.2]}),
        ):
            await middleware.dispatch(_request(), call_next)

        mock_logger.warning.assert_not_called()

    @pytest.mark.asyncio
    async def test_failed_request_is_logged_and_reraised(self):
        async def call_next(request):
            raise RuntimeError("boom")

        middleware = RequestLoggingMiddleware(app=AsyncMock())

        with (
            patch(f"{MIDDLEWARE_MODULE}.log_api_request") as mock_log,
            patch(f"{MIDDLEWARE_MODULE}.logger") as mock_logger,
        ):
            with pytest.raises(RuntimeError, match="boom"):
                await middleware.dispatch(_request("DELETE", "/api/v1/theaters/1"), call_next)

        assert mock_log.call_args[1]["status_code"] == 500
        mock_logger.error.assert_called_once()
        assert mock_logger.error.call_args[1]["extra"]["error"] == "boom"


class TestRequestLoggingInApp:
    def test_header_on_real_response(self):
        app = FastAPI()
        app.add_middleware(RequestLoggingMiddleware)

        @app.get("/ping")
        def ping():
            return {"ok": True}

        with TestClient(app, base_url="http://localhost") as client:
            response = client.get("/ping")

        assert response.status_code == 200
        assert "x-process-time" in response.headers
