"""
Optional Pydantic Logfire tracing for the YQPayNow backend.

When ``LOGFIRE_ENABLED`` is set and a token is present, requests, database
queries and the outbound SMS gateway calls are traced. The event helpers
below (orders, QR batches, errors) always go to the standard logger first,
so a deployment without Logfire still sees them.
"""

import logging
import os
from typing import Any, Callable, List, Optional, Tuple

from fastapi import FastAPI

logger = logging.getLogger(__name__)


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


LOGFIRE_ENABLED = _env_flag("LOGFIRE_ENABLED", "false")
LOGFIRE_TOKEN = os.getenv("LOGFIRE_TOKEN", "")
LOGFIRE_ENVIRONMENT = os.getenv("LOGFIRE_ENVIRONMENT", "development")
LOGFIRE_SERVICE_NAME = os.getenv("LOGFIRE_SERVICE_NAME", "yqpaynow-server")
LOGFIRE_SERVICE_VERSION = os.getenv("LOGFIRE_SERVICE_VERSION", "1.0.0")

LOGFIRE_TRACE_SQLALCHEMY = _env_flag("LOGFIRE_TRACE_SQLALCHEMY", "true")
LOGFIRE_TRACE_HTTPX = _env_flag("LOGFIRE_TRACE_HTTPX", "true")
LOGFIRE_TRACE_FASTAPI = _env_flag("LOGFIRE_TRACE_FASTAPI", "true")


def is_logfire_active() -> bool:
    """Whether Logfire is both enabled and has a token."""
    return LOGFIRE_ENABLED and bool(LOGFIRE_TOKEN)


def _integrations(logfire: Any, app: Optional[FastAPI]) -> List[Tuple[str, Callable[[], Any]]]:
    selected: List[Tuple[str, Callable[[], Any]]] = []
    if LOGFIRE_TRACE_SQLALCHEMY:
        selected.append(("SQLAlchemy", logfire.instrument_sqlalchemy))
    if LOGFIRE_TRACE_HTTPX:
        selected.append(("HTTPX", logfire.instrument_httpx))
    if LOGFIRE_TRACE_FASTAPI and app is not None:
        selected.append(("FastAPI", lambda: logfire.instrument_fastapi(app=app)))
    return selected


def initialize_logfire(app: Optional[FastAPI] = None) -> bool:
    """
    Configure Logfire and switch on the selected instrumentations.

    FastAPI is only instrumented when ``app`` is given. A failing
    instrumentation is reported and skipped; a failing ``configure`` leaves
    Logfire off.

    Returns:
        True when Logfire was configured.
    """
    if not LOGFIRE_ENABLED:
        logger.info("Logfire tracing is disabled (LOGFIRE_ENABLED is not set).")
        return False
    if not LOGFIRE_TOKEN:
        logger.warning("LOGFIRE_ENABLED is set but LOGFIRE_TOKEN is empty; tracing stays off.")
        return False

    try:
        import logfire

        logfire.configure(
            token=LOGFIRE_TOKEN,
            service_name=LOGFIRE_SERVICE_NAME,
            service_version=LOGFIRE_SERVICE_VERSION,
            environment=LOGFIRE_ENVIRONMENT,
        )
    except Exception as e:
        logger.error(f"Logfire configuration failed: {e}", exc_info=True)
        return False

    for label, instrument in _integrations(logfire, app):
        try:
            instrument()
        except Exception as e:
            logger.warning(f"Skipping {label} tracing: {e}")
        else:
            logger.info(f"Tracing {label} with Logfire")

    logger.info(f"Logfire ready for {LOGFIRE_SERVICE_NAME} ({LOGFIRE_ENVIRONMENT})")
    return True


def _emit(level: str, message: str, **attributes: Any) -> None:
    if not is_logfire_active():
        return
    try:
        import logfire

        getattr(logfire, level)(message, **attributes)
    except Exception:
        logger.debug(f"Logfire dropped event: {message}")


def log_api_request(method: str, path: str, status_code: int, duration_ms: float) -> None:
    """Record one handled request and how long it took."""
    logger.debug(f"{method} {path} -> {status_code} ({duration_ms:.2f}ms)")
    _emit("info", "API request completed", method=method, path=path, status_code=status_code, duration_ms=duration_ms)


def log_order_event(order_number: str, theater_id: int, event: str, total: Optional[float] = None) -> None:
    """
    Record an order lifecycle step.

    Args:
        order_number: ``ORD-YYYYMMDD-NNNN`` number shown to the customer
        theater_id: Owning theater
        event: ``placed``, the new order status, or ``payment_<status>``
        total: Order total, when relevant
    """
    logger.info(f"Order {order_number} (theater={theater_id}): {event}")
    _emit("info", "Order event", order_number=order_number, theater_id=theater_id, event=event, total=total)


def log_qr_generation(theater_id: int, qr_name: str, qr_type: str, count: int) -> None:
    logger.info(f"Generated {count} {qr_type} QR code(s) '{qr_name}' for theater {theater_id}")
    _emit("info", "QR codes generated", theater_id=theater_id, qr_name=qr_name, qr_type=qr_type, count=count)


def log_error(error_type: str, error_message: str, context: Optional[dict] = None) -> None:
    """Log an error with its context dict attached as ``extra["context"]``."""
    context = context or {}
    logger.error(f"{error_type}: {error_message}", extra={"context": context})
    _emit("error", f"{error_type}: {error_message}", **context)
