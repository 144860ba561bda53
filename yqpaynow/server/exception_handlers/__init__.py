"""
Exception handlers for the YQPayNow server.

Domain errors become 4xx/5xx JSON bodies with a machine readable code;
anything else is logged with an error ID and returned as a 500.
"""

from .global_handler import (
    domain_exception_handler,
    global_exception_handler,
    setup_exception_handlers,
)

__all__ = ["domain_exception_handler", "global_exception_handler", "setup_exception_handlers"]
