"""
Liveness and version endpoints.

Mounted at the root (not under ``/api/v1``) so load balancers and kiosk
devices can check the server without knowing the API prefix.
"""

from fastapi import APIRouter

from yqpaynow.server.core import constant

router = APIRouter()


@router.get("/health", summary="Health Check", response_description="Status object.")
async def health_check():
    """Answers ``{"status": "ok"}`` while the process is serving requests."""
    return {"status": "ok"}


@router.get("/version", summary="Get Version", response_description="Version object.")
async def version():
    """Current semantic version of the API and the supported schema version."""
    return {"version": constant.API_VERSION, "schema_version": constant.SCHEMA_VERSION}
