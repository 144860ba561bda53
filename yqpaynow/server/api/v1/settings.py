"""
Settings API Endpoints.

Per-theater preferences (currency, timezone, language, tax and service
charge rates) and branding colours.
"""

from fastapi import APIRouter

from yqpaynow.core.models.io.theaters import TheaterSettingsRead, TheaterSettingsUpdate
from yqpaynow.server.services.deps import SessionDep, TheaterAccessDep
from yqpaynow.server.services.theaters import TheaterService

router = APIRouter(tags=["settings"])


@router.get("/theater/{theater_id}", response_model=TheaterSettingsRead, summary="Get Theater Settings")
async def get_theater_settings(theater_id: int, session: SessionDep, _: TheaterAccessDep) -> TheaterSettingsRead:
    return await TheaterService(session).get_settings(theater_id)


@router.put(
    "/theater/{theater_id}",
    response_model=TheaterSettingsRead,
    summary="Update Theater Settings",
    description="Only the keys sent are changed.",
)
async def update_theater_settings(
    theater_id: int, data: TheaterSettingsUpdate, session: SessionDep, _: TheaterAccessDep
) -> TheaterSettingsRead:
    return await TheaterService(session).update_settings(theater_id, data)
