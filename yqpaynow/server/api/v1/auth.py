"""
Authentication API Endpoints.

Login for admins, theater owners and staff, the staff PIN step, token
refresh and identity lookups. Tokens are stateless JWTs; logout only tells
the client to drop them.
"""

from fastapi import APIRouter, status

from yqpaynow.core.models.io.auth import (
    AuthResponse,
    LoginRequest,
    PinValidationRequest,
    RefreshRequest,
    TokenRefreshResponse,
    UserSummary,
)
from yqpaynow.core.models.io.common import MessageResponse
from yqpaynow.server.services.auth import AuthService
from yqpaynow.server.services.deps import CurrentUserDep, SessionDep

router = APIRouter(tags=["auth"])


@router.post(
    "/login",
    response_model=AuthResponse,
    summary="Log In",
    description="Authenticate with e-mail (admins) or username (theater owners and staff) and password.",
    responses={
        200: {"description": "Tokens issued, or a PIN is required to finish a staff login"},
        400: {"description": "Neither e-mail nor username given"},
        401: {"description": "Invalid credentials"},
        403: {"description": "Theater is inactive"},
    },
)
async def login(request: LoginRequest, session: SessionDep) -> AuthResponse:
    """
    Log in.

    Staff accounts receive ``is_pin_required: true`` and a ``pending_auth``
    block; post it with the PIN to ``/validate-pin`` to obtain tokens.
    """
    return await AuthService(session).login(request)


@router.post(
    "/validate-pin",
    response_model=AuthResponse,
    summary="Validate Staff PIN",
    description="Second login step for theater staff.",
    responses={
        401: {"description": "Invalid PIN"},
        403: {"description": "Theater is inactive"},
        404: {"description": "User or theater not found"},
    },
)
async def validate_pin(request: PinValidationRequest, session: SessionDep) -> AuthResponse:
    return await AuthService(session).validate_pin(request)


@router.post(
    "/refresh",
    response_model=TokenRefreshResponse,
    summary="Refresh Access Token",
    responses={401: {"description": "Refresh token invalid, expired, or its account is inactive"}},
)
async def refresh(request: RefreshRequest, session: SessionDep) -> TokenRefreshResponse:
    token = await AuthService(session).refresh(request.refresh_token)
    return TokenRefreshResponse(token=token)


@router.post("/logout", response_model=MessageResponse, status_code=status.HTTP_200_OK, summary="Log Out")
async def logout() -> MessageResponse:
    return MessageResponse(message="Logged out successfully")


@router.get("/me", response_model=UserSummary, summary="Current User")
async def me(user: CurrentUserDep, session: SessionDep) -> UserSummary:
    """Profile of the authenticated principal, reloaded from the database."""
    return await AuthService(session).describe(user)


@router.get("/validate", response_model=UserSummary, summary="Validate Token")
async def validate(user: CurrentUserDep, session: SessionDep) -> UserSummary:
    """Same as ``/me``; kept for consoles that poll token validity."""
    return await AuthService(session).describe(user)
