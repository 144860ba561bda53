"""
Password hashing, token signing and one-time code generation.

Passwords use bcrypt; access and refresh tokens are HS256 JWTs signed with
separate secrets so a refresh token can never be presented as an access token.
"""

from __future__ import annotations

import asyncio
import secrets
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Iterable, Optional

import bcrypt
import jwt

from yqpaynow.core.errors import AuthenticationError, ConflictError
from yqpaynow.core.logging_config import get_logger
from yqpaynow.server.core.config import settings

logger = get_logger(__name__)

PIN_LENGTH = 4


def hash_password(plain: str) -> str:
    """Hash a password with bcrypt using the configured cost factor."""
    salt = bcrypt.gensalt(rounds=settings.bcrypt_rounds)
    return bcrypt.hashpw(plain.encode("utf-8"), salt).decode("utf-8")


def verify_password(plain: str, hashed: Optional[str]) -> bool:
    """Check a password against a stored bcrypt hash.

    A missing or malformed hash never matches.
    """
    if not plain or not hashed:
        return False
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        logger.warning("Stored password hash is not a valid bcrypt hash")
        return False


async def hash_password_async(plain: str) -> str:
    """:func:`hash_password` on a worker thread, for request handlers."""
    return await asyncio.to_thread(hash_password, plain)


async def verify_password_async(plain: str, hashed: Optional[str]) -> bool:
    return await asyncio.to_thread(verify_password, plain, hashed)


def create_access_token(claims: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """
    Sign an access token.

    Args:
        claims: Token claims; ``sub`` is coerced to a string
        expires_delta: Lifetime override, defaults to ``JWT_EXPIRES_MINUTES``

    Returns:
        Encoded JWT
    """
    jwt_config = settings.jwt
    now = datetime.now(timezone.utc)
    payload = dict(claims)
    payload["sub"] = str(payload["sub"])
    payload["type"] = "access"
    payload["iat"] = now
    payload["exp"] = now + (expires_delta or timedelta(minutes=jwt_config.expires_minutes))
    return jwt.encode(payload, jwt_config.secret, algorithm=jwt_config.algorithm)


def create_refresh_token(subject: str | int, user_type: str) -> str:
    """Sign a refresh token for a user."""
    jwt_config = settings.jwt
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(subject),
        "user_type": user_type,
        "type": "refresh",
        "iat": now,
        "exp": now + timedelta(days=jwt_config.refresh_expires_days),
    }
    return jwt.encode(payload, jwt_config.refresh_secret, algorithm=jwt_config.algorithm)


def decode_token(token: str, *, refresh: bool = False) -> Dict[str, Any]:
    """
    Verify and decode a token.

    Args:
        token: Encoded JWT
        refresh: Verify against the refresh secret instead of the access secret

    Returns:
        The decoded claims

    Raises:
        AuthenticationError: The token is expired, malformed or of the wrong type
    """
    jwt_config = settings.jwt
    secret = jwt_config.refresh_secret if refresh else jwt_config.secret
    try:
        payload = jwt.decode(token, secret, algorithms=[jwt_config.algorithm])
    except jwt.ExpiredSignatureError:
        raise AuthenticationError("Token has expired", code="TOKEN_EXPIRED")
    except jwt.InvalidTokenError:
        raise AuthenticationError("Invalid token", code="TOKEN_INVALID")

    expected_type = "refresh" if refresh else "access"
    if payload.get("type") != expected_type:
        raise AuthenticationError("Invalid token", code="TOKEN_INVALID")
    return payload


def generate_pin(existing: Iterable[str]) -> str:
    """
    Pick a random 4-digit PIN that is not already taken.

    Raises:
        ConflictError: Every PIN from 1000 to 9999 is in use
    """
    taken = set(existing)
    available = 9000 - len({pin for pin in taken if len(pin) == PIN_LENGTH and pin.isdigit() and pin[0] != "0"})
    if available <= 0:
        raise ConflictError("No unused PIN is available", code="PIN_SPACE_EXHAUSTED")
    while True:
        pin = str(1000 + secrets.randbelow(9000))
        if pin not in taken:
            return pin


def generate_otp(length: int = 4) -> str:
    """Generate a numeric one-time code of exactly ``length`` digits."""
    if length < 1:
        raise ValueError("OTP length must be positive")
    first = str(1 + secrets.randbelow(9))
    return first + "".join(str(secrets.randbelow(10)) for _ in range(length - 1))
