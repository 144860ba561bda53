"""Unit tests for password hashing, JWT handling and code generation."""

import threading
from datetime import timedelta
from unittest.mock import patch

import bcrypt
import jwt
import pytest

from yqpaynow.core.errors import AuthenticationError, ConflictError
from yqpaynow.core.security import (
    create_access_token,
    create_refresh_token,
    decode_token,
    generate_otp,
    generate_pin,
    hash_password,
    hash_password_async,
    verify_password,
    verify_password_async,
)
from yqpaynow.server.core.config import settings


class TestPasswords:
    def test_hash_and_verify(self):
        hashed = hash_password("s3cret-pass")
        assert hashed != "s3cret-pass"
        assert verify_password("s3cret-pass", hashed) is True
        assert verify_password("wrong-pass", hashed) is False

    def test_hash_is_salted(self):
        assert hash_password("same") != hash_password("same")

    def test_uses_configured_rounds(self):
        assert hash_password("pw").startswith(f"$2b${settings.bcrypt_rounds:02d}$")

    @pytest.mark.parametrize("stored", [None, "", "not-a-bcrypt-hash"])
    def test_missing_or_malformed_hash_never_matches(self, stored):
        assert verify_password("anything", stored) is False

    def test_empty_password_never_matches(self):
        assert verify_password("", hash_password("x")) is False

    @pytest.mark.asyncio
    async def test_async_variants_run_on_a_worker_thread(self):
        loop_thread = threading.get_ident()
        threads = []
        real_hashpw = bcrypt.hashpw

        def recording_hashpw(*args):
            threads.append(threading.get_ident())
            return real_hashpw(*args)

        with patch("yqpaynow.core.security.bcrypt.hashpw", side_effect=recording_hashpw):
            hashed = await hash_password_async("s3cret-pass")

        assert threads and threads[0] != loop_thread
        assert await verify_password_async("s3cret-pass", hashed) is True
        assert await verify_password_async("wrong-pass", hashed) is False


class TestAccessTokens:
    def test_round_trip_claims(self):
        token = create_access_token({"sub": 42, "role": "super_admin", "user_type": "super_admin"})
        payload = decode_token(token)
        assert payload["sub"] == "42"
        assert payload["role"] == "super_admin"
        assert payload["type"] == "access"

    def test_expired_token(self):
        token = create_access_token({"sub": 1}, expires_delta=timedelta(seconds=-5))
        with pytest.raises(AuthenticationError) as exc_info:
            decode_token(token)
        assert exc_info.value.code == "TOKEN_EXPIRED"
        assert exc_info.value.status_code == 401

    def test_garbage_token(self):
        with pytest.raises(AuthenticationError) as exc_info:
            decode_token("not.a.token")
        assert exc_info.value.code == "TOKEN_INVALID"

    def test_foreign_signature(self):
        token = jwt.encode({"sub": "1", "type": "access"}, "someone-else", algorithm="HS256")
        with pytest.raises(AuthenticationError) as exc_info:
            decode_token(token)
        assert exc_info.value.code == "TOKEN_INVALID"


class TestRefreshTokens:
    def test_refresh_round_trip(self):
        token = create_refresh_token("theater:7", "theater_admin")
        payload = decode_token(token, refresh=True)
        assert payload["sub"] == "theater:7"
        assert payload["user_type"] == "theater_admin"
        assert payload["type"] == "refresh"

    def test_refresh_token_is_not_an_access_token(self):
        token = create_refresh_token("admin:1", "super_admin")
        with pytest.raises(AuthenticationError) as exc_info:
            decode_token(token)
        assert exc_info.value.code == "TOKEN_INVALID"

    def test_access_token_is_not_a_refresh_token(self):
        token = create_access_token({"sub": 1})
        with pytest.raises(AuthenticationError):
            decode_token(token, refresh=True)

    def test_wrong_type_with_right_secret(self):
        jwt_config = settings.jwt
        token = jwt.encode({"sub": "1", "type": "access"}, jwt_config.refresh_secret, algorithm=jwt_config.algorithm)
        with pytest.raises(AuthenticationError):
            decode_token(token, refresh=True)


class TestGeneratePin:
    def test_four_digit_pin(self):
        pin = generate_pin([])
        assert len(pin) == 4
        assert 1000 <= int(pin) <= 9999

    def test_avoids_existing_pins(self):
        taken = {str(n) for n in range(1000, 9999)}
        assert generate_pin(taken) == "9999"

    def test_exhausted_space(self):
        taken = [str(n) for n in range(1000, 10000)]
        with pytest.raises(ConflictError) as exc_info:
            generate_pin(taken)
        assert exc_info.value.code == "PIN_SPACE_EXHAUSTED"

    def test_non_pin_values_do_not_count(self):
        taken = [str(n) for n in range(1000, 9999)] + ["0123", "abcd", "12345"]
        assert generate_pin(taken) == "9999"


class TestGenerateOtp:
    @pytest.mark.parametrize("length", [1, 4, 6, 8])
    def test_length_and_digits(self, length):
        otp = generate_otp(length)
        assert len(otp) == length
        assert otp.isdigit()
        assert otp[0] != "0"

    def test_default_length(self):
        assert len(generate_otp()) == 4

    def test_rejects_non_positive_length(self):
        with pytest.raises(ValueError):
            generate_otp(0)
