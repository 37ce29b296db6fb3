"""
Tests for security.py module.

Tests password hashing, security stamps, and access/reset token validation.
"""

from datetime import datetime, timedelta, timezone

import jwt

from clean_api.config import settings
from clean_api.security import (
    create_access_token,
    create_password_reset_token,
    decode_access_token,
    decode_password_reset_token,
    generate_security_stamp,
    get_token_from_header,
    hash_password,
    verify_password,
)


def _encode(**overrides) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "sub": "user-1",
        "type": "access",
        "iss": settings.JWT_ISSUER,
        "aud": settings.JWT_AUDIENCE,
        "iat": now,
        "exp": now + timedelta(minutes=5),
    }
    payload.update(overrides)
    return jwt.encode(payload, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


class TestPasswordHashing:
    """Test password hashing and verification."""

    def test_hash_password_bcrypt_format(self):
        hashed = hash_password("Passw0rd!")
        assert hashed.startswith("$2b$")
        assert hashed != "Passw0rd!"

    def test_hash_password_different_salts(self):
        """Test that same password produces different hashes."""
        assert hash_password("Passw0rd!") != hash_password("Passw0rd!")

    def test_verify_password_correct(self):
        hashed = hash_password("Passw0rd!")
        assert verify_password("Passw0rd!", hashed) is True

    def test_verify_password_incorrect(self):
        hashed = hash_password("Passw0rd!")
        assert verify_password("WrongPassw0rd!", hashed) is False

    def test_verify_password_empty_inputs(self):
        hashed = hash_password("Passw0rd!")
        assert verify_password("", hashed) is False
        assert verify_password("Passw0rd!", None) is False

    def test_verify_password_malformed_hash(self):
        assert verify_password("Passw0rd!", "not-a-bcrypt-hash") is False

    def test_long_passwords_are_truncated_consistently(self):
        """bcrypt only sees the first 72 bytes."""
        password = "A1!" + "x" * 100
        hashed = hash_password(password)
        assert verify_password(password, hashed) is True
        assert verify_password(password[:72], hashed) is True


class TestSecurityStamp:
    def test_stamps_are_unique_uppercase_hex(self):
        first, second = generate_security_stamp(), generate_security_stamp()
        assert first != second
        assert len(first) == 32
        assert first == first.upper()
        int(first, 16)


class TestAccessToken:
    """Test access token creation and validation."""

    def test_round_trip_claims(self):
        token, expires = create_access_token("user-1", "jane@example.com", "Jane Doe", ["User"])
        payload = decode_access_token(token)

        assert payload is not None
        assert payload["sub"] == "user-1"
        assert payload["email"] == "jane@example.com"
        assert payload["name"] == "Jane Doe"
        assert payload["roles"] == ["User"]
        assert payload["type"] == "access"
        assert payload["iss"] == settings.JWT_ISSUER
        assert payload["aud"] == settings.JWT_AUDIENCE
        assert payload["jti"]
        assert expires > datetime.now(timezone.utc)

    def test_each_token_has_unique_jti(self):
        first, _ = create_access_token("user-1", "a@b.c", "A", [])
        second, _ = create_access_token("user-1", "a@b.c", "A", [])
        assert decode_access_token(first)["jti"] != decode_access_token(second)["jti"]

    def test_expired_token_rejected(self):
        past = datetime.now(timezone.utc) - timedelta(seconds=1)
        token = _encode(iat=past - timedelta(minutes=5), exp=past)
        assert decode_access_token(token) is None

    def test_wrong_issuer_rejected(self):
        assert decode_access_token(_encode(iss="someone-else")) is None

    def test_wrong_audience_rejected(self):
        assert decode_access_token(_encode(aud="someone-else")) is None

    def test_wrong_signature_rejected(self):
        token = jwt.encode(
            {"sub": "user-1", "type": "access"}, "another-secret-key-of-32-characters!", algorithm="HS256"
        )
        assert decode_access_token(token) is None

    def test_reset_token_is_not_an_access_token(self):
        token = create_password_reset_token("user-1", "STAMP")
        assert decode_access_token(token) is None

    def test_garbage_rejected(self):
        assert decode_access_token("not.a.token") is None


class TestPasswordResetToken:
    def test_round_trip(self):
        token = create_password_reset_token("user-1", "STAMP")
        payload = decode_password_reset_token(token)
        assert payload["sub"] == "user-1"
        assert payload["stamp"] == "STAMP"

    def test_access_token_is_not_a_reset_token(self):
        token, _ = create_access_token("user-1", "a@b.c", "A", [])
        assert decode_password_reset_token(token) is None


class TestTokenFromHeader:
    def test_bearer(self):
        assert get_token_from_header("Bearer abc") == "abc"
        assert get_token_from_header("bearer abc") == "abc"

    def test_missing_or_malformed(self):
        assert get_token_from_header(None) is None
        assert get_token_from_header("") is None
        assert get_token_from_header("Basic abc") is None
        assert get_token_from_header("Bearer") is None
        assert get_token_from_header("Bearer a b") is None
