"""
Security utilities for authentication.

Provides password hashing, security stamps, and JWT generation and validation
for access and password reset tokens.
"""

import secrets
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Tuple

import bcrypt
import jwt
from jwt.exceptions import ExpiredSignatureError, InvalidTokenError

from .config import settings
from .logging_config import get_logger

logger = get_logger(__name__)

ACCESS_TOKEN_TYPE = "access"
PASSWORD_RESET_TOKEN_TYPE = "password_reset"

# bcrypt only uses the first 72 bytes of a password
BCRYPT_MAX_BYTES = 72


# ==================== PASSWORD HASHING ====================


def hash_password(password: str) -> str:
    """
    Hash a password using bcrypt.

    Args:
        password: Plain text password

    Returns:
        Hashed password string
    """
    salt = bcrypt.gensalt(rounds=settings.PASSWORD_HASH_ROUNDS)
    hashed = bcrypt.hashpw(password.encode("utf-8")[:BCRYPT_MAX_BYTES], salt)
    return hashed.decode("utf-8")


def verify_password(password: str, hashed_password: Optional[str]) -> bool:
    """
    Verify a password against its hash.

    Args:
        password: Plain text password to verify
        hashed_password: Stored hash to verify against

    Returns:
        True if password matches, False otherwise
    """
    if not password or not hashed_password:
        return False
    try:
        return bcrypt.checkpw(
            password.encode("utf-8")[:BCRYPT_MAX_BYTES],
            hashed_password.encode("utf-8"),
        )
    except ValueError as e:
        logger.error("Password verification failed", error=str(e))
        return False


def generate_security_stamp() -> str:
    """
    Generate a new opaque security stamp.

    Rotating the stamp invalidates every artifact bound to the previous value.
    """
    return secrets.token_hex(16).upper()


# ==================== JWT TOKENS ====================


def create_access_token(
    user_id: str,
    email: str,
    full_name: str,
    roles: List[str],
    additional_claims: Optional[Dict[str, Any]] = None,
) -> Tuple[str, datetime]:
    """
    Create a JWT access token.

    Args:
        user_id: User's id
        email: User's email
        full_name: User's display name
        roles: Role names, one claim entry per role
        additional_claims: Optional additional claims to include

    Returns:
        Tuple of (encoded token, expiry timestamp)
    """
    now = datetime.now(timezone.utc)
    expire = now + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    payload = {
        "sub": user_id,
        "email": email,
        "name": full_name,
        "jti": str(uuid.uuid4()),
        "roles": list(roles),
        "type": ACCESS_TOKEN_TYPE,
        "iss": settings.JWT_ISSUER,
        "aud": settings.JWT_AUDIENCE,
        "iat": now,
        "exp": expire,
    }

    if additional_claims:
        payload.update(additional_claims)

    token = jwt.encode(payload, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)

    logger.debug("Created access token", user_id=user_id, expires_at=expire.isoformat())
    return token, expire


def _decode(token: str, expected_type: str) -> Optional[Dict[str, Any]]:
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET_KEY,
            algorithms=[settings.JWT_ALGORITHM],
            issuer=settings.JWT_ISSUER,
            audience=settings.JWT_AUDIENCE,
            leeway=0,
            options={"require": ["exp", "iat", "sub"]},
        )
    except ExpiredSignatureError:
        logger.debug("Token expired", token_type=expected_type)
        return None
    except InvalidTokenError as e:
        logger.warning("Invalid token", token_type=expected_type, error=str(e))
        return None

    if payload.get("type") != expected_type:
        logger.warning("Invalid token type", expected=expected_type, actual=payload.get("type"))
        return None

    return payload


def decode_access_token(token: str) -> Optional[Dict[str, Any]]:
    """
    Decode and validate a JWT access token.

    Checks signature, lifetime, issuer, audience and token type.

    Args:
        token: JWT token string

    Returns:
        Decoded payload if valid, None otherwise
    """
    return _decode(token, ACCESS_TOKEN_TYPE)


def create_password_reset_token(user_id: str, security_stamp: Optional[str]) -> str:
    """
    Create a password reset token bound to the user's security stamp.

    Args:
        user_id: User's id
        security_stamp: Current security stamp of the user

    Returns:
        Encoded JWT reset token
    """
    now = datetime.now(timezone.utc)
    payload = {
        "sub": user_id,
        "stamp": security_stamp,
        "type": PASSWORD_RESET_TOKEN_TYPE,
        "iss": settings.JWT_ISSUER,
        "aud": settings.JWT_AUDIENCE,
        "iat": now,
        "exp": now + timedelta(minutes=settings.PASSWORD_RESET_TOKEN_EXPIRE_MINUTES),
    }
    return jwt.encode(payload, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_password_reset_token(token: str) -> Optional[Dict[str, Any]]:
    """
    Decode and validate a password reset token.

    Args:
        token: JWT token string

    Returns:
        Decoded payload if valid, None otherwise
    """
    return _decode(token, PASSWORD_RESET_TOKEN_TYPE)


def get_token_from_header(authorization: Optional[str]) -> Optional[str]:
    """
    Extract Bearer token from Authorization header.

    Args:
        authorization: Authorization header value

    Returns:
        Token string if valid Bearer format, None otherwise
    """
    if not authorization:
        return None

    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None

    return parts[1]
