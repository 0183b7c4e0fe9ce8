from __future__ import annotations

import hashlib
import hmac
import os
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt

JWT_SECRET = os.getenv("JWT_SECRET", "dev-secret-change-me")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRES_MIN = int(os.getenv("ACCESS_TOKEN_EXPIRES_MIN", "60"))
REFRESH_TOKEN_EXPIRES_MIN = int(os.getenv("REFRESH_TOKEN_EXPIRES_MIN", str(60 * 24 * 30)))
PASSWORD_SALT = os.getenv("PASSWORD_SALT", "memberhub-dev-salt")

TOKEN_TYPE_ACCESS = "access"
TOKEN_TYPE_REFRESH = "refresh"


class TokenError(Exception):
    pass


def hash_password(raw_password: str) -> str:
    return hashlib.sha256(f"{PASSWORD_SALT}:{raw_password}".encode()).hexdigest()


def verify_password(raw_password: str, password_hash: str) -> bool:
    return hmac.compare_digest(hash_password(raw_password), password_hash)


def _encode(
    *,
    user_id: str,
    email: str,
    token_type: str,
    expires_minutes: int,
) -> str:
    now = datetime.now(UTC)
    payload: dict[str, Any] = {
        "sub": user_id,
        "email": email,
        "typ": token_type,
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(minutes=expires_minutes)).timestamp()),
    }
    return jwt.encode(payload, JWT_SECRET, algorithm=JWT_ALGORITHM)


def create_access_token(*, user_id: str, email: str, expires_minutes: int | None = None) -> str:
    return _encode(
        user_id=user_id,
        email=email,
        token_type=TOKEN_TYPE_ACCESS,
        expires_minutes=expires_minutes if expires_minutes is not None else ACCESS_TOKEN_EXPIRES_MIN,
    )


def create_refresh_token(*, user_id: str, email: str, expires_minutes: int | None = None) -> str:
    return _encode(
        user_id=user_id,
        email=email,
        token_type=TOKEN_TYPE_REFRESH,
        expires_minutes=expires_minutes if expires_minutes is not None else REFRESH_TOKEN_EXPIRES_MIN,
    )


def decode_token(token: str, expected_type: str = TOKEN_TYPE_ACCESS) -> dict[str, Any]:
    try:
        decoded = jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGORITHM])
    except jwt.PyJWTError as exc:
        raise TokenError(str(exc)) from exc
    if not isinstance(decoded, dict):
        raise TokenError("invalid token payload")
    if decoded.get("typ") != expected_type:
        raise TokenError(f"expected {expected_type} token")
    if not isinstance(decoded.get("sub"), str):
        raise TokenError("invalid token subject")
    return decoded


def seconds_until_expiry(token: str) -> float | None:
    """Remaining lifetime of a token without verifying it; None when unreadable."""
    try:
        claims = jwt.decode(token, options={"verify_signature": False, "verify_exp": False})
    except jwt.PyJWTError:
        return None
    exp = claims.get("exp")
    if not isinstance(exp, (int, float)):
        return None
    return exp - datetime.now(UTC).timestamp()
