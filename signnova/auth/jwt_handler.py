from datetime import datetime, timezone

import jwt

from signnova.core.config import Settings


def create_access_token(settings: Settings, *, user_id: str, session_id: str, expires_at: datetime) -> str:
    if expires_at.tzinfo is None:
        expires_at = expires_at.replace(tzinfo=timezone.utc)
    payload = {
        "sub": user_id,
        "sid": session_id,
        "iss": settings.auth_base_url,
        "exp": expires_at,
        "iat": datetime.now(timezone.utc),
    }
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_access_token(settings: Settings, token: str) -> dict:
    return jwt.decode(
        token,
        settings.jwt_secret_key,
        algorithms=[settings.jwt_algorithm],
        issuer=settings.auth_base_url,
        options={"require": ["sub", "sid", "exp"]},
    )
