from dataclasses import dataclass
from typing import Mapping

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from signnova.auth import sessions
from signnova.core.config import Settings
from signnova.core.errors import UnauthorizedError
from signnova.database import get_db
from signnova.dependencies import get_settings

security = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class AuthContext:
    """The identity a request was authenticated as."""

    id: str
    email: str
    name: str
    avatar: str | None
    session_id: str
    token: str


def extract_bearer_token(headers: Mapping[str, str]) -> str | None:
    authorization = headers.get("authorization") or ""
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def resolve_auth_context(db: Session, settings: Settings, token: str | None) -> AuthContext | None:
    if not token:
        return None
    resolved = sessions.resolve_token(db, settings, token)
    if resolved is None:
        return None
    auth_session, user = resolved
    return AuthContext(
        id=user.id,
        email=user.email,
        name=user.name,
        avatar=user.avatar,
        session_id=auth_session.id,
        token=token,
    )


def get_optional_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> AuthContext | None:
    token = credentials.credentials if credentials else None
    return resolve_auth_context(db, settings, token)


def get_current_user(current_user: AuthContext | None = Depends(get_optional_user)) -> AuthContext:
    if current_user is None:
        raise UnauthorizedError("Unauthorized")
    return current_user
