"""Session issuance and resolution for bearer-token auth."""

import logging
from datetime import timedelta

import jwt
from sqlalchemy.orm import Session

from signnova.auth import jwt_handler
from signnova.core.config import Settings
from signnova.database import utcnow
from signnova.models.auth_session import AuthSession
from signnova.models.user import User

logger = logging.getLogger(__name__)


def create_session(db: Session, settings: Settings, user: User) -> tuple[AuthSession, str]:
    auth_session = AuthSession(
        user_id=user.id,
        expires_at=utcnow() + timedelta(seconds=settings.session_expires_seconds),
    )
    db.add(auth_session)
    db.commit()
    db.refresh(auth_session)

    token = jwt_handler.create_access_token(
        settings,
        user_id=user.id,
        session_id=auth_session.id,
        expires_at=auth_session.expires_at,
    )
    return auth_session, token


def resolve_token(db: Session, settings: Settings, token: str) -> tuple[AuthSession, User] | None:
    """Return the live session and its user for `token`, or None."""
    try:
        payload = jwt_handler.decode_access_token(settings, token)
    except jwt.PyJWTError:
        return None

    auth_session = db.get(AuthSession, payload["sid"])
    if auth_session is None or auth_session.user_id != payload["sub"]:
        return None
    if auth_session.expires_at <= utcnow():
        return None

    user = db.get(User, auth_session.user_id)
    if user is None:
        return None
    return auth_session, user


def refresh_session(db: Session, settings: Settings, auth_session: AuthSession) -> tuple[AuthSession, str]:
    """Extend the session once it is older than the update age, and reissue a token."""
    now = utcnow()
    last_touched = auth_session.updated_at or auth_session.created_at
    if now - last_touched >= timedelta(seconds=settings.session_update_age_seconds):
        auth_session.expires_at = now + timedelta(seconds=settings.session_expires_seconds)
        auth_session.updated_at = now
        db.commit()
        db.refresh(auth_session)
        logger.info('Session %s extended until %s', auth_session.id, auth_session.expires_at)

    token = jwt_handler.create_access_token(
        settings,
        user_id=auth_session.user_id,
        session_id=auth_session.id,
        expires_at=auth_session.expires_at,
    )
    return auth_session, token


def revoke_session(db: Session, session_id: str) -> None:
    auth_session = db.get(AuthSession, session_id)
    if auth_session is not None:
        db.delete(auth_session)
        db.commit()
