import logging
from datetime import datetime

from fastapi import APIRouter, Depends, Response, status
from fastapi.responses import JSONResponse
from pydantic import EmailStr, Field, field_validator
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from signnova.auth import passwords, sessions
from signnova.auth.dependencies import AuthContext, get_current_user, get_optional_user
from signnova.core.config import Settings
from signnova.core.errors import ConflictError, UnauthorizedError
from signnova.database import get_db, utcnow
from signnova.dependencies import get_settings
from signnova.models.auth_session import AuthSession
from signnova.models.user import User
from signnova.schemas import ApiModel, RequestModel
from signnova.services import progress as progress_service

router = APIRouter(tags=['auth'])

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = 'Invalid email or password'
AUTH_TOKEN_HEADER = 'set-auth-token'


class SignupRequest(RequestModel):
    email: EmailStr
    password: str = Field(min_length=8)
    name: str = Field(min_length=2)

    @field_validator('name', mode='before')
    @classmethod
    def strip_name(cls, value):
        return value.strip() if isinstance(value, str) else value


class LoginRequest(RequestModel):
    email: EmailStr
    password: str = Field(min_length=1)


class AuthUserResponse(ApiModel):
    id: str
    email: str
    name: str
    avatar: str | None = None
    learning_streak: int = 0
    signs_learned: int = 0
    practice_time: int = 0
    level: str = 'beginner'
    joined_date: datetime


class SessionInfoResponse(ApiModel):
    id: str
    expires_at: datetime


class AuthData(ApiModel):
    user: AuthUserResponse
    token: str
    refresh_token: str
    session: SessionInfoResponse | None = None


class AuthResponse(ApiModel):
    success: bool = True
    message: str
    data: AuthData


class SessionData(ApiModel):
    user: AuthUserResponse
    session: SessionInfoResponse


class SessionResponse(ApiModel):
    success: bool = True
    data: SessionData


class RefreshData(ApiModel):
    token: str
    refresh_token: str
    session: SessionInfoResponse


class RefreshResponse(ApiModel):
    success: bool = True
    message: str
    data: RefreshData


def normalize_email(email: str) -> str:
    return email.strip().lower()


def build_auth_user(db: Session, user: User) -> AuthUserResponse:
    progress = progress_service.get_progress(db, user.id)
    return AuthUserResponse(
        id=user.id,
        email=user.email,
        name=user.name,
        avatar=user.avatar,
        learning_streak=progress.streak if progress else 0,
        signs_learned=progress.signs_learned if progress else 0,
        practice_time=progress.practice_time if progress else 0,
        joined_date=user.created_at,
    )


def build_session_info(auth_session: AuthSession) -> SessionInfoResponse:
    return SessionInfoResponse(id=auth_session.id, expires_at=auth_session.expires_at)


@router.post('/signup', response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def signup(
    data: SignupRequest,
    response: Response,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    email = normalize_email(data.email)
    if db.query(User).filter(User.email == email).first() is not None:
        raise ConflictError('User with this email already exists')

    user = User(
        email=email,
        name=data.name,
        hashed_password=passwords.hash_password(data.password),
        preferences={},
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise ConflictError('User with this email already exists') from exc
    db.refresh(user)

    auth_session, token = sessions.create_session(db, settings, user)
    response.headers[AUTH_TOKEN_HEADER] = token
    logger.info('New user signed up: %s', email)

    return AuthResponse(
        message='User created successfully',
        data=AuthData(
            user=build_auth_user(db, user),
            token=token,
            refresh_token=token,
            session=build_session_info(auth_session),
        ),
    )


@router.post('/login', response_model=AuthResponse)
def login(
    data: LoginRequest,
    response: Response,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    email = normalize_email(data.email)
    user = db.query(User).filter(User.email == email).first()
    # Unknown email and wrong password fail the same way.
    if user is None or not passwords.verify_password(data.password, user.hashed_password):
        raise UnauthorizedError(INVALID_CREDENTIALS)

    auth_session, token = sessions.create_session(db, settings, user)
    response.headers[AUTH_TOKEN_HEADER] = token
    logger.info('User logged in: %s', email)

    return AuthResponse(
        message='Login successful',
        data=AuthData(
            user=build_auth_user(db, user),
            token=token,
            refresh_token=token,
            session=build_session_info(auth_session),
        ),
    )


@router.post('/logout')
def logout(
    current_user: AuthContext = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    sessions.revoke_session(db, current_user.session_id)
    logger.info('User logged out: %s', current_user.email)
    return {'message': 'Logged out successfully'}


@router.get('/session', response_model=SessionResponse)
def get_session(
    current_user: AuthContext | None = Depends(get_optional_user),
    db: Session = Depends(get_db),
):
    if current_user is None:
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content={'success': False, 'error': 'No active session'},
        )

    user = db.get(User, current_user.id)
    auth_session = db.get(AuthSession, current_user.session_id)
    return SessionResponse(
        data=SessionData(user=build_auth_user(db, user), session=build_session_info(auth_session)),
    )


@router.post('/refresh', response_model=RefreshResponse)
def refresh(
    current_user: AuthContext = Depends(get_current_user),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    auth_session = db.get(AuthSession, current_user.session_id)
    if auth_session is None or auth_session.expires_at <= utcnow():
        raise UnauthorizedError('No active session to refresh')

    auth_session, token = sessions.refresh_session(db, settings, auth_session)
    return RefreshResponse(
        message='Session refreshed successfully',
        data=RefreshData(token=token, refresh_token=token, session=build_session_info(auth_session)),
    )
