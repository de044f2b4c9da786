import logging
from datetime import datetime
from typing import Literal

from fastapi import APIRouter, Depends
from pydantic import Field, HttpUrl, TypeAdapter, ValidationError, field_validator
from sqlalchemy.orm import Session

from signnova.auth.dependencies import AuthContext, get_current_user
from signnova.core.errors import NotFoundError
from signnova.database import get_db
from signnova.models.user import User
from signnova.schemas import ApiModel, RequestModel, SignLanguage

router = APIRouter(tags=['users'])

logger = logging.getLogger(__name__)


class UserProfileResponse(ApiModel):
    id: str
    email: str
    name: str
    avatar: str | None = None
    preferences: dict = {}
    created_at: datetime
    updated_at: datetime


_http_url = TypeAdapter(HttpUrl)


class UpdateProfileRequest(RequestModel):
    name: str | None = Field(default=None, min_length=2)
    avatar: str | None = None

    @field_validator('name', mode='before')
    @classmethod
    def strip_name(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator('avatar')
    @classmethod
    def validate_avatar(cls, value: str | None) -> str | None:
        # Stored as sent; HttpUrl would normalize it.
        if value is not None:
            try:
                _http_url.validate_python(value)
            except ValidationError as exc:
                raise ValueError('Avatar must be a valid URL') from exc
        return value


class Preferences(RequestModel):
    language: SignLanguage | None = None
    avatar_speed: float | None = Field(default=None, ge=0.5, le=2.0)
    theme: Literal['light', 'dark'] | None = None


class UpdatePreferencesRequest(RequestModel):
    preferences: Preferences = Field(default_factory=Preferences)


def load_user(db: Session, user_id: str) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError('User not found')
    return user


@router.get('/me', response_model=UserProfileResponse)
def get_me(
    current_user: AuthContext = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return load_user(db, current_user.id)


@router.patch('/me', response_model=UserProfileResponse)
def update_profile(
    data: UpdateProfileRequest,
    current_user: AuthContext = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    user = load_user(db, current_user.id)
    if data.name is not None:
        user.name = data.name
    if data.avatar is not None:
        user.avatar = data.avatar
    db.commit()
    db.refresh(user)

    logger.info('User profile updated: %s', user.id)
    return user


@router.patch('/preferences', response_model=UserProfileResponse)
def update_preferences(
    data: UpdatePreferencesRequest,
    current_user: AuthContext = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    user = load_user(db, current_user.id)
    user.preferences = data.preferences.model_dump(by_alias=True, exclude_none=True)
    db.commit()
    db.refresh(user)

    logger.info('User preferences updated: %s', user.id)
    return user
