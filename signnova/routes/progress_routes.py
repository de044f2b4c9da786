from datetime import datetime

from fastapi import APIRouter, Depends
from pydantic import Field
from sqlalchemy.orm import Session

from signnova.auth.dependencies import AuthContext, get_current_user
from signnova.database import get_db
from signnova.schemas import ApiModel, RequestModel
from signnova.services import progress as progress_service

router = APIRouter(tags=['progress'])


class ProgressResponse(ApiModel):
    id: str
    user_id: str
    signs_learned: int
    practice_time: int
    streak: int
    last_active: datetime
    achievements: list = []
    created_at: datetime
    updated_at: datetime


class UpdateProgressRequest(RequestModel):
    signs_learned: int | None = Field(default=None, ge=0)
    practice_time: int | None = Field(default=None, ge=0)
    streak: int | None = Field(default=None, ge=0)


class AchievementsResponse(ApiModel):
    achievements: list


@router.get('', response_model=ProgressResponse)
def get_progress(
    current_user: AuthContext = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return progress_service.get_or_create_progress(db, current_user.id)


@router.post('/update', response_model=ProgressResponse)
def update_progress(
    data: UpdateProgressRequest,
    current_user: AuthContext = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return progress_service.update_progress(
        db,
        current_user.id,
        signs_learned=data.signs_learned,
        practice_time=data.practice_time,
        streak=data.streak,
    )


@router.post('/streak', response_model=ProgressResponse)
def update_streak(
    current_user: AuthContext = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return progress_service.bump_streak(db, current_user.id)


@router.get('/achievements', response_model=AchievementsResponse)
def get_achievements(
    current_user: AuthContext = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return AchievementsResponse(achievements=progress_service.list_achievements(db, current_user.id))
