from datetime import datetime

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from signnova.auth.dependencies import AuthContext, get_current_user, get_optional_user
from signnova.database import get_db
from signnova.schemas import (
    ApiModel,
    Difficulty,
    MessageResponse,
    PaginationResponse,
    RequestModel,
    SignLanguage,
    SignResponse,
)
from signnova.services import signs as sign_service
from signnova.services.pagination import DEFAULT_PAGE_LIMIT, MAX_PAGE_LIMIT

router = APIRouter(tags=['signs'])


class SignListResponse(ApiModel):
    success: bool = True
    data: list[SignResponse]
    pagination: PaginationResponse


class SignSearchResponse(ApiModel):
    success: bool = True
    data: list[SignResponse]


class SignDetail(SignResponse):
    is_favorite: bool | None = None


class SignDetailResponse(ApiModel):
    success: bool = True
    data: SignDetail


class AddFavoriteRequest(RequestModel):
    sign_id: str | None = None


class FavoriteResponse(ApiModel):
    id: str
    user_id: str
    sign_id: str
    created_at: datetime


class FavoriteEnvelope(ApiModel):
    success: bool = True
    message: str
    data: FavoriteResponse


@router.get('', response_model=SignListResponse)
def list_signs(
    language: SignLanguage | None = Query(default=None),
    category: str | None = Query(default=None),
    difficulty: Difficulty | None = Query(default=None),
    search: str | None = Query(default=None),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=DEFAULT_PAGE_LIMIT, ge=1, le=MAX_PAGE_LIMIT),
    db: Session = Depends(get_db),
):
    result = sign_service.list_signs(
        db,
        language=language,
        category=category,
        difficulty=difficulty,
        search=search,
        page=page,
        limit=limit,
    )
    return SignListResponse(
        data=[SignResponse.model_validate(sign) for sign in result.items],
        pagination=PaginationResponse.from_page(result),
    )


@router.get('/search', response_model=SignSearchResponse)
def search_signs(q: str | None = Query(default=None), db: Session = Depends(get_db)):
    signs = sign_service.search_signs(db, q)
    return SignSearchResponse(data=[SignResponse.model_validate(sign) for sign in signs])


@router.get('/favorites/all', response_model=SignSearchResponse)
def list_favorites(
    current_user: AuthContext = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    signs = sign_service.list_favorite_signs(db, current_user.id)
    return SignSearchResponse(data=[SignResponse.model_validate(sign) for sign in signs])


@router.post('/favorites', response_model=FavoriteEnvelope, status_code=status.HTTP_201_CREATED)
def add_favorite(
    data: AddFavoriteRequest,
    current_user: AuthContext = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    favorite = sign_service.add_favorite(db, current_user.id, data.sign_id)
    return FavoriteEnvelope(message='Added to favorites', data=FavoriteResponse.model_validate(favorite))


@router.delete('/favorites/{sign_id}', response_model=MessageResponse)
def remove_favorite(
    sign_id: str,
    current_user: AuthContext = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    sign_service.remove_favorite(db, current_user.id, sign_id)
    return MessageResponse(message='Removed from favorites')


@router.get('/{sign_id}', response_model=SignDetailResponse)
def get_sign(
    sign_id: str,
    current_user: AuthContext | None = Depends(get_optional_user),
    db: Session = Depends(get_db),
):
    sign = sign_service.get_sign(db, sign_id)
    detail = SignDetail.model_validate(sign)
    if current_user is not None:
        detail.is_favorite = sign_service.is_favorite(db, current_user.id, sign.id)
    return SignDetailResponse(data=detail)
