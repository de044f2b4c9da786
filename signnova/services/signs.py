"""Sign dictionary queries and per-user favorites."""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from signnova.core.errors import BadRequestError, NotFoundError
from signnova.models.favorite import Favorite
from signnova.models.sign import Sign
from signnova.services.pagination import Page, paginate

logger = logging.getLogger(__name__)

SEARCH_RESULT_LIMIT = 20


def _escape_like(term: str) -> str:
    return term.replace('\\', '\\\\').replace('%', '\\%').replace('_', '\\_')


def word_contains(term: str):
    """Case-insensitive substring match on `Sign.word`."""
    return Sign.word.ilike(f'%{_escape_like(term)}%', escape='\\')


def list_signs(
    db: Session,
    *,
    language: str | None = None,
    category: str | None = None,
    difficulty: str | None = None,
    search: str | None = None,
    page: int = 1,
    limit: int = 20,
) -> Page[Sign]:
    query = db.query(Sign)
    if language:
        query = query.filter(Sign.language == language)
    if category:
        query = query.filter(Sign.category == category)
    if difficulty:
        query = query.filter(Sign.difficulty == difficulty)
    if search:
        query = query.filter(word_contains(search))

    return paginate(query.order_by(Sign.created_at.desc()), page, limit)


def get_sign(db: Session, sign_id: str) -> Sign:
    sign = db.get(Sign, sign_id)
    if sign is None:
        raise NotFoundError('Sign not found')
    return sign


def search_signs(db: Session, q: str | None) -> list[Sign]:
    term = (q or '').strip()
    if not term:
        raise BadRequestError('Search query is required')

    return (
        db.query(Sign)
        .filter(word_contains(term))
        .order_by(Sign.created_at.desc())
        .limit(SEARCH_RESULT_LIMIT)
        .all()
    )


def _find_favorite(db: Session, user_id: str, sign_id: str) -> Favorite | None:
    return (
        db.query(Favorite)
        .filter(Favorite.user_id == user_id, Favorite.sign_id == sign_id)
        .first()
    )


def is_favorite(db: Session, user_id: str, sign_id: str) -> bool:
    return _find_favorite(db, user_id, sign_id) is not None


def add_favorite(db: Session, user_id: str, sign_id: str | None) -> Favorite:
    """Bookmark a sign. Adding an existing favorite returns the stored record."""
    if not sign_id:
        raise BadRequestError('Sign ID is required')
    get_sign(db, sign_id)

    favorite = _find_favorite(db, user_id, sign_id)
    if favorite is not None:
        return favorite

    favorite = Favorite(user_id=user_id, sign_id=sign_id)
    db.add(favorite)
    try:
        db.commit()
    except IntegrityError:
        # A concurrent request inserted the same pair first.
        db.rollback()
        favorite = _find_favorite(db, user_id, sign_id)
        if favorite is None:
            raise
        return favorite

    db.refresh(favorite)
    logger.info('Sign added to favorites: %s by user %s', sign_id, user_id)
    return favorite


def remove_favorite(db: Session, user_id: str, sign_id: str) -> None:
    favorite = _find_favorite(db, user_id, sign_id)
    if favorite is None:
        raise NotFoundError('Favorite not found')

    db.delete(favorite)
    db.commit()
    logger.info('Sign removed from favorites: %s by user %s', sign_id, user_id)


def list_favorite_signs(db: Session, user_id: str) -> list[Sign]:
    favorites = (
        db.query(Favorite)
        .filter(Favorite.user_id == user_id)
        .order_by(Favorite.created_at.desc())
        .all()
    )
    return [favorite.sign for favorite in favorites]
