"""Text-to-sign matching and the translation history log."""

import logging
import re
from dataclasses import dataclass

from sqlalchemy import func
from sqlalchemy.orm import Session

from signnova.models.sign import Sign
from signnova.models.translation import Translation
from signnova.services.pagination import Page, paginate

logger = logging.getLogger(__name__)

DEFAULT_LANGUAGE = 'ASL'
SPEECH_LANGUAGE = 'ASL'

_NON_WORD = re.compile(r'\W')


@dataclass
class SignSequence:
    text: str
    signs: list[Sign]


def tokenize(text: str) -> list[str]:
    """Lowercase, split on whitespace, strip non-word characters, drop empties."""
    words = (_NON_WORD.sub('', token) for token in text.lower().split())
    return [word for word in words if word]


def text_to_sign(db: Session, text: str, language: str = DEFAULT_LANGUAGE) -> SignSequence:
    """Map each word of `text` to a sign, in order.

    Words without a sign in `language` are dropped; repeated words repeat
    their sign.
    """
    words = tokenize(text)
    if not words:
        return SignSequence(text=text, signs=[])

    candidates = (
        db.query(Sign)
        .filter(Sign.language == language, func.lower(Sign.word).in_(set(words)))
        .all()
    )
    by_word = {sign.word.lower(): sign for sign in candidates}

    return SignSequence(
        text=text,
        signs=[by_word[word] for word in words if word in by_word],
    )


def record_translation(db: Session, user_id: str, input_text: str, input_type: str, language: str) -> Translation:
    translation = Translation(
        user_id=user_id,
        input_text=input_text,
        input_type=input_type,
        language=language,
    )
    db.add(translation)
    db.commit()
    db.refresh(translation)
    return translation


def get_history(db: Session, user_id: str, page: int, limit: int) -> Page[Translation]:
    query = (
        db.query(Translation)
        .filter(Translation.user_id == user_id)
        .order_by(Translation.created_at.desc())
    )
    return paginate(query, page, limit)
