"""Per-user learning counters and the daily streak."""

import logging
from datetime import datetime, timedelta

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from signnova.database import utcnow
from signnova.models.progress import Progress

logger = logging.getLogger(__name__)

ONE_DAY = timedelta(days=1)


def days_between(last_active: datetime, now: datetime) -> int:
    """Whole days elapsed, floored; negative when `last_active` is in the future."""
    return (now - last_active) // ONE_DAY


def next_streak(current_streak: int, last_active: datetime, now: datetime) -> int:
    days_since = days_between(last_active, now)
    if days_since <= 0:
        # Under a full day, or a last_active ahead of the clock: leave the streak alone.
        return current_streak
    if days_since == 1:
        return current_streak + 1
    return 1


def get_progress(db: Session, user_id: str) -> Progress | None:
    return db.query(Progress).filter(Progress.user_id == user_id).first()


def _insert_progress(db: Session, progress: Progress) -> Progress:
    db.add(progress)
    try:
        db.commit()
    except IntegrityError:
        # Another request created the row first; use that one.
        db.rollback()
        existing = get_progress(db, progress.user_id)
        if existing is None:
            raise
        return existing
    db.refresh(progress)
    return progress


def get_or_create_progress(db: Session, user_id: str) -> Progress:
    progress = get_progress(db, user_id)
    if progress is not None:
        return progress
    return _insert_progress(
        db,
        Progress(user_id=user_id, signs_learned=0, practice_time=0, streak=0, achievements=[]),
    )


def update_progress(
    db: Session,
    user_id: str,
    *,
    signs_learned: int | None = None,
    practice_time: int | None = None,
    streak: int | None = None,
) -> Progress:
    now = utcnow()
    progress = get_progress(db, user_id)
    if progress is None:
        created = Progress(
            user_id=user_id,
            signs_learned=signs_learned or 0,
            practice_time=practice_time or 0,
            streak=streak or 0,
            last_active=now,
            achievements=[],
        )
        progress = _insert_progress(db, created)
        if progress is created:
            logger.info('Progress created for user %s', user_id)
            return progress

    if signs_learned is not None:
        progress.signs_learned = signs_learned
    if practice_time is not None:
        progress.practice_time = practice_time
    if streak is not None:
        progress.streak = streak
    progress.last_active = now
    db.commit()
    db.refresh(progress)

    logger.info('Progress updated for user %s', user_id)
    return progress


def bump_streak(db: Session, user_id: str) -> Progress:
    """Count today's activity towards the streak.

    A user with no progress row yet starts a streak of 1.
    """
    now = utcnow()
    progress = get_progress(db, user_id)
    if progress is None:
        created = Progress(user_id=user_id, streak=1, last_active=now, achievements=[])
        progress = _insert_progress(db, created)
        if progress is created:
            logger.info('Streak started for user %s', user_id)
            return progress

    progress.streak = next_streak(progress.streak, progress.last_active, now)
    progress.last_active = now
    db.commit()
    db.refresh(progress)

    logger.info('Streak updated for user %s: %s', user_id, progress.streak)
    return progress


def list_achievements(db: Session, user_id: str) -> list:
    # Reading achievements never creates a progress row.
    progress = get_progress(db, user_id)
    if progress is None:
        return []
    return list(progress.achievements or [])
