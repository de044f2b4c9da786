"""Load sign dictionary entries from a JSON file into the database.

Usage:
    python -m signnova.seed_signs signs.json

The file holds a list of objects with the keys word, language, category,
difficulty, videoUrl, thumbnail and optionally description and relatedSigns.
Entries whose (word, language) already exists are skipped.
"""
import argparse
import json
import sys

from pydantic import ValidationError
from sqlalchemy.orm import Session

from signnova.core.config import load_settings
from signnova.database import build_engine, build_session_factory, init_database
from signnova.models.sign import Sign
from signnova.schemas import Difficulty, RequestModel, SignLanguage


class SignEntry(RequestModel):
    word: str
    language: SignLanguage
    category: str
    difficulty: Difficulty
    video_url: str
    thumbnail: str
    description: str | None = None
    related_signs: list[str] = []


def parse_entries(raw_entries: list) -> list[SignEntry]:
    return [SignEntry.model_validate(entry) for entry in raw_entries]


def seed_signs(db: Session, entries: list[SignEntry]) -> int:
    created = 0
    for entry in entries:
        exists = db.query(Sign.id).filter(Sign.word == entry.word, Sign.language == entry.language).first()
        if exists:
            continue
        db.add(Sign(**entry.model_dump()))
        created += 1
    db.commit()
    return created


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("path", help="JSON file with a list of sign entries")
    args = parser.parse_args(argv)

    with open(args.path, encoding="utf-8") as handle:
        raw_entries = json.load(handle)

    try:
        entries = parse_entries(raw_entries)
    except ValidationError as exc:
        print(f"Invalid sign entries: {exc}", file=sys.stderr)
        sys.exit(1)

    settings = load_settings()
    engine = build_engine(settings.database_url)
    init_database(engine)
    db = build_session_factory(engine)()
    try:
        created = seed_signs(db, entries)
    finally:
        db.close()
        engine.dispose()
    print(f"Inserted {created} of {len(entries)} signs.")


if __name__ == "__main__":
    main()
