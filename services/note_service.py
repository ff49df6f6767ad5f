from __future__ import annotations

import logging
from typing import List

from sqlalchemy.orm import Session

from models.note import ExpertNote
from schemas.note import normalize_market, normalize_symbol

logger = logging.getLogger(__name__)


def list_notes(db: Session, symbol: str, market: str | None = None) -> List[ExpertNote]:
    return (
        db.query(ExpertNote)
        .filter(
            ExpertNote.symbol == normalize_symbol(symbol),
            ExpertNote.market == normalize_market(market),
        )
        .order_by(ExpertNote.timestamp.asc(), ExpertNote.id.asc())
        .all()
    )


def get_note(db: Session, note_id: str) -> ExpertNote | None:
    return db.query(ExpertNote).filter(ExpertNote.id == note_id).first()


def create_note(
    db: Session,
    *,
    symbol: str,
    market: str,
    person: str,
    opinion: str,
) -> ExpertNote:
    note = ExpertNote(
        symbol=normalize_symbol(symbol),
        market=normalize_market(market),
        person=person.strip(),
        opinion=opinion.strip(),
    )
    db.add(note)
    db.commit()
    db.refresh(note)
    logger.info("notes.create id=%s symbol=%s market=%s", note.id, note.symbol, note.market or "-")
    return note


def delete_note(db: Session, note_id: str) -> None:
    note = get_note(db, note_id)
    if not note:
        raise ValueError("Note not found")

    db.delete(note)
    db.commit()
    logger.info("notes.delete id=%s", note_id)
