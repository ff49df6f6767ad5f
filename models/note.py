"""Expert opinion notes attached to an analyzed asset."""
from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from database import Base


def _new_note_id() -> str:
    return uuid.uuid4().hex


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ExpertNote(Base):
    __tablename__ = "expert_notes"
    __table_args__ = (
        Index("ix_expert_notes_symbol_market", "symbol", "market"),
    )

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=_new_note_id)
    symbol: Mapped[str] = mapped_column(String(64), nullable=False)
    # empty string when the note is not tied to a market
    market: Mapped[str] = mapped_column(String(32), nullable=False, default="", server_default="")
    person: Mapped[str] = mapped_column(String(200), nullable=False)
    opinion: Mapped[str] = mapped_column(Text, nullable=False)
    timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=_utcnow)
