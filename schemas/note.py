from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, field_serializer, field_validator


def normalize_symbol(value: str) -> str:
    symbol = (value or "").strip().upper()
    if not symbol or len(symbol) > 64:
        raise ValueError("symbol must be 1-64 characters")
    return symbol


def normalize_market(value: str | None) -> str:
    market = (value or "").strip().upper()
    if len(market) > 32:
        raise ValueError("market must be at most 32 characters")
    return market


class NoteCreate(BaseModel):
    symbol: str
    market: str = ""
    person: str
    opinion: str

    @field_validator("symbol")
    @classmethod
    def validate_symbol(cls, value: str) -> str:
        return normalize_symbol(value)

    @field_validator("market", mode="before")
    @classmethod
    def validate_market(cls, value: Any) -> Any:
        # null means "no market"; other non-strings are left for the str check to reject
        if value is None or isinstance(value, str):
            return normalize_market(value)
        return value

    @field_validator("person")
    @classmethod
    def validate_person(cls, value: str) -> str:
        person = (value or "").strip()
        if not person or len(person) > 200:
            raise ValueError("person must be 1-200 characters")
        return person

    @field_validator("opinion")
    @classmethod
    def validate_opinion(cls, value: str) -> str:
        opinion = (value or "").strip()
        if not opinion:
            raise ValueError("opinion must not be empty")
        return opinion


class NoteOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    symbol: str
    market: str
    person: str
    opinion: str
    timestamp: datetime

    @field_serializer("timestamp")
    def serialize_timestamp(self, value: datetime) -> str:
        # SQLite hands back naive datetimes; stored values are always UTC
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc).isoformat()
