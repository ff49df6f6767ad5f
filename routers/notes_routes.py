from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.orm import Session

from database import get_db
from schemas.note import NoteCreate, NoteOut
from services.note_service import create_note, delete_note, list_notes

router = APIRouter()


@router.get("", response_model=List[NoteOut])
def get_notes(
    symbol: str = Query(..., min_length=1, max_length=64),
    market: Optional[str] = Query(default=None, max_length=32),
    db: Session = Depends(get_db),
):
    try:
        return list_notes(db, symbol, market)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


@router.post("", response_model=NoteOut, status_code=status.HTTP_201_CREATED)
def add_note(
    payload: NoteCreate,
    db: Session = Depends(get_db),
):
    return create_note(
        db,
        symbol=payload.symbol,
        market=payload.market,
        person=payload.person,
        opinion=payload.opinion,
    )


@router.delete("/{note_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_note(
    note_id: str,
    db: Session = Depends(get_db),
):
    try:
        delete_note(db, note_id)
    except ValueError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
