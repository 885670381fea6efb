# studyplan/routers/flashcards.py
from fastapi import APIRouter, Depends, HTTPException, Query, Response
from typing import List
from datetime import datetime
from sqlalchemy.orm import Session
from sqlalchemy import select

from studyplan.models.db import get_db
from studyplan.models.entities import Flashcard
from studyplan.models.schemas import FlashcardIn, FlashcardUpdate, FlashcardOut
from studyplan.routers.deps import get_current_user_id
from studyplan.utils.seed import new_flashcard

router = APIRouter(prefix="/api/flashcards", tags=["flashcards"])


def _get_card(db: Session, card_id: int, user_id: int) -> Flashcard:
    card = db.get(Flashcard, card_id)
    if not card or card.user_id != user_id:
        raise HTTPException(status_code=404, detail="Flashcard not found")
    return card


@router.get("", response_model=List[FlashcardOut])
def list_flashcards(
    tag: str | None = Query(None),
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    stmt = select(Flashcard).where(Flashcard.user_id == user_id)
    if tag:
        stmt = stmt.where(Flashcard.tag == tag)
    return db.scalars(stmt.order_by(Flashcard.id)).all()


# declared before /{card_id} so "due" is not read as an id
@router.get("/due", response_model=List[FlashcardOut])
def due_flashcards(user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)):
    return db.scalars(
        select(Flashcard)
        .where(
            Flashcard.user_id == user_id,
            Flashcard.next_review.is_not(None),
            Flashcard.next_review <= datetime.now(),
        )
        .order_by(Flashcard.next_review)
    ).all()


@router.get("/{card_id}", response_model=FlashcardOut)
def get_flashcard(
    card_id: int,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return _get_card(db, card_id, user_id)


@router.post("", response_model=FlashcardOut, status_code=201)
def create_flashcard(
    payload: FlashcardIn,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    card = new_flashcard(user_id, payload.front, payload.back, payload.tag)
    db.add(card); db.commit(); db.refresh(card)
    return card


@router.put("/{card_id}", response_model=FlashcardOut)
def update_flashcard(
    card_id: int,
    payload: FlashcardUpdate,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    card = _get_card(db, card_id, user_id)
    changes = payload.model_dump(exclude_unset=True)
    if "difficulty" in changes and changes["difficulty"] not in (0, 1, 2):
        raise HTTPException(status_code=400, detail="invalid difficulty")
    for k, v in changes.items():
        setattr(card, k, v)
    if changes:
        db.add(card); db.commit(); db.refresh(card)
    return card


@router.delete("/{card_id}", status_code=204)
def delete_flashcard(
    card_id: int,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    card = _get_card(db, card_id, user_id)
    db.delete(card)
    db.commit()
    return Response(status_code=204)
