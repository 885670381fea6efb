# studyplan/utils/seed.py
from __future__ import annotations

import logging
from datetime import datetime, timedelta

from sqlalchemy.orm import Session
from sqlalchemy import select, func

from studyplan.core.config import settings
from studyplan.models.entities import User, Flashcard, Goal

log = logging.getLogger(__name__)

_DEMO_FLASHCARDS = [
    {
        "front": "What is the Krebs cycle?",
        "back": (
            "The Krebs cycle (or citric acid cycle) is a series of chemical reactions used by all "
            "aerobic organisms to release stored energy through the oxidation of acetyl-CoA derived "
            "from carbohydrates, fats, and proteins."
        ),
        "tag": "Biology",
    },
    {
        "front": "What is the law of conservation of energy?",
        "back": (
            "The law of conservation of energy states that energy can neither be created nor "
            "destroyed - only converted from one form of energy to another."
        ),
        "tag": "Physics",
    },
    {
        "front": "What is the quadratic formula?",
        "back": "For ax² + bx + c = 0, the solutions are x = (-b ± √(b² - 4ac)) / 2a",
        "tag": "Mathematics",
    },
]

_DEMO_GOALS = [
    {"text": "Complete calculus problem set", "completed": True},
    {"text": "Review physics chapter 7", "completed": False},
    {"text": "Create flashcards for bio terms", "completed": False},
]


def ensure_demo_user(db: Session) -> User:
    user = db.scalar(select(User).where(User.username == settings.DEMO_USERNAME))
    if user is None:
        user = User(username=settings.DEMO_USERNAME, password=settings.DEMO_PASSWORD)
        db.add(user)
        db.commit()
        db.refresh(user)
        log.info("[SEED] demo user %r created (id=%s)", user.username, user.id)
    return user


def new_flashcard(user_id: int, front: str, back: str, tag: str | None = None) -> Flashcard:
    """Fresh cards are due tomorrow and start out easy."""
    return Flashcard(
        user_id=user_id,
        front=front,
        back=back,
        tag=tag,
        last_reviewed=None,
        next_review=datetime.now() + timedelta(days=1),
        difficulty=0,
    )


def bootstrap_demo_data(db: Session) -> None:
    """
    Idempotent-ish bootstrapper that:
      1) Ensures the demo user exists
      2) Inserts the demo flashcards if the user has none
      3) Inserts the demo goals (due today) if the user has none
    """
    user = ensure_demo_user(db)

    n_cards = db.scalar(select(func.count(Flashcard.id)).where(Flashcard.user_id == user.id)) or 0
    if n_cards == 0:
        for c in _DEMO_FLASHCARDS:
            db.add(new_flashcard(user.id, c["front"], c["back"], c["tag"]))

    n_goals = db.scalar(select(func.count(Goal.id)).where(Goal.user_id == user.id)) or 0
    if n_goals == 0:
        today = datetime.now()
        for g in _DEMO_GOALS:
            db.add(Goal(user_id=user.id, text=g["text"], completed=g["completed"], due_date=today))

    db.commit()
    log.info("[SEED] demo data ready for user %s", user.id)
