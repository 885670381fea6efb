# studyplan/routers/analytics.py
from fastapi import APIRouter, Depends
from datetime import date, timedelta
from sqlalchemy.orm import Session
from sqlalchemy import select, func, case

from studyplan.models.db import get_db
from studyplan.models.entities import TimeSlot, Flashcard, Goal
from studyplan.models.schemas import AnalyticsSummary
from studyplan.routers.deps import get_current_user_id
from studyplan.services.repository import day_bounds

router = APIRouter(prefix="/api/analytics", tags=["analytics"])

_DIFFICULTY_NAMES = {0: "easy", 1: "medium", 2: "hard"}


def _percent(part: int, whole: int) -> int:
    return int(round(part * 100 / whole)) if whole else 0


@router.get("/summary", response_model=AnalyticsSummary)
def summary(user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)):
    # ---- time per subject ----
    rows = db.execute(
        select(TimeSlot.subject, func.coalesce(func.sum(TimeSlot.duration), 0))
        .where(TimeSlot.user_id == user_id)
        .group_by(TimeSlot.subject)
    ).all()
    by_subject = {r[0]: float(r[1] or 0) for r in rows}
    total_minutes = sum(by_subject.values())

    # ---- last 7 days, oldest first ----
    today = date.today()
    first_day = today - timedelta(days=6)
    lo, _ = day_bounds(first_day)
    _, hi = day_bounds(today)
    recent = db.execute(
        select(TimeSlot.start_time, TimeSlot.duration)
        .where(TimeSlot.user_id == user_id, TimeSlot.start_time >= lo, TimeSlot.start_time <= hi)
    ).all()
    per_day = {first_day + timedelta(days=i): 0.0 for i in range(7)}
    for start, minutes in recent:
        per_day[start.date()] += float(minutes or 0)

    # ---- goals ----
    g = db.execute(
        select(
            func.count(Goal.id),
            func.sum(case((Goal.completed == True, 1), else_=0)),  # noqa: E712
        ).where(Goal.user_id == user_id)
    ).one()
    goals_total = int(g[0] or 0)
    goals_done = int(g[1] or 0)

    # ---- flashcards ----
    diff_rows = db.execute(
        select(Flashcard.difficulty, func.count(Flashcard.id))
        .where(Flashcard.user_id == user_id)
        .group_by(Flashcard.difficulty)
    ).all()
    by_difficulty = {name: 0 for name in _DIFFICULTY_NAMES.values()}
    for level, cnt in diff_rows:
        name = _DIFFICULTY_NAMES.get(level)
        if name:
            by_difficulty[name] += int(cnt)
    cards_total = sum(int(cnt) for _, cnt in diff_rows)

    return {
        "total_hours": round(total_minutes / 60, 1),
        "unique_subjects": len(by_subject),
        "minutes_by_subject": by_subject,
        "last_7_days": [{"day": d, "minutes": m} for d, m in per_day.items()],
        "goals_completed": goals_done,
        "goals_active": goals_total - goals_done,
        "goal_completion_percent": _percent(goals_done, goals_total),
        "flashcards_by_difficulty": by_difficulty,
        "flashcard_mastery_percent": _percent(by_difficulty["easy"], cards_total),
    }
