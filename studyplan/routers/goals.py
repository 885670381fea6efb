# studyplan/routers/goals.py
from fastapi import APIRouter, Depends, HTTPException, Response
from typing import List
from sqlalchemy.orm import Session
from sqlalchemy import select

from studyplan.models.db import get_db
from studyplan.models.entities import Goal
from studyplan.models.schemas import GoalIn, GoalUpdate, GoalOut
from studyplan.routers.deps import get_current_user_id

router = APIRouter(prefix="/api/goals", tags=["goals"])


def _get_goal(db: Session, goal_id: int, user_id: int) -> Goal:
    goal = db.get(Goal, goal_id)
    if not goal or goal.user_id != user_id:
        raise HTTPException(status_code=404, detail="Goal not found")
    return goal


@router.get("", response_model=List[GoalOut])
def list_goals(user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)):
    return db.scalars(select(Goal).where(Goal.user_id == user_id).order_by(Goal.id)).all()


@router.get("/{goal_id}", response_model=GoalOut)
def get_goal(
    goal_id: int,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return _get_goal(db, goal_id, user_id)


@router.post("", response_model=GoalOut, status_code=201)
def create_goal(
    payload: GoalIn,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    goal = Goal(user_id=user_id, **payload.model_dump())
    db.add(goal); db.commit(); db.refresh(goal)
    return goal


@router.put("/{goal_id}", response_model=GoalOut)
def update_goal(
    goal_id: int,
    payload: GoalUpdate,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    goal = _get_goal(db, goal_id, user_id)
    changes = payload.model_dump(exclude_unset=True)
    for k, v in changes.items():
        setattr(goal, k, v)
    if changes:
        db.add(goal); db.commit(); db.refresh(goal)
    return goal


@router.post("/{goal_id}/toggle", response_model=GoalOut)
def toggle_goal(
    goal_id: int,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    goal = _get_goal(db, goal_id, user_id)
    goal.completed = not goal.completed
    db.add(goal); db.commit(); db.refresh(goal)
    return goal


@router.delete("/{goal_id}", status_code=204)
def delete_goal(
    goal_id: int,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    goal = _get_goal(db, goal_id, user_id)
    db.delete(goal)
    db.commit()
    return Response(status_code=204)
