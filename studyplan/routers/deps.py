# studyplan/routers/deps.py
from fastapi import Depends
from sqlalchemy.orm import Session

from studyplan.models.db import get_db
from studyplan.services.repository import SqlTimeSlotRepository
from studyplan.utils.seed import ensure_demo_user


def get_current_user_id(db: Session = Depends(get_db)) -> int:
    # No auth: every request is the demo user
    return ensure_demo_user(db).id


def get_time_slot_repo(db: Session = Depends(get_db)) -> SqlTimeSlotRepository:
    return SqlTimeSlotRepository(db)
