"""
studyplan/services/repository.py

Time-slot storage behind one small interface so the schedule generator does not
care where records end up:
- TimeSlotRepository: the create/get/list/update/delete contract
- InMemoryTimeSlotRepository: list-backed arena with generated ids (tests, scratch runs)
- SqlTimeSlotRepository: SQLAlchemy session, one commit per write
"""

from __future__ import annotations

import itertools
import logging
from datetime import date, datetime, time, timedelta
from typing import Any, Dict, List, Optional, Protocol, Tuple

from sqlalchemy import select
from sqlalchemy.orm import Session

from studyplan.models.entities import TimeSlot
from studyplan.models.schemas import TimeSlotIn

log = logging.getLogger(__name__)


def day_bounds(day: date) -> Tuple[datetime, datetime]:
    """[00:00:00.000, 23:59:59.999] of ``day``."""
    start = datetime.combine(day, time.min)
    return start, start + timedelta(days=1) - timedelta(milliseconds=1)


class TimeSlotRepository(Protocol):
    def create(self, slot: TimeSlotIn) -> TimeSlot: ...

    def get(self, slot_id: int) -> Optional[TimeSlot]: ...

    def list(self, user_id: int, day: Optional[date] = None) -> List[TimeSlot]: ...

    def update(self, slot_id: int, changes: Dict[str, Any]) -> Optional[TimeSlot]: ...

    def delete(self, slot_id: int) -> bool: ...


class InMemoryTimeSlotRepository:
    def __init__(self) -> None:
        self._rows: List[TimeSlot] = []
        self._ids = itertools.count(1)

    def create(self, slot: TimeSlotIn) -> TimeSlot:
        row = TimeSlot(id=next(self._ids), **slot.model_dump())
        self._rows.append(row)
        return row

    def get(self, slot_id: int) -> Optional[TimeSlot]:
        for row in self._rows:
            if row.id == slot_id:
                return row
        return None

    def list(self, user_id: int, day: Optional[date] = None) -> List[TimeSlot]:
        rows = [r for r in self._rows if r.user_id == user_id]
        if day is not None:
            lo, hi = day_bounds(day)
            rows = [r for r in rows if lo <= r.start_time <= hi]
        return rows

    def update(self, slot_id: int, changes: Dict[str, Any]) -> Optional[TimeSlot]:
        row = self.get(slot_id)
        if row is None:
            return None
        for k, v in changes.items():
            setattr(row, k, v)
        return row

    def delete(self, slot_id: int) -> bool:
        row = self.get(slot_id)
        if row is None:
            return False
        self._rows.remove(row)
        return True

    def __len__(self) -> int:
        return len(self._rows)


class SqlTimeSlotRepository:
    def __init__(self, db: Session) -> None:
        self.db = db

    def create(self, slot: TimeSlotIn) -> TimeSlot:
        row = TimeSlot(**slot.model_dump())
        self.db.add(row)
        self.db.commit()
        self.db.refresh(row)
        log.debug("[DB] time slot %s created (%s @ %s)", row.id, row.subject, row.start_time)
        return row

    def get(self, slot_id: int) -> Optional[TimeSlot]:
        return self.db.get(TimeSlot, slot_id)

    def list(self, user_id: int, day: Optional[date] = None) -> List[TimeSlot]:
        stmt = select(TimeSlot).where(TimeSlot.user_id == user_id)
        if day is not None:
            lo, hi = day_bounds(day)
            stmt = stmt.where(TimeSlot.start_time >= lo, TimeSlot.start_time <= hi)
        return list(self.db.scalars(stmt.order_by(TimeSlot.start_time, TimeSlot.id)).all())

    def update(self, slot_id: int, changes: Dict[str, Any]) -> Optional[TimeSlot]:
        row = self.get(slot_id)
        if row is None:
            return None
        for k, v in changes.items():
            setattr(row, k, v)
        self.db.add(row); self.db.commit(); self.db.refresh(row)
        return row

    def delete(self, slot_id: int) -> bool:
        row = self.get(slot_id)
        if row is None:
            return False
        self.db.delete(row)
        self.db.commit()
        return True
