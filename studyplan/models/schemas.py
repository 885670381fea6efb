from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel
from datetime import date, datetime
from typing import Dict, List, Optional


class _ApiModel(BaseModel):
    # JSON is camelCase (startTime, userId, ...); python side stays snake_case
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


def _not_null(v):
    # update bodies may omit a field but not null out a required column
    if v is None:
        raise ValueError("may not be null")
    return v


# ---------------------------------------------------------------------------
# Time slots
# ---------------------------------------------------------------------------

class TimeSlotIn(_ApiModel):
    user_id: Optional[int] = None
    subject: str
    start_time: datetime
    duration: float  # minutes
    notes: Optional[str] = None
    color: str

class TimeSlotUpdate(_ApiModel):
    subject: Optional[str] = None
    start_time: Optional[datetime] = None
    duration: Optional[float] = None
    notes: Optional[str] = None
    color: Optional[str] = None

    @field_validator("subject", "start_time", "duration", "color")
    @classmethod
    def reject_null(cls, v):
        return _not_null(v)

class TimeSlotOut(_ApiModel):
    id: int
    user_id: int
    subject: str
    start_time: datetime
    duration: float
    notes: Optional[str] = None
    color: str


# ---------------------------------------------------------------------------
# Flashcards
# ---------------------------------------------------------------------------

class FlashcardIn(_ApiModel):
    front: str
    back: str
    tag: Optional[str] = None

class FlashcardUpdate(_ApiModel):
    front: Optional[str] = None
    back: Optional[str] = None
    tag: Optional[str] = None
    difficulty: Optional[int] = None

    @field_validator("front", "back", "difficulty")
    @classmethod
    def reject_null(cls, v):
        return _not_null(v)

class FlashcardOut(_ApiModel):
    id: int
    user_id: int
    front: str
    back: str
    tag: Optional[str] = None
    last_reviewed: Optional[datetime] = None
    next_review: Optional[datetime] = None
    difficulty: int


# ---------------------------------------------------------------------------
# Goals
# ---------------------------------------------------------------------------

class GoalIn(_ApiModel):
    text: str
    completed: bool = False
    due_date: Optional[datetime] = None

class GoalUpdate(_ApiModel):
    text: Optional[str] = None
    completed: Optional[bool] = None
    due_date: Optional[datetime] = None

    @field_validator("text", "completed")
    @classmethod
    def reject_null(cls, v):
        return _not_null(v)

class GoalOut(_ApiModel):
    id: int
    user_id: int
    text: str
    completed: bool
    due_date: Optional[datetime] = None


# ---------------------------------------------------------------------------
# Schedule generation
# ---------------------------------------------------------------------------

class TimeBlockIn(_ApiModel):
    # all optional: incomplete blocks are skipped, not rejected
    activity: Optional[str] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None

class ScheduleRequest(_ApiModel):
    date: date
    wake_up_time: str
    sleep_time: str
    study_hours_goal: float
    max_session_length: Optional[float] = None  # accepted, not enforced
    break_length: Optional[float] = None  # accepted, not enforced
    time_blocks: List[TimeBlockIn] = []

class ScheduleResponse(_ApiModel):
    success: bool
    message: str
    study_sessions: List[TimeSlotOut]


# ---------------------------------------------------------------------------
# Analytics
# ---------------------------------------------------------------------------

class DailyMinutes(_ApiModel):
    day: date
    minutes: float

class AnalyticsSummary(_ApiModel):
    total_hours: float
    unique_subjects: int
    minutes_by_subject: Dict[str, float]
    last_7_days: List[DailyMinutes]
    goals_completed: int
    goals_active: int
    goal_completion_percent: int
    flashcards_by_difficulty: Dict[str, int]
    flashcard_mastery_percent: int
