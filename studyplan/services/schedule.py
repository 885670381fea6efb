from __future__ import annotations

"""
studyplan/services/schedule.py

Daily schedule generator:
- lenient wall-clock parsing (24h and 12h AM/PM)
- busy intervals from sleep window + declared activity blocks (persisted as time slots)
- interval merge + free-slot extraction (gaps of at least 30 minutes)
- greedy study-session placement up to the daily target
"""

import logging
import math
import re
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import List, NamedTuple, Tuple

from studyplan.models.entities import TimeSlot
from studyplan.models.schemas import ScheduleRequest, TimeSlotIn
from studyplan.services.repository import TimeSlotRepository, day_bounds

log = logging.getLogger(__name__)

MIN_SLOT_MINUTES = 30

SLEEP_SUBJECT = "Sleep"
SLEEP_COLOR = "violet"
ACTIVITY_COLOR = "blue"
ACTIVITY_NOTES = "Daily activity"
STUDY_SUBJECT = "Study Session"
STUDY_COLOR = "red"

NOTES_CONSOLIDATED = "Consolidated study session based on your schedule"
NOTES_BEST_AVAILABLE = "Best available consolidated study time"
NOTES_ADDITIONAL = "Additional study time"

_TWELVE_HOUR_RE = re.compile(r"(\d{1,2}):(\d{2})\s*(AM|PM)", re.IGNORECASE)


class TimeInterval(NamedTuple):
    start: datetime
    end: datetime

    @property
    def minutes(self) -> float:
        return (self.end - self.start).total_seconds() / 60


@dataclass
class ScheduleResult:
    study_sessions: List[TimeSlot] = field(default_factory=list)
    total_minutes: float = 0.0

    @property
    def message(self) -> str:
        return (
            f"Generated {len(self.study_sessions)} study sessions "
            f"totaling {_round_half_up(self.total_minutes)} minutes"
        )


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


# --- Time parsing ---
def _coerce_number(part: str) -> int:
    try:
        v = float(part.strip())
    except (TypeError, ValueError):
        return 0
    if not math.isfinite(v):
        return 0
    return int(v)


def parse_time(value: str) -> Tuple[int, int]:
    """
    "09:30" -> (9, 30), "2:15 PM" -> (14, 15), "12:00 AM" -> (0, 0).
    Never raises; unparseable parts come back as 0.
    """
    text = str(value or "")
    m = _TWELVE_HOUR_RE.search(text)
    if m:
        hour = int(m.group(1))
        minute = int(m.group(2))
        period = m.group(3).upper()
        if period == "PM" and hour < 12:
            hour += 12
        elif period == "AM" and hour == 12:
            hour = 0
        log.debug("[SCHED] parsed 12h %r -> %d:%02d", text, hour, minute)
        return hour, minute

    parts = text.split(":")
    hour = _coerce_number(parts[0]) if len(parts) > 0 else 0
    minute = _coerce_number(parts[1]) if len(parts) > 1 else 0
    log.debug("[SCHED] parsed 24h %r -> %d:%02d", text, hour, minute)
    return hour, minute


def _at(day_start: datetime, hm: Tuple[int, int]) -> datetime:
    # out-of-range values roll over instead of raising; values too large for a date fall back to 00:00
    try:
        return day_start + timedelta(hours=hm[0], minutes=hm[1])
    except OverflowError:
        log.debug("[SCHED] clock value %r out of range; using 00:00", hm)
        return day_start


# --- Busy intervals ---
def _persist(
    repo: TimeSlotRepository,
    user_id: int,
    subject: str,
    interval: TimeInterval,
    notes: str,
    color: str,
) -> TimeSlot:
    return repo.create(TimeSlotIn(
        user_id=user_id,
        subject=subject,
        start_time=interval.start,
        duration=interval.minutes,
        notes=notes,
        color=color,
    ))


def build_busy_intervals(
    routine: ScheduleRequest, user_id: int, repo: TimeSlotRepository
) -> List[TimeInterval]:
    start_of_day, end_of_day = day_bounds(routine.date)

    wake = _at(start_of_day, parse_time(routine.wake_up_time))
    bed = _at(start_of_day, parse_time(routine.sleep_time))
    if bed <= wake:
        bed += timedelta(days=1)

    morning = TimeInterval(start_of_day, wake)
    # a bedtime past midnight leaves no evening sleep on this day
    evening = TimeInterval(min(bed, end_of_day), end_of_day)
    busy: List[TimeInterval] = [morning, evening]

    if morning.minutes > 0:
        _persist(repo, user_id, SLEEP_SUBJECT, morning, "Sleep time until wake up", SLEEP_COLOR)
    if evening.minutes > 0:
        _persist(repo, user_id, SLEEP_SUBJECT, evening, "Sleep time", SLEEP_COLOR)

    for block in routine.time_blocks:
        if not (block.activity and block.start_time and block.end_time):
            log.debug("[SCHED] skipping incomplete block %r", block)
            continue
        block_start = _at(start_of_day, parse_time(block.start_time))
        block_end = _at(start_of_day, parse_time(block.end_time))
        if block_end <= block_start:
            block_end += timedelta(days=1)
        interval = TimeInterval(block_start, block_end)
        busy.append(interval)
        _persist(repo, user_id, block.activity, interval, ACTIVITY_NOTES, ACTIVITY_COLOR)

    return busy


# --- Free slots ---
def merge_intervals(intervals: List[TimeInterval]) -> List[TimeInterval]:
    merged: List[TimeInterval] = []
    for cur in sorted(intervals, key=lambda iv: iv.start):
        if merged and cur.start <= merged[-1].end:
            prev = merged[-1]
            merged[-1] = TimeInterval(prev.start, max(prev.end, cur.end))
        else:
            merged.append(cur)
    return merged


def find_free_slots(
    busy: List[TimeInterval], min_minutes: float = MIN_SLOT_MINUTES
) -> List[TimeInterval]:
    """Gaps between merged busy intervals, longest first. Nothing outside the first/last busy range."""
    merged = merge_intervals(busy)
    free: List[TimeInterval] = []
    for cur, nxt in zip(merged, merged[1:]):
        gap = TimeInterval(cur.end, nxt.start)
        if gap.minutes >= min_minutes:
            free.append(gap)
    free.sort(key=lambda iv: iv.minutes, reverse=True)
    return free


# --- Placement ---
def place_study_sessions(
    free_slots: List[TimeInterval],
    target_minutes: float,
    user_id: int,
    repo: TimeSlotRepository,
) -> ScheduleResult:
    result = ScheduleResult()
    if target_minutes <= 0:
        log.info("[SCHED] non-positive study target (%s min); no sessions placed", target_minutes)
        return result

    def _study(slot: TimeInterval, minutes: float, notes: str) -> None:
        result.study_sessions.append(repo.create(TimeSlotIn(
            user_id=user_id,
            subject=STUDY_SUBJECT,
            start_time=slot.start,
            duration=minutes,
            notes=notes,
            color=STUDY_COLOR,
        )))
        result.total_minutes += minutes

    # first slot that holds the whole target wins
    for slot in free_slots:
        if slot.minutes >= target_minutes:
            _study(slot, target_minutes, NOTES_CONSOLIDATED)
            return result

    if free_slots and free_slots[0].minutes >= MIN_SLOT_MINUTES:
        _study(free_slots[0], min(free_slots[0].minutes, target_minutes), NOTES_BEST_AVAILABLE)

    for slot in free_slots[1:]:
        if result.total_minutes >= target_minutes:
            break
        if slot.minutes >= MIN_SLOT_MINUTES:
            _study(slot, min(slot.minutes, target_minutes - result.total_minutes), NOTES_ADDITIONAL)

    return result


def generate_schedule(
    routine: ScheduleRequest, user_id: int, repo: TimeSlotRepository
) -> ScheduleResult:
    if routine.max_session_length is not None or routine.break_length is not None:
        log.debug(
            "[SCHED] maxSessionLength=%s breakLength=%s accepted but not applied",
            routine.max_session_length, routine.break_length,
        )

    busy = build_busy_intervals(routine, user_id, repo)
    free = find_free_slots(busy)
    log.info("[SCHED] %s: %d busy intervals, %d free slots", routine.date, len(busy), len(free))

    result = place_study_sessions(free, routine.study_hours_goal * 60, user_id, repo)
    log.info("[SCHED] user %s: %s", user_id, result.message)
    return result
