# studyplan/routers/time_slots.py
from fastapi import APIRouter, Depends, HTTPException, Query, Response
from typing import List
from datetime import date

from studyplan.models.schemas import TimeSlotIn, TimeSlotUpdate, TimeSlotOut
from studyplan.routers.deps import get_current_user_id, get_time_slot_repo
from studyplan.services.repository import TimeSlotRepository

router = APIRouter(prefix="/api/time-slots", tags=["time-slots"])


def _get_or_404(repo: TimeSlotRepository, slot_id: int, user_id: int):
    slot = repo.get(slot_id)
    if slot is None or slot.user_id != user_id:
        raise HTTPException(status_code=404, detail="Time slot not found")
    return slot


@router.get("", response_model=List[TimeSlotOut])
def list_time_slots(
    date: date | None = Query(None, description="Only slots starting on this day"),
    user_id: int = Depends(get_current_user_id),
    repo: TimeSlotRepository = Depends(get_time_slot_repo),
):
    return repo.list(user_id, date)


@router.get("/{slot_id}", response_model=TimeSlotOut)
def get_time_slot(
    slot_id: int,
    user_id: int = Depends(get_current_user_id),
    repo: TimeSlotRepository = Depends(get_time_slot_repo),
):
    return _get_or_404(repo, slot_id, user_id)


@router.post("", response_model=TimeSlotOut, status_code=201)
def create_time_slot(
    payload: TimeSlotIn,
    user_id: int = Depends(get_current_user_id),
    repo: TimeSlotRepository = Depends(get_time_slot_repo),
):
    payload.user_id = user_id
    return repo.create(payload)


@router.put("/{slot_id}", response_model=TimeSlotOut)
def update_time_slot(
    slot_id: int,
    payload: TimeSlotUpdate,
    user_id: int = Depends(get_current_user_id),
    repo: TimeSlotRepository = Depends(get_time_slot_repo),
):
    _get_or_404(repo, slot_id, user_id)
    return repo.update(slot_id, payload.model_dump(exclude_unset=True))


@router.delete("/{slot_id}", status_code=204)
def delete_time_slot(
    slot_id: int,
    user_id: int = Depends(get_current_user_id),
    repo: TimeSlotRepository = Depends(get_time_slot_repo),
):
    _get_or_404(repo, slot_id, user_id)
    repo.delete(slot_id)
    return Response(status_code=204)
