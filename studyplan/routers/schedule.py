# studyplan/routers/schedule.py
import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from studyplan.models.schemas import ScheduleRequest, ScheduleResponse, TimeSlotOut
from studyplan.routers.deps import get_current_user_id, get_time_slot_repo
from studyplan.services.repository import TimeSlotRepository
from studyplan.services.schedule import generate_schedule

log = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["schedule"])


@router.post(
    "/generate-schedule",
    response_model=ScheduleResponse,
    status_code=201,
    responses={500: {"description": "Generation failed; records created before the failure are kept"}},
)
def generate(
    payload: ScheduleRequest,
    user_id: int = Depends(get_current_user_id),
    repo: TimeSlotRepository = Depends(get_time_slot_repo),
):
    """
    Persists sleep, activity and study time slots for ``payload.date``.
    Not idempotent: calling twice with the same body stores everything twice.
    """
    try:
        result = generate_schedule(payload, user_id, repo)
    except Exception as e:
        log.error("[SCHED] generation failed for user %s: %s", user_id, e, exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"message": "Failed to generate schedule", "error": str(e) or type(e).__name__},
        )
    return ScheduleResponse(
        success=True,
        message=result.message,
        study_sessions=[TimeSlotOut.model_validate(s) for s in result.study_sessions],
    )
