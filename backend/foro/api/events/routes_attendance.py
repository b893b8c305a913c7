"""Attendance API routes."""
from typing import List

from fastapi import APIRouter, Depends

from foro.api.deps import get_attendance_repo, get_current_account, get_event_service
from foro.domain.events.models import Attendance, UserAccount
from foro.domain.events.repositories import AttendanceRepository
from foro.services.event_service import EventService

router = APIRouter()


@router.get("/attended", response_model=List[str])
async def list_attended_events(
    current_account: UserAccount = Depends(get_current_account),
    attendances: AttendanceRepository = Depends(get_attendance_repo),
):
    """Ids of events the current user has confirmed."""
    return await attendances.list_attended_event_ids(current_account.id)


@router.post("/{event_id}/attendance", response_model=Attendance)
async def confirm_attendance(
    event_id: str,
    current_account: UserAccount = Depends(get_current_account),
    attendances: AttendanceRepository = Depends(get_attendance_repo),
    service: EventService = Depends(get_event_service),
):
    """Confirm attendance; confirming again after cancelling reuses the same record."""
    await service.get_event(event_id)
    return await attendances.confirm(current_account.id, event_id)


@router.delete("/{event_id}/attendance", response_model=Attendance)
async def cancel_attendance(
    event_id: str,
    current_account: UserAccount = Depends(get_current_account),
    attendances: AttendanceRepository = Depends(get_attendance_repo),
):
    return await attendances.cancel(current_account.id, event_id)


@router.get("/{event_id}/attendance")
async def get_attendance_status(
    event_id: str,
    current_account: UserAccount = Depends(get_current_account),
    attendances: AttendanceRepository = Depends(get_attendance_repo),
):
    """Current user's attendance status for the event (null when never confirmed)."""
    return {"status": await attendances.get_status(current_account.id, event_id)}


@router.get("/{event_id}/attendees")
async def list_attendees(
    event_id: str,
    _: UserAccount = Depends(get_current_account),
    attendances: AttendanceRepository = Depends(get_attendance_repo),
):
    confirmed = await attendances.list_confirmed(event_id)
    return {
        "count": len(confirmed),
        "attendees": [a.model_dump(by_alias=True) for a in confirmed],
    }
