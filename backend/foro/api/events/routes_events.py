"""Event API routes."""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, status
from pydantic import Field

from foro.api.deps import get_current_account, get_event_service
from foro.domain.events.models import CamelModel, Event, UserAccount
from foro.services.event_service import EventService

logger = logging.getLogger(__name__)

router = APIRouter()


class EventCreateRequest(CamelModel):
    """Create event request."""
    title: str = Field(min_length=1)
    description: str = ""
    date: str = ""  # dd/MM/yyyy
    time: str = ""  # HH:mm
    location: str = ""
    image_url: str = ""
    timestamp: Optional[int] = None  # event moment, epoch ms


class EventUpdateRequest(CamelModel):
    """Partial event update; omitted fields are left alone."""
    title: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    date: Optional[str] = None
    time: Optional[str] = None
    location: Optional[str] = None
    image_url: Optional[str] = None
    timestamp: Optional[int] = None


@router.post("", response_model=Event, status_code=status.HTTP_201_CREATED)
async def create_event(
    request: EventCreateRequest,
    current_account: UserAccount = Depends(get_current_account),
    service: EventService = Depends(get_event_service),
):
    """Create an event (organizers only). Subscribers are notified in the background."""
    draft = Event(organizer_id=current_account.id, **request.model_dump(exclude_none=True))
    return await service.create_event(current_account, draft)


@router.get("", response_model=List[Event])
async def list_events(
    organizer_id: Optional[str] = None,
    _: UserAccount = Depends(get_current_account),
    service: EventService = Depends(get_event_service),
):
    """List events, newest event moment first. Optional filter by organizer."""
    return await service.list_events(organizer_id)


@router.get("/organizer/{organizer_id}", response_model=List[Event])
async def list_organizer_events(
    organizer_id: str,
    _: UserAccount = Depends(get_current_account),
    service: EventService = Depends(get_event_service),
):
    return await service.list_events(organizer_id)


@router.get("/{event_id}", response_model=Event)
async def get_event(
    event_id: str,
    _: UserAccount = Depends(get_current_account),
    service: EventService = Depends(get_event_service),
):
    return await service.get_event(event_id)


@router.put("/{event_id}", response_model=Event)
async def update_event(
    event_id: str,
    request: EventUpdateRequest,
    current_account: UserAccount = Depends(get_current_account),
    service: EventService = Depends(get_event_service),
):
    """Update an event. Only its organizer may do so. Does not re-notify."""
    return await service.update_event(
        current_account, event_id, request.model_dump(exclude_none=True)
    )


@router.delete("/{event_id}")
async def delete_event(
    event_id: str,
    current_account: UserAccount = Depends(get_current_account),
    service: EventService = Depends(get_event_service),
):
    await service.delete_event(current_account, event_id)
    return {"ok": True}
