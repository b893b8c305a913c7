"""Event service: organizer-owned event lifecycle plus the notification hand-off."""
import asyncio
import logging
from typing import Optional

from foro.domain.common.errors import AuthorizationError, NotFoundError
from foro.domain.events.models import AccountRole, Event, UserAccount
from foro.domain.events.repositories import EventRepository
from foro.services.notification_staging import NotificationStagingWriter

logger = logging.getLogger(__name__)


class EventService:
    """Event business logic."""

    def __init__(self, events: EventRepository, staging_writer: NotificationStagingWriter):
        self.events = events
        self.staging_writer = staging_writer
        self._pending: set[asyncio.Task] = set()

    async def create_event(self, organizer: UserAccount, draft: Event) -> Event:
        """
        Persist a new event and schedule its notification in the background.

        Returns as soon as the event is stored. Staging runs as its own task and
        its outcome only reaches the log.
        """
        if organizer.role != AccountRole.ORGANIZADOR.value:
            raise AuthorizationError("Only organizers can create events")
        event = await self.events.create(
            draft.model_copy(update={"id": "", "organizer_id": organizer.id})
        )
        self._schedule_staging(event)
        return event

    def _schedule_staging(self, event: Event) -> None:
        task = asyncio.create_task(
            self.staging_writer.stage_event_notification(event),
            name=f"stage-notification-{event.id}",
        )
        self._pending.add(task)
        task.add_done_callback(self._on_staging_done)

    def _on_staging_done(self, task: asyncio.Task) -> None:
        self._pending.discard(task)
        if task.cancelled():
            logger.warning("Notification staging %s cancelled", task.get_name())
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Notification staging %s failed: %s", task.get_name(), exc)

    async def wait_for_pending(self) -> None:
        """Wait for in-flight staging tasks (shutdown, tests)."""
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    async def get_event(self, event_id: str) -> Event:
        event = await self.events.get(event_id)
        if event is None:
            raise NotFoundError("Event", event_id)
        return event

    async def _owned_event(self, organizer: UserAccount, event_id: str) -> Event:
        event = await self.get_event(event_id)
        if event.organizer_id != organizer.id:
            raise AuthorizationError("Only the event organizer can modify this event")
        return event

    async def update_event(self, organizer: UserAccount, event_id: str, changes: dict) -> Event:
        """Apply changes to an owned event. id, organizer and creation time are fixed."""
        event = await self._owned_event(organizer, event_id)
        allowed = {k: v for k, v in changes.items() if k not in ("id", "organizer_id", "created_at")}
        return await self.events.update(event.model_copy(update=allowed))

    async def delete_event(self, organizer: UserAccount, event_id: str) -> None:
        await self._owned_event(organizer, event_id)
        await self.events.delete(event_id)

    async def list_events(self, organizer_id: Optional[str] = None) -> list[Event]:
        if organizer_id:
            return await self.events.list_by_organizer(organizer_id)
        return await self.events.list_all()
