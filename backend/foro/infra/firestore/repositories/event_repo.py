"""Event repository (Firestore `events` collection)."""
import logging
from typing import Optional

from google.cloud import firestore
from google.cloud.firestore_v1.base_query import FieldFilter

from foro.domain.events.models import Event

logger = logging.getLogger(__name__)


class EventRepositoryImpl:
    """Event repository implementation."""

    def __init__(self, client: firestore.AsyncClient, collection: str = "events"):
        self.collection = client.collection(collection)

    async def create(self, event: Event) -> Event:
        ref = self.collection.document()
        created = event.model_copy(update={"id": ref.id})
        await ref.set(created.to_document())
        logger.info("Event %s created by organizer %s", created.id, created.organizer_id)
        return created

    async def get(self, event_id: str) -> Optional[Event]:
        snap = await self.collection.document(event_id).get()
        if not snap.exists:
            return None
        return Event.from_document(snap.id, snap.to_dict())

    async def update(self, event: Event) -> Event:
        await self.collection.document(event.id).set(event.to_document())
        return event

    async def delete(self, event_id: str) -> None:
        await self.collection.document(event_id).delete()

    async def list_all(self) -> list[Event]:
        query = self.collection.order_by("timestamp", direction=firestore.Query.DESCENDING)
        return [Event.from_document(s.id, s.to_dict()) async for s in query.stream()]

    async def list_by_organizer(self, organizer_id: str) -> list[Event]:
        query = (
            self.collection.where(filter=FieldFilter("organizerId", "==", organizer_id))
            .order_by("timestamp", direction=firestore.Query.DESCENDING)
        )
        return [Event.from_document(s.id, s.to_dict()) async for s in query.stream()]
