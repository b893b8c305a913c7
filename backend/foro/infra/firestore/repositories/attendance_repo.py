"""Attendance repository (Firestore `attendances` collection)."""
import logging
from typing import Optional

from google.cloud import firestore
from google.cloud.firestore_v1.base_query import FieldFilter

from foro.domain.common.errors import NotFoundError
from foro.domain.common.types import now_ms
from foro.domain.events.models import Attendance, AttendanceStatus

logger = logging.getLogger(__name__)


class AttendanceRepositoryImpl:
    """Attendance repository implementation. One document per (user, event)."""

    def __init__(self, client: firestore.AsyncClient, collection: str = "attendances"):
        self.collection = client.collection(collection)

    async def _find(self, user_id: str, event_id: str):
        query = (
            self.collection.where(filter=FieldFilter("userId", "==", user_id))
            .where(filter=FieldFilter("eventId", "==", event_id))
            .limit(1)
        )
        async for snap in query.stream():
            return snap
        return None

    async def _set_status(self, snap, status: AttendanceStatus) -> Attendance:
        ts = now_ms()
        await snap.reference.update({"status": status.value, "timestamp": ts})
        data = {**snap.to_dict(), "status": status.value, "timestamp": ts}
        return Attendance.from_document(snap.id, data)

    async def confirm(self, user_id: str, event_id: str) -> Attendance:
        existing = await self._find(user_id, event_id)
        if existing is not None:
            logger.info("Re-confirming attendance %s", existing.id)
            return await self._set_status(existing, AttendanceStatus.CONFIRMED)
        ref = self.collection.document()
        attendance = Attendance(id=ref.id, user_id=user_id, event_id=event_id)
        await ref.set(attendance.to_document())
        logger.info("Attendance %s created (user=%s event=%s)", ref.id, user_id, event_id)
        return attendance

    async def cancel(self, user_id: str, event_id: str) -> Attendance:
        existing = await self._find(user_id, event_id)
        if existing is None:
            raise NotFoundError("Attendance", f"{user_id}/{event_id}")
        return await self._set_status(existing, AttendanceStatus.CANCELLED)

    async def get_status(self, user_id: str, event_id: str) -> Optional[str]:
        existing = await self._find(user_id, event_id)
        if existing is None:
            return None
        return (existing.to_dict() or {}).get("status")

    def _confirmed_query(self, event_id: str):
        return (
            self.collection.where(filter=FieldFilter("eventId", "==", event_id))
            .where(filter=FieldFilter("status", "==", AttendanceStatus.CONFIRMED.value))
        )

    async def count_confirmed(self, event_id: str) -> int:
        return len(await self.list_confirmed(event_id))

    async def list_confirmed(self, event_id: str) -> list[Attendance]:
        return [
            Attendance.from_document(s.id, s.to_dict())
            async for s in self._confirmed_query(event_id).stream()
        ]

    async def list_attended_event_ids(self, user_id: str) -> list[str]:
        query = (
            self.collection.where(filter=FieldFilter("userId", "==", user_id))
            .where(filter=FieldFilter("status", "==", AttendanceStatus.CONFIRMED.value))
        )
        event_ids = []
        async for snap in query.stream():
            event_id = (snap.to_dict() or {}).get("eventId")
            if event_id:
                event_ids.append(event_id)
        return event_ids
