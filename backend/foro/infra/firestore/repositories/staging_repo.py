"""Staging repository (Firestore `pending_notifications` collection)."""
import logging
from typing import Optional

from google.cloud import firestore

from foro.domain.notifications.fanout import FanOutResult
from foro.domain.notifications.models import NotificationStatus, StagingRecord

logger = logging.getLogger(__name__)


class StagingRepositoryImpl:
    """Staging repository implementation. Records are never deleted."""

    def __init__(self, client: firestore.AsyncClient, collection: str = "pending_notifications"):
        self.client = client
        self.collection = client.collection(collection)

    async def create(self, record: StagingRecord) -> StagingRecord:
        _, ref = await self.collection.add(record.to_document())
        logger.info("Pending notification %s staged for event %s", ref.id, record.event_id)
        return record.model_copy(update={"id": ref.id})

    async def get(self, record_id: str) -> Optional[StagingRecord]:
        snap = await self.collection.document(record_id).get()
        if not snap.exists:
            return None
        return StagingRecord.from_document(snap.id, snap.to_dict())

    async def claim(self, record_id: str) -> bool:
        """
        Mark the record as taken by this dispatcher.

        Every snapshot listener sees every ADDED change, so the status check
        and the claim write share one transaction. Only one caller gets True.
        """
        ref = self.collection.document(record_id)

        @firestore.async_transactional
        async def _claim(transaction) -> bool:
            snap = await ref.get(transaction=transaction)
            if not snap.exists:
                return False
            data = snap.to_dict() or {}
            if data.get("status") != NotificationStatus.PENDING.value or data.get("claimedAt") is not None:
                return False
            transaction.update(ref, {"claimedAt": firestore.SERVER_TIMESTAMP})
            return True

        claimed = await _claim(self.client.transaction())
        if not claimed:
            logger.info("Pending notification %s already claimed or processed", record_id)
        return claimed

    async def mark_sent(self, record_id: str, result: FanOutResult) -> None:
        await self.collection.document(record_id).update({
            "status": NotificationStatus.SENT.value,
            "sentAt": firestore.SERVER_TIMESTAMP,
            "successCount": result.success_count,
            "failureCount": result.failure_count,
            "totalTokens": result.total_tokens,
        })

    async def mark_failed(self, record_id: str, error: str) -> None:
        await self.collection.document(record_id).update({
            "status": NotificationStatus.FAILED.value,
            "error": error,
            "processedAt": firestore.SERVER_TIMESTAMP,
        })
