"""Notification domain repository protocols."""
from typing import Optional, Protocol

from foro.domain.notifications.fanout import FanOutResult
from foro.domain.notifications.models import StagingRecord


class StagingRepository(Protocol):
    """Staging (pending notification) repository protocol."""

    async def create(self, record: StagingRecord) -> StagingRecord:
        """Write a new record; returns it with the store-assigned id."""
        ...

    async def get(self, record_id: str) -> Optional[StagingRecord]:
        ...

    async def claim(self, record_id: str) -> bool:
        """Atomically take ownership of a pending, unclaimed record. False if someone else has it."""
        ...

    async def mark_sent(self, record_id: str, result: FanOutResult) -> None:
        """Terminal update: status sent, sentAt, successCount, failureCount, totalTokens."""
        ...

    async def mark_failed(self, record_id: str, error: str) -> None:
        """Terminal update: status failed, error, processedAt."""
        ...
