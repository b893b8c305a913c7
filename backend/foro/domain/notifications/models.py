"""Notification staging domain models."""
from enum import Enum
from typing import Any, Optional

from pydantic import Field

from foro.domain.common.types import now_ms
from foro.domain.events.models import Document, Event


class NotificationStatus(str, Enum):
    """Staging record status. Only pending -> sent|failed, never back."""

    PENDING = "pending"
    SENT = "sent"
    FAILED = "failed"


class StagingRecord(Document):
    """
    Durable fan-out job for one newly created event.

    Event fields are snapshotted at staging time so later edits to the event
    do not change what was announced. Written once by the staging writer and
    once more (terminal update) by the dispatcher.
    """

    event_id: str
    event_title: str = ""
    event_description: str = ""
    event_date: str = ""
    event_time: str = ""
    event_location: str = ""
    tokens: list[str] = Field(default_factory=list)
    created_at: int = Field(default_factory=now_ms)
    status: NotificationStatus = NotificationStatus.PENDING.value

    # Set by the dispatcher that won the claim; one claim per record
    claimed_at: Optional[Any] = None  # server timestamp

    # Terminal fields, set by the dispatcher
    success_count: Optional[int] = None
    failure_count: Optional[int] = None
    total_tokens: Optional[int] = None
    sent_at: Optional[Any] = None  # server timestamp
    processed_at: Optional[Any] = None  # server timestamp
    error: Optional[str] = None

    @classmethod
    def for_event(cls, event: Event, tokens: list[str]) -> "StagingRecord":
        """New pending record announcing event to tokens."""
        return cls(
            event_id=event.id,
            event_title=event.title,
            event_description=event.description,
            event_date=event.date,
            event_time=event.time,
            event_location=event.location,
            tokens=list(tokens),
            created_at=now_ms(),
            status=NotificationStatus.PENDING.value,
        )

    @property
    def is_pending(self) -> bool:
        return self.status == NotificationStatus.PENDING.value
