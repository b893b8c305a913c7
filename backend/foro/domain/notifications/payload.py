"""Push payloads sent to the messaging provider."""
from dataclasses import dataclass, field
from typing import Optional

from foro.domain.notifications.models import StagingRecord

NEW_EVENT_TYPE = "new_event"
DEFAULT_EVENT_TITLE = "Nuevo Evento"
ELLIPSIS = "…"


@dataclass(frozen=True)
class PushPayload:
    """Provider-independent multicast payload, applied uniformly to every token in a batch."""

    title: str
    body: str
    data: dict[str, str] = field(default_factory=dict)
    # Delivery hints; None leaves the platform block out entirely
    android_channel_id: Optional[str] = None
    android_priority: str = "high"
    sound: str = "default"
    apns_badge: Optional[int] = None


def truncate_body(text: str, limit: int) -> str:
    """Cut text to limit characters plus an ellipsis; shorter text is returned unchanged."""
    if len(text) <= limit:
        return text
    return text[:limit] + ELLIPSIS


def build_event_payload(
    record: StagingRecord,
    *,
    max_body_chars: int = 100,
    channel_id: str = "event_notifications",
) -> PushPayload:
    """Build the new-event notification for a staging record.

    The visible body is a preview; data carries the untruncated text so the
    client can render full details.
    """
    title = record.event_title or DEFAULT_EVENT_TITLE
    body = record.event_description or f"Se ha creado un nuevo evento: {title}"
    return PushPayload(
        title=title,
        body=truncate_body(body, max_body_chars),
        data={
            "eventId": record.event_id or "",
            "title": title,
            "body": body,
            "date": record.event_date or "",
            "time": record.event_time or "",
            "location": record.event_location or "",
            "type": NEW_EVENT_TYPE,
        },
        android_channel_id=channel_id,
        apns_badge=1,
    )


def build_test_payload() -> PushPayload:
    """Fixed payload used by the manual test endpoint."""
    return PushPayload(
        title="Notificación de Prueba",
        body="Esta es una notificación de prueba del sistema de eventos",
        data={"type": "test", "eventId": "test"},
    )
