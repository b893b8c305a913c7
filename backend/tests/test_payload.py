"""Tests for push payload construction."""
from foro.domain.notifications.models import StagingRecord
from foro.domain.notifications.payload import (
    ELLIPSIS,
    build_event_payload,
    build_test_payload,
    truncate_body,
)


def _record(**overrides) -> StagingRecord:
    fields = dict(
        id="n1",
        event_id="E1",
        event_title="Concert",
        event_description="Live music in the park",
        event_date="01/12/2026",
        event_time="20:00",
        event_location="Central Park",
        tokens=["t1"],
    )
    fields.update(overrides)
    return StagingRecord(**fields)


def test_long_body_truncated_but_data_keeps_full_text():
    description = "x" * 150
    payload = build_event_payload(_record(event_description=description))
    assert len(payload.body) == 101
    assert payload.body.endswith(ELLIPSIS)
    assert payload.data["body"] == description
    assert len(payload.data["body"]) == 150


def test_body_at_limit_is_untouched():
    assert truncate_body("y" * 100, 100) == "y" * 100


def test_event_payload_shape():
    payload = build_event_payload(_record())
    assert payload.title == "Concert"
    assert payload.body == "Live music in the park"
    assert payload.data == {
        "eventId": "E1",
        "title": "Concert",
        "body": "Live music in the park",
        "date": "01/12/2026",
        "time": "20:00",
        "location": "Central Park",
        "type": "new_event",
    }
    assert payload.android_channel_id == "event_notifications"
    assert payload.android_priority == "high"
    assert payload.sound == "default"
    assert payload.apns_badge == 1


def test_missing_title_and_description_fall_back():
    payload = build_event_payload(_record(event_title="", event_description=""))
    assert payload.title == "Nuevo Evento"
    assert payload.body == "Se ha creado un nuevo evento: Nuevo Evento"


def test_test_payload_has_no_platform_hints():
    payload = build_test_payload()
    assert payload.data == {"type": "test", "eventId": "test"}
    assert payload.android_channel_id is None
    assert payload.apns_badge is None
