"""Tests for the FCM push sender."""
from types import SimpleNamespace

from firebase_admin import messaging

from foro.domain.notifications.payload import PushPayload, build_test_payload
from foro.infra.push.sender import FcmPushSender, build_multicast_message


def _event_payload() -> PushPayload:
    return PushPayload(
        title="Concert",
        body="Live music",
        data={"eventId": "E1", "type": "new_event"},
        android_channel_id="event_notifications",
        apns_badge=1,
    )


def test_multicast_message_carries_platform_hints():
    message = build_multicast_message(["t1", "t2"], _event_payload())

    assert message.tokens == ["t1", "t2"]
    assert message.notification.title == "Concert"
    assert message.notification.body == "Live music"
    assert message.data == {"eventId": "E1", "type": "new_event"}
    assert message.android.priority == "high"
    assert message.android.notification.channel_id == "event_notifications"
    assert message.android.notification.sound == "default"
    assert message.apns.payload.aps.badge == 1
    assert message.apns.payload.aps.sound == "default"


def test_multicast_message_without_hints_omits_platform_blocks():
    message = build_multicast_message(["t1"], build_test_payload())
    assert message.android is None
    assert message.apns is None
    assert message.data == {"type": "test", "eventId": "test"}


async def test_send_multicast_maps_responses_by_position(monkeypatch):
    captured = {}

    def fake_send(message, dry_run=False, app=None):
        captured["message"] = message
        captured["dry_run"] = dry_run
        return SimpleNamespace(responses=[
            SimpleNamespace(success=True, exception=None),
            SimpleNamespace(success=False, exception=ValueError("Requested entity was not found.")),
        ])

    monkeypatch.setattr(messaging, "send_each_for_multicast", fake_send)

    result = await FcmPushSender().send_multicast(["t1", "t2"], _event_payload())

    assert captured["message"].tokens == ["t1", "t2"]
    assert captured["dry_run"] is False
    assert [o.token for o in result.outcomes] == ["t1", "t2"]
    assert [o.success for o in result.outcomes] == [True, False]
    assert result.outcomes[1].error == "Requested entity was not found."
    assert (result.success_count, result.failure_count) == (1, 1)
