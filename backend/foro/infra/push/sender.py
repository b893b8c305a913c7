"""Push notification sender via FCM (Firebase Cloud Messaging)."""
import asyncio
import logging
from typing import Optional, Protocol

import firebase_admin
from firebase_admin import messaging

from foro.domain.notifications.fanout import MulticastResult, TokenOutcome
from foro.domain.notifications.payload import PushPayload

logger = logging.getLogger(__name__)


class PushSender(Protocol):
    """Push delivery provider protocol."""

    async def send_multicast(self, tokens: list[str], payload: PushPayload) -> MulticastResult:
        """Send payload to every token in one provider call. Raises if the whole call fails."""
        ...


def build_multicast_message(tokens: list[str], payload: PushPayload) -> messaging.MulticastMessage:
    """Translate a PushPayload into an FCM multicast message."""
    android = None
    apns = None
    if payload.android_channel_id:
        android = messaging.AndroidConfig(
            priority=payload.android_priority,
            notification=messaging.AndroidNotification(
                channel_id=payload.android_channel_id,
                sound=payload.sound,
                priority=payload.android_priority,
            ),
        )
    if payload.apns_badge is not None:
        apns = messaging.APNSConfig(
            payload=messaging.APNSPayload(
                aps=messaging.Aps(sound=payload.sound, badge=payload.apns_badge),
            ),
        )
    return messaging.MulticastMessage(
        tokens=list(tokens),
        notification=messaging.Notification(title=payload.title, body=payload.body),
        # FCM data payload: all values must be strings
        data={k: str(v) for k, v in payload.data.items()},
        android=android,
        apns=apns,
    )


class FcmPushSender:
    """FCM-backed PushSender."""

    def __init__(self, app: Optional[firebase_admin.App] = None):
        self._app = app

    async def send_multicast(self, tokens: list[str], payload: PushPayload) -> MulticastResult:
        message = build_multicast_message(tokens, payload)
        # send_each_for_multicast blocks on HTTP; keep it off the event loop
        response = await asyncio.to_thread(
            messaging.send_each_for_multicast, message, False, self._app
        )
        outcomes = []
        for token, resp in zip(tokens, response.responses):
            error = str(resp.exception) if resp.exception is not None else None
            if not resp.success:
                logger.warning("Push rejected for token %s...: %s", token[:20], error)
            outcomes.append(TokenOutcome(token=token, success=resp.success, error=error))
        return MulticastResult(outcomes=tuple(outcomes))
