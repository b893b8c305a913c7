"""Background jobs: listen for newly staged notifications and dispatch them.

The snapshot listener plays the part of a "document created" trigger. Its
callback runs on a Firestore thread, so records are handed to the event loop
and dispatched one at a time by a worker coroutine.

Standalone worker: python -m foro.infra.jobs.tasks
"""
import asyncio
import logging
from typing import Any, Optional

from google.cloud.firestore_v1.base_query import FieldFilter

from foro.domain.notifications.models import NotificationStatus
from foro.services.fanout_dispatcher import FanOutDispatcher

logger = logging.getLogger(__name__)


class PendingNotificationListener:
    """Feeds every ADDED pending record to the dispatcher."""

    def __init__(self, sync_client: Any, collection: str, dispatcher: FanOutDispatcher):
        self.sync_client = sync_client
        self.collection = collection
        self.dispatcher = dispatcher
        self._queue: "asyncio.Queue[tuple[str, dict]]" = asyncio.Queue()
        self._watch = None

    def start(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        """Subscribe to pending records. Must be called from the loop's thread or with loop."""
        loop = loop or asyncio.get_running_loop()
        query = self.sync_client.collection(self.collection).where(
            filter=FieldFilter("status", "==", NotificationStatus.PENDING.value)
        )

        def on_snapshot(_snapshots, changes, _read_time):
            for change in changes:
                if change.type.name != "ADDED":
                    continue
                doc = change.document
                loop.call_soon_threadsafe(self._queue.put_nowait, (doc.id, doc.to_dict() or {}))

        self._watch = query.on_snapshot(on_snapshot)
        logger.info("Listening for pending notifications in %s", self.collection)

    def stop(self) -> None:
        if self._watch is not None:
            self._watch.unsubscribe()
            self._watch = None

    async def process_next(self) -> None:
        """Dispatch one queued record. Dispatcher failures are logged; the loop keeps going."""
        record_id, data = await self._queue.get()
        try:
            await self.dispatcher.handle_created(record_id, data)
        except Exception:
            logger.exception("Dispatch of notification %s failed", record_id)
        finally:
            self._queue.task_done()

    async def run(self) -> None:
        """Worker loop. Runs until cancelled."""
        while True:
            await self.process_next()


async def worker_loop() -> None:
    """Standalone fan-out worker process."""
    from foro.infra.firebase.app import sync_firestore_client
    from foro.services.wiring import build_services
    from foro.settings import get_settings

    settings = get_settings()
    if not settings.push_enabled:
        logger.warning("Push disabled; fan-out worker not started")
        return
    services = build_services(settings)
    listener = PendingNotificationListener(
        sync_firestore_client(services.firebase_app),
        settings.pending_notifications_collection,
        services.dispatcher,
    )
    listener.start()
    try:
        await listener.run()
    finally:
        listener.stop()


if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    asyncio.run(worker_loop())
