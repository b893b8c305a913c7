"""Tests for the pending-notification snapshot listener."""
import asyncio
import threading
from types import SimpleNamespace

from foro.domain.notifications.models import NotificationStatus, StagingRecord
from foro.infra.jobs.tasks import PendingNotificationListener


class FakeWatch:
    def __init__(self):
        self.unsubscribed = False

    def unsubscribe(self):
        self.unsubscribed = True


class FakeSyncClient:
    """Captures the query filter and the snapshot callback."""

    def __init__(self):
        self.collection_name = None
        self.filter = None
        self.callback = None
        self.watch = FakeWatch()

    def collection(self, name):
        self.collection_name = name
        return self

    def where(self, filter):
        self.filter = filter
        return self

    def on_snapshot(self, callback):
        self.callback = callback
        return self.watch


def _change(kind, doc_id, data):
    document = SimpleNamespace(id=doc_id, to_dict=lambda: data)
    return SimpleNamespace(type=SimpleNamespace(name=kind), document=document)


async def test_added_records_are_dispatched(staging, sender, dispatcher):
    record = staging.put(StagingRecord(event_id="E1", event_title="Concert", tokens=["t1", "t2"]))
    client = FakeSyncClient()
    listener = PendingNotificationListener(client, "pending_notifications", dispatcher)

    listener.start()
    assert client.collection_name == "pending_notifications"
    assert (client.filter.field_path, client.filter.op_string, client.filter.value) == (
        "status", "==", NotificationStatus.PENDING.value
    )

    # Firestore invokes the callback from its own thread
    thread = threading.Thread(
        target=client.callback,
        args=([], [_change("MODIFIED", "other", {}), _change("ADDED", record.id, record.to_document())], None),
    )
    thread.start()
    thread.join()
    await asyncio.sleep(0)

    await asyncio.wait_for(listener.process_next(), timeout=1)

    assert [batch for batch, _ in sender.calls] == [["t1", "t2"]]
    assert staging.records[record.id].status == NotificationStatus.SENT.value

    listener.stop()
    assert client.watch.unsubscribed


async def test_dispatch_failure_does_not_stop_the_worker(staging, sender, dispatcher, caplog):
    client = FakeSyncClient()
    listener = PendingNotificationListener(client, "pending_notifications", dispatcher)
    listener.start()

    client.callback([], [_change("ADDED", "bad", {"tokens": 42})], None)
    await asyncio.sleep(0)
    await asyncio.wait_for(listener.process_next(), timeout=1)

    assert "Dispatch of notification bad failed" in caplog.text
    assert sender.calls == []
