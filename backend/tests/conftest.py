"""Pytest configuration for tests directory."""
import pytest

from fakes import (
    FakePushSender,
    InMemoryAccountRepository,
    InMemoryAttendanceRepository,
    InMemoryCommentRepository,
    InMemoryEventRepository,
    InMemoryStagingRepository,
    make_account,
)
from foro.domain.events.models import AccountRole, UserAccount
from foro.services.event_service import EventService
from foro.services.fanout_dispatcher import FanOutDispatcher
from foro.services.notification_staging import NotificationStagingWriter


def pytest_configure(config):
    config.addinivalue_line(
        "markers", "integration: marks tests that need real Firebase credentials (deselect with '-m \"not integration\"')"
    )


@pytest.fixture
def organizer() -> UserAccount:
    return make_account("org-1", role=AccountRole.ORGANIZADOR.value)


@pytest.fixture
def accounts(organizer) -> InMemoryAccountRepository:
    """Three attendees with tokens, one without, and a token-holding organizer."""
    return InMemoryAccountRepository([
        make_account("u1", "t1"),
        make_account("u2", "t2"),
        make_account("u3", "t3"),
        make_account("u4"),
        organizer,
        make_account("org-2", "t-org", role=AccountRole.ORGANIZADOR.value),
    ])


@pytest.fixture
def staging() -> InMemoryStagingRepository:
    return InMemoryStagingRepository()


@pytest.fixture
def sender() -> FakePushSender:
    return FakePushSender()


@pytest.fixture
def events() -> InMemoryEventRepository:
    return InMemoryEventRepository()


@pytest.fixture
def attendances() -> InMemoryAttendanceRepository:
    return InMemoryAttendanceRepository()


@pytest.fixture
def comments() -> InMemoryCommentRepository:
    return InMemoryCommentRepository()


@pytest.fixture
def staging_writer(accounts, staging) -> NotificationStagingWriter:
    return NotificationStagingWriter(accounts, staging)


@pytest.fixture
def dispatcher(staging, accounts, sender) -> FanOutDispatcher:
    return FanOutDispatcher(staging, accounts, sender)


@pytest.fixture
def event_service(events, staging_writer) -> EventService:
    return EventService(events, staging_writer)
