"""Build the service graph from settings. Every component gets its collaborators explicitly."""
import logging
from dataclasses import dataclass
from typing import Any

import firebase_admin

from foro.infra.firebase.app import async_firestore_client, init_firebase_app
from foro.infra.firestore.repositories.account_repo import AccountRepositoryImpl
from foro.infra.firestore.repositories.attendance_repo import AttendanceRepositoryImpl
from foro.infra.firestore.repositories.comment_repo import CommentRepositoryImpl
from foro.infra.firestore.repositories.event_repo import EventRepositoryImpl
from foro.infra.firestore.repositories.staging_repo import StagingRepositoryImpl
from foro.infra.push.sender import FcmPushSender
from foro.services.event_service import EventService
from foro.services.fanout_dispatcher import FanOutDispatcher
from foro.services.notification_staging import NotificationStagingWriter
from foro.settings import Settings

logger = logging.getLogger(__name__)


@dataclass
class Services:
    firebase_app: firebase_admin.App
    accounts: AccountRepositoryImpl
    events: EventRepositoryImpl
    attendances: AttendanceRepositoryImpl
    comments: CommentRepositoryImpl
    staging: StagingRepositoryImpl
    sender: FcmPushSender
    staging_writer: NotificationStagingWriter
    dispatcher: FanOutDispatcher
    event_service: EventService


def build_services(settings: Settings, firebase_app: Any = None) -> Services:
    """Create Firebase clients, repositories and services for one process."""
    app = firebase_app or init_firebase_app(
        credentials_path=settings.google_application_credentials,
        project_id=settings.firebase_project_id,
        inline_json=settings.google_application_credentials_json,
    )
    client = async_firestore_client(app)
    accounts = AccountRepositoryImpl(client, settings.users_collection)
    events = EventRepositoryImpl(client, settings.events_collection)
    staging = StagingRepositoryImpl(client, settings.pending_notifications_collection)
    sender = FcmPushSender(app)
    staging_writer = NotificationStagingWriter(accounts, staging)
    dispatcher = FanOutDispatcher(
        staging,
        accounts,
        sender,
        batch_size=settings.fanout_batch_size,
        max_body_chars=settings.notification_body_max_chars,
        channel_id=settings.android_channel_id,
        push_enabled=settings.push_enabled,
    )
    logger.info(
        "Services built (batch_size=%d, push_enabled=%s)", dispatcher.batch_size, dispatcher.push_enabled
    )
    return Services(
        firebase_app=app,
        accounts=accounts,
        events=events,
        attendances=AttendanceRepositoryImpl(client, settings.attendances_collection),
        comments=CommentRepositoryImpl(client, settings.comments_collection),
        staging=staging,
        sender=sender,
        staging_writer=staging_writer,
        dispatcher=dispatcher,
        event_service=EventService(events, staging_writer),
    )
