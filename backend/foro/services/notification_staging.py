"""
Notification staging: turn "event was just created" into a durable fan-out job.

The staging record is the outbox. Nothing here talks to the push provider;
the dispatcher picks the record up on its own, so delivery can scale and
retry independently of the organizer's request.
"""
import logging
from typing import Optional

from foro.domain.common.errors import ValidationError
from foro.domain.events.models import AccountRole, Event
from foro.domain.events.repositories import AccountRepository
from foro.domain.notifications.models import StagingRecord
from foro.domain.notifications.repositories import StagingRepository

logger = logging.getLogger(__name__)


class NotificationStagingWriter:
    """Writes one pending staging record per newly created event."""

    def __init__(self, accounts: AccountRepository, staging: StagingRepository):
        self.accounts = accounts
        self.staging = staging

    async def collect_recipient_tokens(self) -> list[str]:
        """Non-empty device tokens of all attendee accounts, in query order."""
        accounts = await self.accounts.find_accounts_by_role(AccountRole.USUARIO.value)
        tokens = [a.fcm_token for a in accounts if a.fcm_token]
        without_token = len(accounts) - len(tokens)
        logger.info(
            "Recipients: %d accounts, %d with device token, %d without",
            len(accounts),
            len(tokens),
            without_token,
        )
        return tokens

    async def stage_event_notification(self, event: Event) -> Optional[str]:
        """
        Stage the new-event notification for event.

        Returns the staging record id, or None when nothing was staged (no
        recipients, or the store failed). Store failures are logged, never
        raised: notification is best-effort and must not undo the event.
        """
        if not event.id:
            raise ValidationError("event must be persisted before staging notifications")
        try:
            tokens = await self.collect_recipient_tokens()
            if not tokens:
                logger.warning(
                    "No device tokens found; nothing staged for event %s", event.id
                )
                return None
            record = await self.staging.create(StagingRecord.for_event(event, tokens))
        except Exception:
            logger.exception("Failed to stage notification for event %s", event.id)
            return None
        logger.info(
            "Staged notification %s for event %s (%d tokens)",
            record.id,
            event.id,
            len(tokens),
        )
        return record.id
