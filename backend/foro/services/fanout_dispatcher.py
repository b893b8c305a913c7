"""
Fan-out dispatcher: deliver one staged notification to every listed token.

Invoked once per newly created staging record. Several listeners may see
the same record, so each dispatch first claims it in the store and only the
winner sends. Batches run sequentially; a batch that raises counts
entirely as failed and the job moves on. Tokens rejected by the provider are
pruned from user accounts afterwards. The record gets exactly one terminal
update: `sent` (even with per-token failures) or `failed` (no tokens, or an
error escaped the whole run).
"""
import logging
from typing import Any, Optional

from pydantic import ValidationError as PydanticValidationError

from foro.domain.events.repositories import AccountRepository
from foro.domain.notifications.fanout import (
    FanOutResult,
    chunk_tokens,
    fold_batch_error,
    fold_batch_response,
)
from foro.domain.notifications.models import StagingRecord
from foro.domain.notifications.payload import build_event_payload
from foro.domain.notifications.repositories import StagingRepository
from foro.infra.push.sender import PushSender
from foro.settings import FCM_MULTICAST_LIMIT

logger = logging.getLogger(__name__)

NO_TOKENS_ERROR = "no tokens available"


class FanOutDispatcher:
    """Sends staged new-event notifications in provider-sized batches."""

    def __init__(
        self,
        staging: StagingRepository,
        accounts: AccountRepository,
        sender: PushSender,
        *,
        batch_size: int = FCM_MULTICAST_LIMIT,
        max_body_chars: int = 100,
        channel_id: str = "event_notifications",
        push_enabled: bool = True,
    ):
        self.staging = staging
        self.accounts = accounts
        self.sender = sender
        self.batch_size = min(batch_size, FCM_MULTICAST_LIMIT)
        self.max_body_chars = max_body_chars
        self.channel_id = channel_id
        self.push_enabled = push_enabled

    async def _mark_failed(self, record_id: str, error: str) -> None:
        try:
            await self.staging.mark_failed(record_id, error)
        except Exception:
            logger.exception("Could not mark notification %s as failed", record_id)

    async def handle_created(self, record_id: str, data: dict[str, Any]) -> Optional[FanOutResult]:
        """Trigger entry point: raw content of a newly created staging document."""
        try:
            record = StagingRecord.from_document(record_id, data)
        except PydanticValidationError as e:
            logger.error("Notification %s is malformed: %s", record_id, e)
            await self.staging.mark_failed(record_id, f"malformed record: {e.error_count()} invalid fields")
            raise
        return await self.dispatch(record)

    async def dispatch(self, record: StagingRecord) -> Optional[FanOutResult]:
        """Process one staging record. Returns the aggregate, or None when nothing was sent."""
        if not self.push_enabled:
            logger.info("Push disabled; notification %s left pending", record.id)
            return None
        if not record.is_pending:
            logger.info("Notification %s already processed (status=%s); skipping", record.id, record.status)
            return None

        # A replayed or duplicated trigger carries stale content; the claim decides
        try:
            claimed = await self.staging.claim(record.id)
        except Exception as e:
            logger.exception("Could not claim notification %s", record.id)
            await self._mark_failed(record.id, str(e))
            raise
        if not claimed:
            logger.info("Notification %s claimed elsewhere; skipping", record.id)
            return None

        if not record.tokens:
            logger.warning("Notification %s has no tokens", record.id)
            await self.staging.mark_failed(record.id, NO_TOKENS_ERROR)
            return None

        logger.info("Sending notification %s to %d devices", record.id, len(record.tokens))
        try:
            result = await self._fan_out(record)
            await self._prune(result.invalid_tokens)
            await self.staging.mark_sent(record.id, result)
        except Exception as e:
            logger.exception("Notification %s failed", record.id)
            await self._mark_failed(record.id, str(e))
            raise

        logger.info(
            "Notification %s sent: %d ok, %d failed of %d",
            record.id,
            result.success_count,
            result.failure_count,
            result.total_tokens,
        )
        return result

    async def _fan_out(self, record: StagingRecord) -> FanOutResult:
        payload = build_event_payload(
            record,
            max_body_chars=self.max_body_chars,
            channel_id=self.channel_id,
        )
        result = FanOutResult(total_tokens=len(record.tokens))
        for number, batch in enumerate(chunk_tokens(record.tokens, self.batch_size), start=1):
            try:
                response = await self.sender.send_multicast(batch, payload)
            except Exception as e:
                logger.error("Batch %d of notification %s failed (%d tokens): %s", number, record.id, len(batch), e)
                result = fold_batch_error(result, batch)
                continue
            result = fold_batch_response(result, batch, response)
            logger.info(
                "Batch %d: %d ok, %d failed",
                number,
                response.success_count,
                len(batch) - response.success_count,
            )
        return result

    async def _prune(self, invalid_tokens: tuple[str, ...]) -> None:
        """Drop rejected tokens from user accounts. Hygiene only; never fails the job."""
        if not invalid_tokens:
            return
        try:
            removed = await self.accounts.clear_token_on_accounts_with_token(list(invalid_tokens))
            logger.info("Pruned %d of %d invalid tokens", removed, len(invalid_tokens))
        except Exception:
            logger.exception("Failed to prune %d invalid tokens", len(invalid_tokens))
