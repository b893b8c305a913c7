"""Notification API routes."""
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel

from foro.api.deps import (
    get_account_repo,
    get_current_organizer,
    get_push_sender,
    get_staging_repo,
)
from foro.domain.events.models import AccountRole, UserAccount
from foro.domain.events.repositories import AccountRepository
from foro.domain.notifications.models import StagingRecord
from foro.domain.notifications.payload import build_test_payload
from foro.domain.notifications.repositories import StagingRepository
from foro.infra.push.sender import PushSender
from foro.settings import settings

logger = logging.getLogger(__name__)

router = APIRouter()


class TestNotificationResponse(BaseModel):
    """Outcome of a manual test send."""
    success: bool
    sent: int
    failed: int
    total: int


@router.post("/test", response_model=TestNotificationResponse)
async def send_test_notification(
    _: UserAccount = Depends(get_current_organizer),
    accounts: AccountRepository = Depends(get_account_repo),
    sender: PushSender = Depends(get_push_sender),
):
    """Send a fixed test push to a handful of attendee devices."""
    if not settings.push_enabled:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Push disabled")
    try:
        recipients = await accounts.find_accounts_with_token(
            AccountRole.USUARIO.value, settings.test_notification_limit
        )
        tokens = [a.fcm_token for a in recipients if a.fcm_token]
        if not tokens:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No tokens available")
        result = await sender.send_multicast(tokens, build_test_payload())
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Test notification failed")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))
    return TestNotificationResponse(
        success=True,
        sent=result.success_count,
        failed=result.failure_count,
        total=len(tokens),
    )


@router.get("/staging/{record_id}", response_model=StagingRecord)
async def get_staging_record(
    record_id: str,
    _: UserAccount = Depends(get_current_organizer),
    staging: StagingRepository = Depends(get_staging_repo),
):
    """Inspect a staged notification and its delivery counts."""
    record = await staging.get(record_id)
    if record is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Notification not found")
    return record
