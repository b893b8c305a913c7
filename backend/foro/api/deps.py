"""API dependencies."""
import asyncio
import logging
from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from firebase_admin import auth

from foro.domain.events.models import AccountRole, UserAccount
from foro.domain.events.repositories import (
    AccountRepository,
    AttendanceRepository,
    CommentRepository,
)
from foro.domain.notifications.repositories import StagingRepository
from foro.infra.push.sender import PushSender
from foro.services.event_service import EventService
from foro.services.wiring import Services

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def get_services(request: Request) -> Services:
    """Service graph built at startup (see main.lifespan)."""
    return request.app.state.services


def get_account_repo(services: Services = Depends(get_services)) -> AccountRepository:
    return services.accounts


def get_attendance_repo(services: Services = Depends(get_services)) -> AttendanceRepository:
    return services.attendances


def get_comment_repo(services: Services = Depends(get_services)) -> CommentRepository:
    return services.comments


def get_staging_repo(services: Services = Depends(get_services)) -> StagingRepository:
    return services.staging


def get_push_sender(services: Services = Depends(get_services)) -> PushSender:
    return services.sender


def get_event_service(services: Services = Depends(get_services)) -> EventService:
    return services.event_service


async def get_current_claims(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    services: Services = Depends(get_services),
) -> dict:
    """Verify the Firebase ID token and return its claims (uid, email, ...)."""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    if credentials is None:
        raise credentials_exception
    try:
        # verify_id_token may fetch signing certs over HTTP
        claims = await asyncio.to_thread(
            auth.verify_id_token, credentials.credentials, services.firebase_app
        )
    except (auth.InvalidIdTokenError, auth.CertificateFetchError, ValueError) as e:
        logger.info("Rejected ID token: %s", e)
        raise credentials_exception
    if not claims.get("uid"):
        raise credentials_exception
    return claims


async def get_current_account(
    claims: dict = Depends(get_current_claims),
    accounts: AccountRepository = Depends(get_account_repo),
) -> UserAccount:
    """Account document of the authenticated user."""
    account = await accounts.get_account(claims["uid"])
    if account is None:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account not registered",
        )
    return account


async def get_current_organizer(
    account: UserAccount = Depends(get_current_account),
) -> UserAccount:
    if account.role != AccountRole.ORGANIZADOR.value:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Organizer role required",
        )
    return account
