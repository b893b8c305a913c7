"""Account API routes: registration, profile, device token."""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, status
from pydantic import Field

from foro.api.deps import get_account_repo, get_current_account, get_current_claims
from foro.domain.events.models import AccountRole, CamelModel, UserAccount
from foro.domain.events.repositories import AccountRepository

logger = logging.getLogger(__name__)

router = APIRouter()


class AccountCreateRequest(CamelModel):
    """Register the authenticated user's account document."""
    role: AccountRole = AccountRole.USUARIO


class ProfileUpdateRequest(CamelModel):
    display_name: Optional[str] = None
    phone: Optional[str] = None
    bio: Optional[str] = None
    photo_url: Optional[str] = None


class DeviceTokenRequest(CamelModel):
    fcm_token: str = Field(min_length=1)


@router.post("/me", response_model=UserAccount, status_code=status.HTTP_201_CREATED)
async def register_account(
    request: AccountCreateRequest,
    claims: dict = Depends(get_current_claims),
    accounts: AccountRepository = Depends(get_account_repo),
):
    """Create (or merge into) the account document for the token's subject."""
    return await accounts.create_account(claims["uid"], claims.get("email") or "", request.role)


@router.get("/me", response_model=UserAccount)
async def get_profile(current_account: UserAccount = Depends(get_current_account)):
    return current_account


@router.patch("/me", response_model=UserAccount)
async def update_profile(
    request: ProfileUpdateRequest,
    current_account: UserAccount = Depends(get_current_account),
    accounts: AccountRepository = Depends(get_account_repo),
):
    """Update profile fields; omitted fields keep their value."""
    await accounts.update_profile(
        current_account.id,
        display_name=request.display_name,
        phone=request.phone,
        bio=request.bio,
    )
    if request.photo_url is not None:
        await accounts.update_photo_url(current_account.id, request.photo_url)
    return await accounts.get_account(current_account.id)


@router.put("/me/token")
async def register_device_token(
    request: DeviceTokenRequest,
    current_account: UserAccount = Depends(get_current_account),
    accounts: AccountRepository = Depends(get_account_repo),
):
    """Store the device's current push token, replacing any previous one."""
    await accounts.save_token(current_account.id, request.fcm_token.strip())
    return {"ok": True}
