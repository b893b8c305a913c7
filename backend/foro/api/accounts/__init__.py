"""Accounts API."""
from fastapi import APIRouter

from foro.api.accounts import routes_accounts

router = APIRouter()

router.include_router(routes_accounts.router, prefix="/accounts", tags=["accounts"])
