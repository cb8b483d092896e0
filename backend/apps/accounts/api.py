"""
Social Accounts API Endpoints
"""
import logging
from typing import List, Optional
from ninja import Router
from api.dependencies import AuthBearer, get_backend
from .schemas import AccountDirectorySchema, ConnectUrlSchema, SocialAccountSchema
from .services import AccountService

router = Router()
logger = logging.getLogger('api')


@router.get("/", auth=AuthBearer(), response=AccountDirectorySchema)
def list_accounts(request, platform: Optional[str] = None):
    """All connected accounts, flat and grouped by platform"""
    accounts = AccountService(get_backend(request)).list_accounts()
    if platform:
        accounts = [a for a in accounts if a.platform == platform.lower()]

    return {
        "accounts": accounts,
        "grouped": AccountService.group_by_platform(accounts),
    }


@router.get("/search", auth=AuthBearer(), response=List[SocialAccountSchema])
def search_accounts(request, q: str = ""):
    accounts = AccountService(get_backend(request)).list_accounts()
    return AccountService.search(accounts, q)


@router.get("/token-status", auth=AuthBearer())
def token_status(request):
    return AccountService(get_backend(request)).token_status()


@router.get("/connect/{platform}", auth=AuthBearer(), response=ConnectUrlSchema)
def connect_url(request, platform: str):
    url = AccountService(get_backend(request)).connect_url(platform)
    return {"platform": platform.lower(), "url": url}


@router.get("/youtube/{account_id}/videos", auth=AuthBearer())
def youtube_videos(request, account_id: str):
    return AccountService(get_backend(request)).youtube_videos(account_id)


@router.get("/{account_id}", auth=AuthBearer())
def get_account(request, account_id: str):
    return AccountService(get_backend(request)).get_account(account_id)


@router.delete("/{account_id}", auth=AuthBearer())
def disconnect_account(request, account_id: str):
    AccountService(get_backend(request)).disconnect(account_id)
    return {"success": True, "message": "Account disconnected"}


@router.post("/{account_id}/refresh", auth=AuthBearer())
def refresh_account_token(request, account_id: str):
    result = AccountService(get_backend(request)).refresh(account_id)
    return {"success": True, "message": "Token refreshed", "account": result}
