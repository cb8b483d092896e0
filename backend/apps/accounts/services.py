"""
Account directory: connected social accounts as the backend reports them
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from api.exceptions import BackendAPIError, ValidationError
from apps.backend_api.services import parse_api_error

logger = logging.getLogger('api')

PLATFORM_NAMES = {
    'instagram': 'Instagram',
    'facebook': 'Facebook',
    'youtube': 'YouTube',
    'gmb': 'Google My Business',
}

CONNECTABLE_PLATFORMS = ('facebook', 'instagram', 'youtube', 'gmb')


def platform_name(platform: str) -> str:
    return PLATFORM_NAMES.get(platform, platform)


@dataclass
class SocialAccount:
    """A connected account as listed by the backend"""
    id: str
    platform: str
    display_name: Optional[str] = None
    username: Optional[str] = None
    external_id: Optional[str] = None
    is_active: bool = True
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_api(cls, data: dict) -> 'SocialAccount':
        return cls(
            id=str(data.get('id')),
            platform=(data.get('platform') or 'unknown').lower(),
            display_name=data.get('displayName'),
            username=data.get('username'),
            external_id=data.get('externalId'),
            is_active=data.get('isActive', True),
            raw=data,
        )

    @property
    def label(self) -> str:
        return self.display_name or self.username or self.external_id or self.id


class AccountService:
    """Account directory operations for one session"""

    def __init__(self, backend):
        self.backend = backend

    def list_accounts(self) -> List[SocialAccount]:
        try:
            data = self.backend.get('social-accounts')
        except BackendAPIError as e:
            logger.warning(f"[ACCOUNTS_LOAD_FAILED] {str(e)}")
            raise BackendAPIError(f"Failed to load social accounts: {str(e)}", status_code=e.status_code)

        if not isinstance(data, list):
            data = data.get('data', []) if isinstance(data, dict) else []
        return [SocialAccount.from_api(item) for item in data]

    @staticmethod
    def group_by_platform(accounts: Iterable[SocialAccount]) -> Dict[str, List[SocialAccount]]:
        grouped: Dict[str, List[SocialAccount]] = {}
        for account in accounts:
            grouped.setdefault(account.platform, []).append(account)
        return grouped

    @staticmethod
    def search(accounts: Iterable[SocialAccount], query: str) -> List[SocialAccount]:
        """Case-insensitive match on name, username, external id or platform"""
        query = (query or '').strip().lower()
        if not query:
            return []

        matches = []
        for account in accounts:
            haystack = (
                account.display_name or '',
                account.username or '',
                account.external_id or '',
                account.platform or '',
            )
            if any(query in value.lower() for value in haystack):
                matches.append(account)
        return matches

    def get_account(self, account_id: str) -> dict:
        return self.backend.get(f'social-accounts/{account_id}')

    def disconnect(self, account_id: str) -> dict:
        logger.info(f"[ACCOUNT_DISCONNECT] {account_id}")
        return self.backend.delete(f'social-accounts/{account_id}')

    def refresh(self, account_id: str) -> dict:
        logger.info(f"[ACCOUNT_REFRESH] {account_id}")
        return self.backend.request(f'social-accounts/{account_id}/refresh', 'POST', json_body={})

    def token_status(self) -> list:
        data = self.backend.get('social-accounts/token-status')
        return data if isinstance(data, list) else []

    def youtube_videos(self, account_id: str) -> Any:
        return self.backend.get(f'social-accounts/youtube/{account_id}/videos')

    def connect_url(self, platform: str) -> str:
        """
        OAuth start URL for a platform. The backend answers either with a
        redirect or with JSON carrying ``url``/``redirectUrl``.
        """
        platform = platform.lower()
        if platform not in CONNECTABLE_PLATFORMS:
            raise ValidationError(f"Unsupported platform: {platform}")

        response = self.backend.raw_request(f'social-accounts/connect/{platform}', allow_redirects=False)
        if 300 <= response.status_code < 400 and response.headers.get('location'):
            return response.headers['location']

        if response.ok:
            try:
                data = response.json()
            except ValueError:
                data = {}
            url = data.get('url') or data.get('redirectUrl') if isinstance(data, dict) else None
            if url:
                return url
            raise BackendAPIError("No redirect URL received from server.")

        raise BackendAPIError(parse_api_error(response.text), status_code=response.status_code)
