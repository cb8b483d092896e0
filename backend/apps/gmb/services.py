"""
Google My Business Service: locations and their posts
"""
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from api.exceptions import BackendAPIError, ValidationError
from apps.accounts.services import AccountService
from apps.planner.services import CalendarPost, items_of

logger = logging.getLogger('platforms')


@dataclass
class GmbLocation:
    id: str
    name: str
    address: Optional[str] = None
    social_account_id: Optional[str] = None
    raw: dict = field(default_factory=dict, repr=False)

    @classmethod
    def from_api(cls, data: dict, social_account_id: str = None) -> 'GmbLocation':
        return cls(
            id=str(data.get('id')),
            name=data.get('name') or data.get('title') or str(data.get('id')),
            address=data.get('address'),
            social_account_id=data.get('socialAccountId') or social_account_id,
            raw=data,
        )

    def matches(self, query: str) -> bool:
        query = (query or '').strip().lower()
        if not query:
            return True
        return query in self.name.lower() or query in (self.address or '').lower()


class GmbService:
    """Service for the backend's Google My Business endpoints"""

    def __init__(self, backend):
        self.backend = backend

    def locations(self, account_id: str, query: str = None) -> List[GmbLocation]:
        if not account_id:
            raise ValidationError("accountId is required")
        try:
            body = self.backend.get('gmb/locations', params={'accountId': account_id})
        except BackendAPIError as e:
            raise BackendAPIError(f"Failed to load locations: {str(e)}", status_code=e.status_code)
        locations = [GmbLocation.from_api(item, account_id) for item in items_of(body)]
        return [location for location in locations if location.matches(query)]

    def locations_by_account(self) -> Dict[str, List[GmbLocation]]:
        """Locations of every connected GMB account, for the composer's picker"""
        accounts = AccountService(self.backend).list_accounts()
        grouped = {}
        for account in accounts:
            if account.platform != 'gmb':
                continue
            try:
                grouped[account.id] = self.locations(account.id)
            except BackendAPIError as e:
                logger.warning(f"[GMB_LOCATIONS_FAILED] {account.id}: {str(e)}")
                grouped[account.id] = []
        return grouped

    def sync_locations(self, account_id: str) -> dict:
        try:
            result = self.backend.post_json('gmb/locations/sync', {'socialAccountId': account_id})
        except BackendAPIError as e:
            raise BackendAPIError(f"Failed to sync locations: {str(e)}", status_code=e.status_code)
        processed = 0
        if isinstance(result, dict):
            processed = result.get('processed') or 0
        logger.info(f"[GMB_SYNC] account={account_id} processed={processed}")
        return {"processed": processed, "message": f"Successfully synced {processed} locations"}

    def delete_location(self, location_id: str):
        self.backend.delete(f"gmb/locations/{location_id}")
        logger.info(f"[GMB_LOCATION_DELETE] {location_id}")

    def location_posts(self, location_id: str) -> List[CalendarPost]:
        body = self.backend.get(f"gmb/locations/{location_id}/posts")
        return [CalendarPost.from_gmb(item) for item in items_of(body)]

    def all_posts(self) -> List[CalendarPost]:
        return [CalendarPost.from_gmb(item) for item in items_of(self.backend.get('gmb/posts/all'))]

    def scheduled_posts(self) -> List[CalendarPost]:
        return [CalendarPost.from_gmb(item) for item in items_of(self.backend.get('gmb/posts/scheduled'))]

    def delete_post(self, post_id: str):
        self.backend.delete(f"gmb/posts/{post_id}")
        logger.info(f"[GMB_POST_DELETE] {post_id}")
