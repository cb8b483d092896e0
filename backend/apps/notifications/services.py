"""
Alerts Service
Reads the backend alerts feed; the unread count is cached per user between polls
"""
import logging
from typing import Optional

from django.conf import settings
from django.core.cache import cache

logger = logging.getLogger('api')

DEFAULT_PAGE_SIZE = 4
MAX_PAGE_SIZE = 50


class AlertService:
    """Alerts feed for one session"""

    UNREAD_PREFIX = "alerts_unread:"

    def __init__(self, backend, user_id: str):
        self.backend = backend
        self.user_id = user_id

    @classmethod
    def _get_cache_key(cls, user_id: str) -> str:
        return f"{cls.UNREAD_PREFIX}{user_id}"

    def list_alerts(self, limit: int = DEFAULT_PAGE_SIZE, cursor: Optional[str] = None,
                    unread_only: bool = False) -> dict:
        """One page of alerts, newest first, with the cursor for the next page"""
        params = {'limit': max(1, min(limit, MAX_PAGE_SIZE))}
        if cursor:
            params['cursor'] = cursor
        if unread_only:
            params['unreadOnly'] = 'true'

        body = self.backend.get('alerts', params=params)
        if not isinstance(body, dict):
            body = {'alerts': body if isinstance(body, list) else []}
        return {
            "alerts": body.get('alerts') or [],
            "has_more": bool(body.get('hasMore')),
            "next_cursor": body.get('nextCursor'),
        }

    def unread_count(self) -> int:
        key = self._get_cache_key(self.user_id)
        cached = cache.get(key)
        if cached is not None:
            return cached

        body = self.backend.get('alerts/unread-count')
        count = int(body.get('count') or 0) if isinstance(body, dict) else 0
        cache.set(key, count, timeout=settings.ALERTS_POLL_INTERVAL)
        return count

    def invalidate(self):
        cache.delete(self._get_cache_key(self.user_id))

    def mark_read(self, alert_id: str):
        self.backend.put_json(f"alerts/{alert_id}/read")
        self.invalidate()

    def mark_all_read(self):
        self.backend.put_json('alerts/read-all')
        self.invalidate()
        logger.info(f"[ALERTS_READ_ALL] user={self.user_id}")

    def delete(self, alert_id: str):
        self.backend.delete(f"alerts/{alert_id}")
        self.invalidate()
