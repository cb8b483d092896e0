"""
Google My Business Platform Service
One local post per selected business location
"""
from django.utils import timezone

from .base import BasePlatformService, Destination, PublishRequest, to_iso


class GmbService(BasePlatformService):
    """Publisher for Google My Business locations"""

    PLATFORM_NAME = "gmb"

    def build_request(self, destination: Destination, draft, media) -> PublishRequest:
        scheduled_at = draft.schedule_at if draft.is_scheduled and draft.schedule_at else timezone.now()
        cta_type = draft.gmb_cta_type or None

        body = {
            'locationId': destination.id,
            'content': draft.content,
            'imageUrl': media.gmb_url if media.gmb_type == 'photo' else None,
            'videoUrl': media.gmb_url if media.gmb_type == 'video' else None,
            'scheduledAt': to_iso(scheduled_at),
            'ctaType': cta_type,
            'ctaUrl': draft.gmb_cta_url if cta_type and cta_type != 'CALL' else None,
        }
        return PublishRequest(endpoint="gmb/posts", json=self.compact(body))
