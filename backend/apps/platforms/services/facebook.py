"""
Facebook Platform Service
Posts to a Facebook Page through the backend, natively scheduled when asked
"""
from .base import BasePlatformService, Destination, PublishRequest, to_iso


class FacebookService(BasePlatformService):
    """Publisher for Facebook Pages"""

    PLATFORM_NAME = "facebook"

    def build_request(self, destination: Destination, draft, media) -> PublishRequest:
        body = {
            'message': draft.content or None,
            'privacy': 'PUBLIC',
            'shareToStory': False,
        }
        if draft.is_scheduled and draft.schedule_at:
            body['scheduledPublishTime'] = to_iso(draft.schedule_at)

        if draft.is_carousel and len(media.carousel) >= 2:
            body['isCarousel'] = True
            body['carouselUrls'] = media.carousel_urls
            body['mediaType'] = 'photo'
        elif media.single_url and media.single_type:
            body['mediaUrl'] = media.single_url
            body['mediaType'] = media.single_type

        return PublishRequest(endpoint=f"facebook/post/{destination.id}", json=self.compact(body))
