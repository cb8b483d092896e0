"""
Instagram Platform Service
Immediate posts go straight to the backend; scheduled ones join its queue
"""
import json

from .base import BasePlatformService, Destination, PublishRequest, to_iso

SCHEDULE_ENDPOINT = "scheduled-posts"


class InstagramService(BasePlatformService):
    """Publisher for Instagram business accounts"""

    PLATFORM_NAME = "instagram"

    def build_request(self, destination: Destination, draft, media) -> PublishRequest:
        if draft.is_scheduled and draft.schedule_at:
            return self._scheduled(destination, draft, media)

        body = {'caption': draft.content or None}
        if draft.is_carousel and len(media.carousel) >= 2:
            body['mediaType'] = 'carousel'
            body['carouselItems'] = media.carousel_items
        elif media.single_url and media.single_type:
            body['mediaUrl'] = media.single_url
            body['mediaType'] = media.single_type

        return PublishRequest(endpoint=f"instagram/post/{destination.id}", json=self.compact(body))

    def _scheduled(self, destination: Destination, draft, media) -> PublishRequest:
        form = {
            'platform': self.PLATFORM_NAME,
            'content': draft.content,
            'scheduledAt': to_iso(draft.schedule_at),
            'socialAccountId': destination.id,
            'timezone': draft.timezone_name,
        }
        if draft.is_carousel and len(media.carousel) >= 2:
            # first item doubles as the cover for older readers of mediaUrl
            form['mediaUrl'] = media.carousel_urls[0]
            form['carouselUrls'] = json.dumps(media.carousel_urls)
            form['carouselItems'] = json.dumps(media.carousel_items)
        elif media.single_url:
            form['mediaUrl'] = media.single_url

        return PublishRequest(endpoint=SCHEDULE_ENDPOINT, form=form)
