"""
YouTube Platform Service
Uploads the draft's video file itself; YouTube schedules with publishAt
"""
from api.exceptions import ValidationError

from .base import BasePlatformService, Destination, PublishRequest, to_iso


class YouTubeService(BasePlatformService):
    """Publisher for YouTube channels"""

    PLATFORM_NAME = "youtube"

    def build_request(self, destination: Destination, draft, media) -> PublishRequest:
        video = draft.media
        if video is None or not video.is_video or video.content is None:
            raise ValidationError("video file required")

        form = {
            'title': draft.youtube_title,
            'description': draft.content or '',
            'privacyStatus': draft.youtube_visibility,
            'categoryId': '22',
            'madeForKids': 'false',
            'tags': '',
            'language': 'en',
            'license': 'youtube',
            'commentsEnabled': 'true',
            'ageRestricted': 'false',
            'socialAccountId': destination.id,
        }
        if draft.is_scheduled and draft.schedule_at:
            form['publishAt'] = to_iso(draft.schedule_at)

        files = [('video', (video.name, video.content, video.content_type))]
        return PublishRequest(endpoint=f"youtube/upload/{destination.id}", form=form, files=files)
