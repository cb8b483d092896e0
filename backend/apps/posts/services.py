"""
Post Service: builds a draft from a request and runs the submit flow
"""
import logging
from datetime import datetime
from typing import List, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from django.utils import timezone

from api.exceptions import ValidationError
from apps.accounts.services import AccountService
from apps.media.services import MediaItem, MediaResolver
from apps.platforms.dispatcher import Dispatcher
from .composer import Draft, GmbLocationRef, MODE_PUBLISH, MODE_SCHEDULE, ensure_valid
from .status import summarize

logger = logging.getLogger('platforms')

RECENT_CONTENT_TYPES = {'photo': 'image/*', 'video': 'video/*'}


def _aware(value: Optional[datetime], timezone_name: str) -> Optional[datetime]:
    if value is None or timezone.is_aware(value):
        return value
    return timezone.make_aware(value, ZoneInfo(timezone_name))


class PostService:
    """Composer submit flow: validate, resolve media, dispatch, summarise"""

    def __init__(self, backend, resolver: MediaResolver = None):
        self.backend = backend
        self.resolver = resolver or MediaResolver()

    def build_draft(self, data, files: List[MediaItem] = None, accounts=None) -> Draft:
        """
        Apply a DraftSchema to a fresh Draft. ``files`` are the request's
        uploaded files, referenced by ``upload_index``.
        """
        if data.mode not in (MODE_PUBLISH, MODE_SCHEDULE):
            raise ValidationError(f"Unsupported mode: {data.mode}")
        try:
            ZoneInfo(data.timezone)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValidationError(f"Unknown time zone: {data.timezone}")

        if accounts is None:
            accounts = AccountService(self.backend).list_accounts()
        files = files or []

        draft = Draft(
            accounts,
            content=data.content,
            mode=data.mode,
            schedule_at=_aware(data.schedule_at, data.timezone),
            timezone_name=data.timezone,
            youtube_title=data.youtube_title,
            youtube_visibility=data.youtube_visibility,
            gmb_cta_type=data.gmb_cta_type,
            gmb_cta_url=data.gmb_cta_url,
        )

        for platform in data.platforms:
            draft.select_platform(platform)
        for account_id in data.account_ids:
            draft.select_account(account_id)
        for location in data.gmb_locations:
            draft.selection.select_gmb_location(
                GmbLocationRef(id=location.id, social_account_id=location.social_account_id, name=location.name)
            )

        items = [self._media_item(ref, files) for ref in data.media]
        if data.is_carousel:
            draft.enable_carousel()
            if items:
                draft.notice = draft.add_carousel_items(items)
        elif items:
            draft.set_media(items[0])

        return draft

    @staticmethod
    def _media_item(ref, files: List[MediaItem]) -> MediaItem:
        if ref.upload_index is not None:
            if files:
                if not 0 <= ref.upload_index < len(files):
                    raise ValidationError(f"No uploaded file at index {ref.upload_index}")
                return files[ref.upload_index]
            # validation-only requests describe the file without sending it
            return MediaItem(name=ref.name, content_type=ref.content_type or '', size=ref.size)

        if not ref.url:
            raise ValidationError(f"Media item {ref.name} has neither a file nor a URL")
        content_type = ref.content_type or RECENT_CONTENT_TYPES.get(ref.type or '', '')
        return MediaItem(name=ref.name, content_type=content_type, size=ref.size, url=ref.url)

    def submit(self, draft: Draft, now: datetime = None) -> dict:
        ensure_valid(draft, now)

        media = self.resolver.resolve(draft)
        results = Dispatcher(self.backend).dispatch(draft, media)

        success_count = sum(1 for r in results if r.success)
        fail_count = len(results) - success_count
        message = summarize(results, draft.mode, draft.schedule_at, draft.timezone_name)
        logger.info(f"[SUBMIT_DONE] {message.splitlines()[0]}")

        return {
            "success": fail_count == 0 and success_count > 0,
            "message": message,
            "success_count": success_count,
            "fail_count": fail_count,
            "results": [r.as_dict() for r in results],
        }
