"""
Composer: a draft post, the destinations it goes to and its media
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Iterable, List, Optional

from django.conf import settings
from django.utils import timezone

from api.exceptions import ValidationError
from apps.accounts.services import SocialAccount
from apps.media.services import MediaItem, MediaService

MODE_PUBLISH = 'publish'
MODE_SCHEDULE = 'schedule'

CAROUSEL_PLATFORMS = ('instagram', 'facebook')
YOUTUBE_VISIBILITIES = ('public', 'unlisted', 'private')
GMB_CTA_TYPES = ('LEARN_MORE', 'BOOK', 'ORDER', 'BUY', 'SIGN_UP', 'CALL')

NO_DESTINATION = "Please select at least one destination (account or GMB location)."
NO_CONTENT = "Please enter description/content."
NO_SCHEDULE_TIME = "Please select a scheduled time."
SCHEDULE_IN_PAST = "Scheduled time must be in the future."
YOUTUBE_NEEDS_VIDEO = "When YouTube is selected, you must upload a video file."
YOUTUBE_NEEDS_TITLE = "YouTube title is required."
YOUTUBE_NEEDS_LOCAL_VIDEO = "YouTube needs the video file itself. Upload it from this device instead of picking a recent upload."
CAROUSEL_TOO_SHORT = "Carousel posts require at least 2 images."
MEDIA_REQUIRED = "Please upload an image or video."
CTA_URL_REQUIRED = "Please enter a URL for the call-to-action button."


@dataclass
class GmbLocationRef:
    id: str
    social_account_id: Optional[str] = None
    name: Optional[str] = None

    @property
    def label(self) -> str:
        return self.name or self.id


class Selection:
    """
    Selected accounts, GMB locations and platforms.

    Platforms are derived: every platform of a selected account counts as
    selected, plus the platforms the user opened explicitly. Deselecting a
    platform drops every account on it.
    """

    def __init__(self, accounts: Iterable[SocialAccount]):
        self.accounts: Dict[str, SocialAccount] = {a.id: a for a in accounts}
        self._account_ids: Dict[str, None] = {}
        self._explicit_platforms: Dict[str, None] = {}
        self.gmb_locations: Dict[str, GmbLocationRef] = {}

    def select_account(self, account_id: str):
        account = self.accounts.get(account_id)
        if account is None:
            raise ValidationError(f"Unknown account: {account_id}")
        if account.platform == 'gmb':
            raise ValidationError("Select a Google My Business location instead of the account.")
        self._account_ids[account_id] = None

    def deselect_account(self, account_id: str):
        self._account_ids.pop(account_id, None)

    def toggle_account(self, account_id: str):
        if account_id in self._account_ids:
            self.deselect_account(account_id)
        else:
            self.select_account(account_id)

    def select_platform(self, platform: str):
        self._explicit_platforms[platform.lower()] = None

    def deselect_platform(self, platform: str):
        platform = platform.lower()
        self._explicit_platforms.pop(platform, None)
        for account_id in list(self._account_ids):
            if self.accounts[account_id].platform == platform:
                del self._account_ids[account_id]
        if platform == 'gmb':
            self.gmb_locations.clear()

    def select_gmb_location(self, location: GmbLocationRef):
        self.gmb_locations[location.id] = location

    def deselect_gmb_location(self, location_id: str):
        self.gmb_locations.pop(location_id, None)

    def preselect(self, account_ids: Iterable[str] = (), gmb_location_ids: Iterable[str] = ()):
        """Apply a deep-link selection; unknown account ids are skipped"""
        for account_id in account_ids:
            if account_id in self.accounts and self.accounts[account_id].platform != 'gmb':
                self._account_ids[account_id] = None
        for location_id in gmb_location_ids:
            self.gmb_locations.setdefault(location_id, GmbLocationRef(id=location_id))

    @property
    def account_ids(self) -> List[str]:
        return list(self._account_ids)

    @property
    def selected_accounts(self) -> List[SocialAccount]:
        return [self.accounts[account_id] for account_id in self._account_ids]

    @property
    def account_platforms(self) -> List[str]:
        """Platforms of the selected accounts, in selection order"""
        return list(dict.fromkeys(a.platform for a in self.selected_accounts))

    @property
    def platforms(self) -> List[str]:
        platforms = dict.fromkeys(self._explicit_platforms)
        platforms.update(dict.fromkeys(self.account_platforms))
        if self.gmb_locations:
            platforms['gmb'] = None
        return list(platforms)

    @property
    def has_youtube(self) -> bool:
        return 'youtube' in self.account_platforms

    @property
    def destination_count(self) -> int:
        return len(self._account_ids) + len(self.gmb_locations)


class Draft:
    """A post being composed, with single or carousel media but never both"""

    def __init__(self, accounts: Iterable[SocialAccount], content: str = '', mode: str = MODE_PUBLISH,
                 schedule_at: datetime = None, timezone_name: str = 'UTC',
                 youtube_title: str = '', youtube_visibility: str = 'public',
                 gmb_cta_type: str = None, gmb_cta_url: str = None):
        self.selection = Selection(accounts)
        self.content = content
        self.mode = mode
        self.schedule_at = schedule_at
        self.timezone_name = timezone_name
        self.youtube_title = youtube_title
        self.youtube_visibility = youtube_visibility
        self.gmb_cta_type = gmb_cta_type or None
        self.gmb_cta_url = gmb_cta_url
        self.media: Optional[MediaItem] = None
        self.carousel: List[MediaItem] = []
        self.is_carousel = False
        self.notice: Optional[str] = None

    @property
    def is_scheduled(self) -> bool:
        return self.mode == MODE_SCHEDULE

    # Selection changes re-apply the media rules of the new platform set

    def select_account(self, account_id: str):
        self.selection.select_account(account_id)
        self._apply_platform_rules()

    def deselect_account(self, account_id: str):
        self.selection.deselect_account(account_id)
        self._apply_platform_rules()

    def select_platform(self, platform: str):
        self.selection.select_platform(platform)
        self._apply_platform_rules()

    def deselect_platform(self, platform: str):
        self.selection.deselect_platform(platform)
        self._apply_platform_rules()

    def _apply_platform_rules(self):
        if self.selection.has_youtube:
            if self.is_carousel:
                self.disable_carousel()
            if self.media is not None and not self.media.is_video:
                self.media = None
        elif self.is_carousel and not self.carousel_available:
            self.disable_carousel()
        if self.is_carousel and self.carousel_images_only:
            self.carousel = [item for item in self.carousel if item.is_image]

    # Media

    @property
    def carousel_available(self) -> bool:
        platforms = self.selection.account_platforms
        return any(p in platforms for p in CAROUSEL_PLATFORMS) and 'youtube' not in platforms

    @property
    def carousel_images_only(self) -> bool:
        return 'facebook' in self.selection.account_platforms

    @property
    def accepts(self) -> str:
        """Media kinds the composer takes right now"""
        if self.selection.has_youtube:
            return 'video/*'
        if self.is_carousel and self.carousel_images_only:
            return 'image/*'
        return 'image/*,video/*'

    @property
    def media_items(self) -> List[MediaItem]:
        if self.is_carousel:
            return list(self.carousel)
        return [self.media] if self.media is not None else []

    @property
    def media_type(self) -> Optional[str]:
        items = self.media_items
        if not items:
            return None
        return 'video' if any(item.is_video for item in items) else 'photo'

    def set_media(self, item: MediaItem):
        """Single-media mode: replaces any carousel"""
        if self.selection.has_youtube and not item.is_video:
            raise ValidationError("YouTube requires a video file.")
        MediaService.validate_type(item)
        self.carousel = []
        self.is_carousel = False
        self.media = item

    def clear_media(self):
        self.media = None

    def enable_carousel(self):
        if not self.carousel_available:
            raise ValidationError("Carousel is only available for Instagram and Facebook without YouTube.")
        self.is_carousel = True
        self.media = None

    def disable_carousel(self):
        self.is_carousel = False
        self.carousel = []

    def add_carousel_items(self, items: Iterable[MediaItem]) -> Optional[str]:
        """
        Append items up to the carousel maximum. Returns a notice when some
        were dropped.
        """
        if not self.is_carousel:
            self.enable_carousel()

        items = list(items)
        if self.carousel_images_only:
            accepted = [item for item in items if item.is_image]
            if not accepted:
                raise ValidationError("Carousel accepts only images (Facebook).")
        else:
            accepted = [item for item in items if item.is_image or item.is_video]
            if not accepted:
                raise ValidationError("Add at least one image or video.")

        room = max(0, settings.MAX_CAROUSEL_ITEMS - len(self.carousel))
        if room == 0:
            raise ValidationError(f"Carousel already has {settings.MAX_CAROUSEL_ITEMS} items (max).")

        to_add = accepted[:room]
        self.carousel.extend(to_add)
        if len(to_add) < len(accepted):
            return f"Added {len(to_add)} of {len(accepted)} (max {settings.MAX_CAROUSEL_ITEMS} total)."
        return None

    def remove_carousel_item(self, index: int):
        if 0 <= index < len(self.carousel):
            del self.carousel[index]


def validate_draft(draft: Draft, now: datetime = None) -> List[str]:
    """Every reason the draft cannot be submitted yet, most important first"""
    now = now or timezone.now()
    selection = draft.selection
    errors = []

    if selection.destination_count == 0:
        errors.append(NO_DESTINATION)

    if not (draft.content or '').strip():
        errors.append(NO_CONTENT)

    if draft.is_scheduled:
        if draft.schedule_at is None:
            errors.append(NO_SCHEDULE_TIME)
        elif draft.schedule_at <= now:
            errors.append(SCHEDULE_IN_PAST)

    account_platforms = selection.account_platforms
    if account_platforms:
        if selection.has_youtube:
            if draft.media is None or not draft.media.is_video:
                errors.append(YOUTUBE_NEEDS_VIDEO)
            elif draft.media.content is None:
                errors.append(YOUTUBE_NEEDS_LOCAL_VIDEO)
            if not (draft.youtube_title or '').strip():
                errors.append(YOUTUBE_NEEDS_TITLE)
            if draft.youtube_visibility not in YOUTUBE_VISIBILITIES:
                errors.append("YouTube visibility must be public, unlisted or private.")
        elif draft.is_carousel:
            if len(draft.carousel) < 2:
                errors.append(CAROUSEL_TOO_SHORT)
        elif 'instagram' in account_platforms and draft.media is None:
            errors.append(MEDIA_REQUIRED)

    if selection.gmb_locations and draft.gmb_cta_type:
        if draft.gmb_cta_type not in GMB_CTA_TYPES:
            errors.append(f"Unsupported call-to-action: {draft.gmb_cta_type}")
        elif draft.gmb_cta_type != 'CALL' and not (draft.gmb_cta_url or '').strip():
            errors.append(CTA_URL_REQUIRED)

    stored_platforms = [p for p in account_platforms if p in CAROUSEL_PLATFORMS]
    stored = bool(stored_platforms) or bool(selection.gmb_locations)
    errors += MediaService.check(draft.media_items, stored_platforms, stored=stored)

    return errors


def ensure_valid(draft: Draft, now: datetime = None):
    errors = validate_draft(draft, now)
    if errors:
        raise ValidationError(errors[0], errors)
