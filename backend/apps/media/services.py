"""
Media Service: size/type ceilings, storage uploads and recent uploads
"""
import io
import logging
import time
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Iterable, List, Optional, Tuple

from PIL import Image, UnidentifiedImageError
from django.conf import settings
from django.utils import timezone
from django.utils.dateparse import parse_datetime

from api.exceptions import ValidationError
from .storage import StorageService

logger = logging.getLogger('media')

VIDEO_EXTENSIONS = ('.mp4', '.mov', '.avi', '.mkv', '.webm')
PROCESSING_WINDOW = timedelta(minutes=5)

PLATFORM_LABELS = {'facebook': 'Facebook', 'instagram': 'Instagram'}

MB = 1024 * 1024


def _mb(size: int) -> str:
    return f"{size / MB:.2f}MB"


@dataclass
class MediaItem:
    """
    One piece of draft media: a local file (``content`` set) or a recent
    upload that already has a ``url``.
    """
    name: str
    content_type: str
    size: int = 0
    content: Optional[bytes] = field(default=None, repr=False)
    url: Optional[str] = None

    @property
    def is_video(self) -> bool:
        if self.content_type:
            return self.content_type.startswith('video/')
        return self.name.lower().endswith(VIDEO_EXTENSIONS)

    @property
    def is_image(self) -> bool:
        return bool(self.content_type) and self.content_type.startswith('image/')

    @property
    def media_type(self) -> str:
        return 'video' if self.is_video else 'photo'

    @property
    def is_recent(self) -> bool:
        return self.content is None and bool(self.url)

    @property
    def extension(self) -> str:
        if '.' in self.name:
            return self.name.rsplit('.', 1)[-1].lower()
        return 'bin'


@dataclass
class ResolvedMedia:
    """Public URLs for the draft's media, ready for the publishers"""
    single_url: Optional[str] = None
    single_type: Optional[str] = None
    carousel: List[Tuple[str, str]] = field(default_factory=list)
    gmb_url: Optional[str] = None
    gmb_type: Optional[str] = None

    @property
    def carousel_urls(self) -> List[str]:
        return [url for url, _ in self.carousel]

    @property
    def carousel_items(self) -> List[dict]:
        return [{"url": url, "type": media_type} for url, media_type in self.carousel]


class MediaService:
    """Validation of draft media before anything leaves the server"""

    @staticmethod
    def validate_type(item: MediaItem):
        if not (item.is_image or item.is_video):
            raise ValidationError(
                f"Unsupported file type for {item.name}: {item.content_type or 'unknown'}. "
                f"Upload an image or video."
            )

    @staticmethod
    def validate_storage_size(item: MediaItem):
        limit = settings.MAX_STORAGE_UPLOAD_SIZE
        if item.size > limit:
            limit_mb = limit // MB
            raise ValidationError(
                f"File too large: {item.name} is {_mb(item.size)}. Storage limit: {limit_mb}MB. "
                f"Compress the file to under {limit_mb}MB or upgrade the storage plan."
            )

    @staticmethod
    def validate_platform_size(item: MediaItem, platform: str):
        limits = settings.PLATFORM_MEDIA_LIMITS.get(platform)
        if not limits:
            return
        kind = 'video' if item.is_video else 'image'
        limit = limits.get(kind)
        if limit and item.size > limit:
            limit_mb = limit // MB
            raise ValidationError(
                f"{kind.capitalize()} too large: {item.name} is {_mb(item.size)}. "
                f"{PLATFORM_LABELS.get(platform, platform)} limit: {limit_mb}MB. "
                f"Compress the {kind} to under {limit_mb}MB."
            )

    @staticmethod
    def inspect_image(item: MediaItem) -> Tuple[int, int]:
        """Open a local image with Pillow; returns (width, height)"""
        try:
            with Image.open(io.BytesIO(item.content)) as img:
                width, height = img.size
                img.verify()
        except (UnidentifiedImageError, OSError, SyntaxError) as e:
            raise ValidationError(f"Invalid image file: {item.name} ({str(e)})")
        return width, height

    @staticmethod
    def check(items: Iterable[MediaItem], platforms: Iterable[str], stored: bool) -> List[str]:
        """
        All ceiling and type problems for the given items, in order.
        ``stored`` is whether local files will be written to object storage.
        """
        platforms = list(platforms)
        errors = []
        for item in items:
            try:
                MediaService.validate_type(item)
                if stored and not item.is_recent:
                    MediaService.validate_storage_size(item)
                for platform in platforms:
                    MediaService.validate_platform_size(item, platform)
                if item.is_image and item.content is not None:
                    MediaService.inspect_image(item)
            except ValidationError as e:
                errors.append(str(e))
        return errors


class MediaResolver:
    """Turns draft media into public URLs, uploading local files once"""

    def __init__(self, storage: StorageService = None):
        self.storage = storage or StorageService()

    @staticmethod
    def bucket_for(platforms: Iterable[str]) -> str:
        first = next((p for p in platforms if p in ('facebook', 'instagram')), 'instagram')
        return settings.STORAGE_BUCKETS[first]

    @staticmethod
    def object_name(item: MediaItem, index: int = None) -> str:
        stamp = int(time.time() * 1000)
        suffix = uuid.uuid4().hex[:7]
        if index is None:
            return f"{stamp}-{suffix}.{item.extension}"
        return f"{stamp}-{index}-{suffix}.{item.extension}"

    def _store(self, item: MediaItem, bucket: str, path: str) -> str:
        if item.is_recent:
            logger.info(f"[MEDIA_REUSE] {item.name} -> {item.url}")
            return item.url
        return self.storage.upload(bucket, path, item.content, item.content_type, name=item.name)

    def resolve(self, draft) -> ResolvedMedia:
        """
        Upload what the draft's destinations need. Facebook/Instagram accounts
        share one upload per file; GMB locations get their own copy in the
        Google bucket. A YouTube-only draft uploads nothing.
        """
        selection = draft.selection
        account_platforms = [p for p in selection.account_platforms if p in ('facebook', 'instagram')]
        items = draft.media_items
        resolved = ResolvedMedia()

        errors = MediaService.check(items, account_platforms, stored=bool(account_platforms))
        if selection.gmb_locations and not account_platforms:
            errors += MediaService.check(items[:1], [], stored=True)
        if errors:
            raise ValidationError(errors[0], errors)

        if account_platforms and items:
            bucket = self.bucket_for(account_platforms)
            owner = next(a.id for a in selection.selected_accounts if a.platform in account_platforms)
            if draft.is_carousel:
                for index, item in enumerate(items):
                    url = self._store(item, bucket, f"{owner}/{self.object_name(item, index)}")
                    resolved.carousel.append((url, item.media_type))
            else:
                item = items[0]
                resolved.single_url = self._store(item, bucket, f"{owner}/{self.object_name(item, 0)}")
                resolved.single_type = item.media_type

        if selection.gmb_locations and items:
            item = items[0]
            location = next(iter(selection.gmb_locations.values()))
            prefix = f"{location.social_account_id}/{location.id}" if location.social_account_id else "gmb"
            resolved.gmb_url = self._store(
                item, settings.STORAGE_BUCKETS['gmb'], f"{prefix}/{self.object_name(item)}"
            )
            resolved.gmb_type = item.media_type
            if not resolved.single_url and not resolved.carousel:
                resolved.single_url, resolved.single_type = resolved.gmb_url, resolved.gmb_type

        return resolved

    def list_recent(self, platform: str, account_id: str, page: int = 0, now: datetime = None) -> dict:
        """One page of an account's uploads, newest first"""
        bucket = settings.STORAGE_BUCKETS.get(platform)
        if not bucket:
            raise ValidationError(f"No media bucket for platform: {platform}")

        page_size = settings.RECENT_UPLOADS_PAGE_SIZE
        now = now or timezone.now()
        files = self.storage.list(bucket, account_id, limit=page_size, offset=page * page_size)

        items = []
        for entry in files:
            name = entry.get('name') or ''
            path = f"{account_id}/{name}"
            metadata = entry.get('metadata') or {}
            mimetype = metadata.get('mimetype') or ''
            is_video = name.lower().endswith(VIDEO_EXTENSIONS) or mimetype.startswith('video/')

            created = entry.get('created_at') or entry.get('updated_at') or ''
            created_at = parse_datetime(created) if created else None
            processing = bool(is_video and created_at and now - created_at < PROCESSING_WINDOW)

            items.append({
                "name": name,
                "url": self.storage.signed_url(bucket, path),
                "type": 'video' if is_video else 'photo',
                "size": metadata.get('size') or 0,
                "created": created,
                "status": 'processing' if processing else 'ready',
            })

        return {
            "items": items,
            "page": page,
            "has_more": len(files) >= page_size,
        }
