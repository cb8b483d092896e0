"""
Media Library Service: every post's media in one grid
"""
import io
import logging
import os
import zipfile
from datetime import datetime, timezone as dt_timezone
from typing import Iterable, List, Tuple
from urllib.parse import urlparse

import requests
from django.conf import settings

from api.exceptions import BackendAPIError, BackendUnavailable, ValidationError
from apps.media.storage import StorageService
from apps.planner.services import CalendarPost, PlannerService

logger = logging.getLogger('media')

YOUTUBE_HOSTS = ('youtube.com', 'www.youtube.com', 'm.youtube.com', 'youtu.be')
OLDEST = datetime.min.replace(tzinfo=dt_timezone.utc)


def is_youtube_url(url: str) -> bool:
    return urlparse(url or '').netloc.lower() in YOUTUBE_HOSTS


class LibraryService:
    """Media across scheduled and GMB posts, with bulk delete and download"""

    def __init__(self, backend, storage: StorageService = None):
        self.backend = backend
        self.storage = storage or StorageService()
        self.planner = PlannerService(backend)

    def load_items(self) -> List[CalendarPost]:
        scheduled, gmb = self.planner.fetch_pair('scheduled-posts/media/all', 'gmb/posts/all')
        posts = [CalendarPost.from_scheduled(item) for item in scheduled]
        posts += [CalendarPost.from_gmb(item) for item in gmb]
        posts = [post for post in posts if post.media_url]
        posts.sort(key=lambda post: post.created_at or post.effective_at or OLDEST, reverse=True)
        return posts

    def list_items(self, platform: str = None) -> List[dict]:
        items = self.load_items()
        if platform and platform != 'all':
            items = [post for post in items if post.platform == platform.lower()]
        return [self.serialize(post) for post in items]

    def serialize(self, post: CalendarPost) -> dict:
        when = post.created_at or post.effective_at
        return {
            "id": post.id,
            "platform": post.platform,
            "media_url": post.media_url,
            "is_video": post.is_video,
            "caption": post.caption,
            "status": post.status,
            "account_id": post.account_id,
            "account_name": post.account_name,
            "location_id": post.location_id,
            "created_at": when.isoformat() if when else None,
        }

    def _select(self, ids: Iterable[str]) -> Tuple[List[CalendarPost], List[str]]:
        wanted = [str(i) for i in ids]
        if not wanted:
            raise ValidationError("Select at least one item.")
        by_id = {post.id: post for post in self.load_items()}
        found = [by_id[i] for i in wanted if i in by_id]
        missing = [i for i in wanted if i not in by_id]
        return found, missing

    def bulk_delete(self, ids: Iterable[str]) -> dict:
        """
        Delete the posts behind the selected items, one request each

        Returns:
            Success count, failed count and the ids that could not be deleted
        """
        posts, failed_ids = self._select(ids)
        deleted_count = 0

        for post in posts:
            endpoint = f"gmb/posts/{post.id}" if post.platform == 'gmb' else f"scheduled-posts/{post.id}"
            try:
                self.backend.delete(endpoint)
                deleted_count += 1
            except (BackendAPIError, BackendUnavailable) as e:
                logger.warning(f"[LIBRARY_DELETE_FAILED] {post.id}: {str(e)}")
                failed_ids.append(post.id)

        logger.info(f"[LIBRARY_DELETE] deleted={deleted_count} failed={len(failed_ids)}")
        if failed_ids:
            message = f"Deleted {deleted_count} items, {len(failed_ids)} failed"
        else:
            message = f"Deleted {deleted_count} items successfully"
        return {
            "message": message,
            "success": not failed_ids,
            "deleted_count": deleted_count,
            "failed_count": len(failed_ids),
            "failed_ids": failed_ids,
        }

    def download_plan(self, ids: Iterable[str]) -> dict:
        """
        Split a selection into files we can zip (our storage origin) and links
        the browser has to open itself (other origins, YouTube).
        """
        posts, missing = self._select(ids)
        zip_items, open_items = [], []
        for post in posts:
            if StorageService.is_storage_url(post.media_url) and not is_youtube_url(post.media_url):
                zip_items.append(self.serialize(post))
            else:
                open_items.append(self.serialize(post))
        return {"zip": zip_items, "open": open_items, "missing": missing}

    @staticmethod
    def archive_name(post: dict, taken: set) -> str:
        base = os.path.basename(urlparse(post['media_url']).path) or post['id']
        name = f"{post['platform']}-{base}"
        stem, ext = os.path.splitext(name)
        counter = 1
        while name in taken:
            name = f"{stem}-{counter}{ext}"
            counter += 1
        taken.add(name)
        return name

    def build_zip(self, ids: Iterable[str]) -> Tuple[bytes, dict]:
        """Fetch the zippable part of a selection into one archive"""
        plan = self.download_plan(ids)
        if not plan['zip']:
            raise ValidationError("None of the selected items can be downloaded as a zip.")

        zip_buffer = io.BytesIO()
        taken = set()
        skipped = []
        with zipfile.ZipFile(zip_buffer, 'w', zipfile.ZIP_DEFLATED) as zip_file:
            for item in plan['zip']:
                try:
                    response = requests.get(item['media_url'], timeout=settings.BACKEND_TIMEOUT)
                except requests.exceptions.RequestException as e:
                    logger.warning(f"[LIBRARY_ZIP_SKIP] {item['id']}: {str(e)}")
                    skipped.append(item['id'])
                    continue
                if not response.ok:
                    logger.warning(f"[LIBRARY_ZIP_SKIP] {item['id']}: HTTP {response.status_code}")
                    skipped.append(item['id'])
                    continue
                zip_file.writestr(self.archive_name(item, taken), response.content)

        plan['skipped'] = skipped
        zip_buffer.seek(0)
        return zip_buffer.read(), plan
