"""
Planner Service: calendar month grid, day view and upcoming posts
"""
import calendar
import json
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone as dt_timezone
from typing import List, Optional, Tuple
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from django.utils import timezone
from django.utils.dateparse import parse_datetime

from api.exceptions import BackendAPIError, BackendUnavailable, NotFound, ValidationError
from apps.media.services import VIDEO_EXTENSIONS
from apps.platforms.services.base import to_iso
from apps.posts.composer import SCHEDULE_IN_PAST

logger = logging.getLogger('planner')

CALENDAR_PLATFORMS = ('instagram', 'facebook', 'youtube', 'gmb')
SCHEDULED_STATUSES = ('scheduled', 'pending')
POSTED_STATUSES = ('posted', 'success')
GMB_CAPTION_LENGTH = 80

RESCHEDULE_UNAVAILABLE = (
    "Reschedule is only available for Instagram posts scheduled through the app. "
    "Facebook and YouTube posts are scheduled natively and cannot be rescheduled here."
)
CANCEL_UNAVAILABLE = "Cancel is only available for Instagram posts queued through the app."
YOUTUBE_DELETE_REFUSED = (
    "YouTube scheduled posts cannot be deleted. They are already uploaded and scheduled on "
    "YouTube. You can delete them directly from YouTube Studio."
)


def parse_timestamp(value) -> Optional[datetime]:
    """Backend timestamp to an aware datetime; None when missing or unreadable"""
    if not value:
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        try:
            parsed = parse_datetime(str(value))
        except ValueError:
            return None
        if parsed is None:
            return None
    if timezone.is_naive(parsed):
        parsed = timezone.make_aware(parsed, dt_timezone.utc)
    return parsed


def get_zone(timezone_name: str) -> ZoneInfo:
    try:
        return ZoneInfo(timezone_name or 'UTC')
    except (ZoneInfoNotFoundError, ValueError):
        raise ValidationError(f"Unknown time zone: {timezone_name}")


def clock(value: datetime) -> str:
    """'3:05 PM'"""
    hour = value.hour % 12 or 12
    return f"{hour}:{value:%M} {value:%p}"


@dataclass
class CalendarPost:
    """A scheduled or GMB post as the planner and library see it"""
    id: str
    platform: str
    content: str = ''
    status: str = 'scheduled'
    scheduled_at: Optional[datetime] = None
    posted_at: Optional[datetime] = None
    media_url: Optional[str] = None
    permalink: Optional[str] = None
    account_id: Optional[str] = None
    account_name: Optional[str] = None
    location_id: Optional[str] = None
    created_at: Optional[datetime] = None
    raw: dict = field(default_factory=dict, repr=False)

    @classmethod
    def from_scheduled(cls, data: dict) -> 'CalendarPost':
        account = data.get('socialAccount') or {}
        return cls(
            id=str(data.get('id')),
            platform=(data.get('platform') or 'instagram').lower(),
            content=data.get('content') or data.get('caption') or '',
            status=(data.get('status') or 'scheduled').lower(),
            scheduled_at=parse_timestamp(data.get('scheduledAt')),
            posted_at=parse_timestamp(data.get('postedAt')),
            media_url=data.get('mediaUrl'),
            permalink=data.get('permalink'),
            account_id=data.get('socialAccountId') or account.get('id') or data.get('accountId'),
            account_name=account.get('displayName') or account.get('username') or data.get('accountName'),
            created_at=parse_timestamp(data.get('createdAt')),
            raw=data,
        )

    @classmethod
    def from_gmb(cls, data: dict) -> 'CalendarPost':
        location = data.get('location') or {}
        return cls(
            id=str(data.get('id')),
            platform='gmb',
            content=data.get('content') or '',
            status=(data.get('status') or 'scheduled').lower(),
            scheduled_at=parse_timestamp(data.get('scheduledAt')),
            posted_at=parse_timestamp(data.get('postedAt')),
            media_url=data.get('imageUrl') or data.get('videoUrl'),
            permalink=data.get('searchUrl') or data.get('permalink'),
            account_id=location.get('socialAccountId'),
            account_name=location.get('name') or location.get('title'),
            location_id=data.get('locationId'),
            created_at=parse_timestamp(data.get('createdAt')),
            raw=data,
        )

    @property
    def effective_at(self) -> Optional[datetime]:
        return self.posted_at or self.scheduled_at

    @property
    def is_posted(self) -> bool:
        return self.status in POSTED_STATUSES or self.posted_at is not None

    @property
    def is_video(self) -> bool:
        if self.platform == 'youtube' or self.raw.get('videoUrl'):
            return True
        return bool(self.media_url) and self.media_url.split('?')[0].lower().endswith(VIDEO_EXTENSIONS)

    @property
    def caption(self) -> str:
        if self.platform == 'youtube':
            try:
                video = json.loads(self.content)
            except ValueError:
                video = None
            if isinstance(video, dict):
                return video.get('title') or video.get('description') or "YouTube Video"
        if self.platform == 'gmb':
            if not self.content:
                return "GMB post"
            if len(self.content) > GMB_CAPTION_LENGTH:
                return self.content[:GMB_CAPTION_LENGTH] + "…"
            return self.content
        return self.content or "No caption"

    def display_status(self, now: datetime) -> str:
        """Pending jobs and natively scheduled YouTube uploads both show as scheduled"""
        if self.status == 'pending':
            return 'scheduled'
        if self.platform == 'youtube' and self.status == 'success' \
                and self.scheduled_at and self.scheduled_at > now:
            return 'scheduled'
        return self.status


def items_of(body) -> list:
    """Backend list responses come bare or wrapped in ``data``/``posts``"""
    if isinstance(body, list):
        return body
    if isinstance(body, dict):
        for key in ('data', 'posts', 'items'):
            if isinstance(body.get(key), list):
                return body[key]
    return []


class PlannerService:
    """Calendar views over the caller's scheduled and GMB posts"""

    def __init__(self, backend, timezone_name: str = 'UTC', now: datetime = None):
        self.backend = backend
        self.zone = get_zone(timezone_name)
        self.now = now or timezone.now()

    @property
    def today(self) -> date:
        return self.local_date(self.now)

    def local_date(self, value: datetime) -> date:
        return value.astimezone(self.zone).date()

    # Loading

    def _fetch(self, endpoint: str) -> Tuple[list, Optional[Exception]]:
        try:
            return items_of(self.backend.get(endpoint)), None
        except (BackendAPIError, BackendUnavailable) as e:
            logger.warning(f"[PLANNER_FETCH_FAILED] {endpoint}: {str(e)}")
            return [], e

    def fetch_pair(self, scheduled_endpoint: str, gmb_endpoint: str) -> Tuple[list, list]:
        """
        Both sources at once. One failing source leaves its half empty; the
        error is raised only when neither could be read.
        """
        with ThreadPoolExecutor(max_workers=2) as executor:
            scheduled_future = executor.submit(self._fetch, scheduled_endpoint)
            gmb_future = executor.submit(self._fetch, gmb_endpoint)
            scheduled, scheduled_error = scheduled_future.result()
            gmb, gmb_error = gmb_future.result()

        if scheduled_error and gmb_error:
            raise scheduled_error
        return scheduled, gmb

    def load_posts(self) -> List[CalendarPost]:
        scheduled, gmb = self.fetch_pair('scheduled-posts', 'gmb/posts/all')
        posts = [CalendarPost.from_scheduled(item) for item in scheduled]
        posts += [CalendarPost.from_gmb(item) for item in gmb]
        logger.info(f"[PLANNER_LOAD] {len(scheduled)} scheduled, {len(gmb)} GMB")
        return posts

    def find_post(self, post_id: str) -> CalendarPost:
        for post in self.load_posts():
            if post.id == str(post_id):
                return post
        raise NotFound("Post not found")

    # Views

    def visible_on(self, post: CalendarPost, day: date) -> bool:
        """Past days stay empty; posts already out on a past day are dropped"""
        effective = post.effective_at
        if effective is None or day < self.today:
            return False
        if post.posted_at and self.local_date(post.posted_at) < self.today:
            return False
        return self.local_date(effective) == day

    def posts_on(self, day: date, posts: List[CalendarPost]) -> List[CalendarPost]:
        day_posts = [post for post in posts if self.visible_on(post, day)]
        return sorted(day_posts, key=lambda post: post.effective_at)

    def day_cell(self, day: date, posts: List[CalendarPost]) -> dict:
        day_posts = self.posts_on(day, posts)
        counts = dict.fromkeys(CALENDAR_PLATFORMS, 0)
        for post in day_posts:
            if post.platform in counts:
                counts[post.platform] += 1
        counts['total'] = len(day_posts)
        return {
            "date": day.isoformat(),
            "day": day.day,
            "counts": counts,
            "is_today": day == self.today,
            "is_past": day < self.today,
        }

    def month(self, year: int = None, month: int = None, posts: List[CalendarPost] = None) -> dict:
        """Sunday-first month grid; days outside the month are None"""
        year = year or self.today.year
        month = month or self.today.month
        if not 1 <= month <= 12:
            raise ValidationError("Month must be between 1 and 12.")
        if posts is None:
            posts = self.load_posts()

        weeks = []
        for week in calendar.Calendar(firstweekday=6).monthdayscalendar(year, month):
            weeks.append([
                self.day_cell(date(year, month, number), posts) if number else None
                for number in week
            ])

        return {
            "year": year,
            "month": month,
            "title": f"{calendar.month_name[month]} {year}",
            "today": self.today.isoformat(),
            "weeks": weeks,
        }

    def day(self, day: date, platform: str = None, status: str = None,
            posts: List[CalendarPost] = None) -> dict:
        if posts is None:
            posts = self.load_posts()
        day_posts = self.posts_on(day, posts)

        if platform and platform != 'all':
            day_posts = [post for post in day_posts if post.platform == platform.lower()]
        if status and status != 'all':
            status = status.lower()
            day_posts = [
                post for post in day_posts
                if post.status == status or post.display_status(self.now) == status
            ]

        return {
            "date": day.isoformat(),
            "is_today": day == self.today,
            "is_past": day < self.today,
            "posts": [self.serialize(post) for post in day_posts],
        }

    def time_label(self, value: datetime) -> str:
        """'Today, 3:05 PM', 'Tomorrow, 9:00 AM' or 'Mar 5, 3:05 PM'"""
        local = value.astimezone(self.zone)
        if local.date() == self.today:
            return f"Today, {clock(local)}"
        if local.date() == self.today + timedelta(days=1):
            return f"Tomorrow, {clock(local)}"
        if local.year != self.today.year:
            return f"{local:%b} {local.day}, {local.year}, {clock(local)}"
        return f"{local:%b} {local.day}, {clock(local)}"

    def serialize(self, post: CalendarPost) -> dict:
        when = post.effective_at
        return {
            "id": post.id,
            "platform": post.platform,
            "caption": post.caption,
            "content": post.content,
            "status": post.display_status(self.now),
            "raw_status": post.status,
            "is_posted": post.is_posted,
            "media_url": post.media_url,
            "is_video": post.is_video,
            "permalink": post.permalink,
            "scheduled_at": to_iso(post.scheduled_at) if post.scheduled_at else None,
            "posted_at": to_iso(post.posted_at) if post.posted_at else None,
            "time_label": self.time_label(when) if when else None,
            "account_id": post.account_id,
            "account_name": post.account_name,
            "location_id": post.location_id,
        }

    def is_upcoming(self, post: CalendarPost) -> bool:
        if post.scheduled_at is None or post.scheduled_at <= self.now:
            return False
        if post.platform == 'gmb':
            return True
        return post.status in SCHEDULED_STATUSES or (post.platform == 'youtube' and post.status == 'success')

    def upcoming(self, platform: str = None) -> List[dict]:
        """Future posts, earliest first"""
        scheduled, gmb = self.fetch_pair('scheduled-posts', 'gmb/posts/scheduled')

        unique = {}
        for item in scheduled:
            post = CalendarPost.from_scheduled(item)
            unique.setdefault(post.id, post)
        posts = list(unique.values()) + [CalendarPost.from_gmb(item) for item in gmb]

        posts = [post for post in posts if self.is_upcoming(post)]
        if platform and platform != 'all':
            posts = [post for post in posts if post.platform == platform.lower()]
        posts.sort(key=lambda post: post.scheduled_at)
        return [self.serialize(post) for post in posts]

    # Actions

    def reschedule(self, post_id: str, scheduled_at: datetime) -> dict:
        post = self.find_post(post_id)
        if post.platform != 'instagram' or post.status != 'pending':
            raise ValidationError(RESCHEDULE_UNAVAILABLE)

        scheduled_at = parse_timestamp(scheduled_at)
        if scheduled_at is None or scheduled_at <= self.now:
            raise ValidationError(SCHEDULE_IN_PAST)

        result = self.backend.put_json(f"scheduled-posts/{post.id}", {"scheduledAt": to_iso(scheduled_at)})
        logger.info(f"[PLANNER_RESCHEDULE] {post.id} -> {to_iso(scheduled_at)}")
        return result

    def cancel(self, post_id: str) -> dict:
        post = self.find_post(post_id)
        if post.platform != 'instagram' or post.status not in SCHEDULED_STATUSES:
            raise ValidationError(CANCEL_UNAVAILABLE)

        result = self.backend.delete(f"scheduled-posts/{post.id}")
        logger.info(f"[PLANNER_CANCEL] {post.id}")
        return result

    def delete(self, post_id: str) -> dict:
        post = self.find_post(post_id)
        if post.platform == 'youtube' and post.status == 'success':
            raise ValidationError(YOUTUBE_DELETE_REFUSED)

        if post.platform == 'gmb':
            result = self.backend.delete(f"gmb/posts/{post.id}")
        else:
            result = self.backend.delete(f"scheduled-posts/{post.id}")
        logger.info(f"[PLANNER_DELETE] {post.platform} {post.id}")
        return result
