"""
Tests for the per-platform publishers, the dispatcher and status sentences
"""
import json
from datetime import datetime, timezone as dt_timezone

import pytest

from api.exceptions import BackendAPIError
from apps.media.services import ResolvedMedia
from apps.platforms.dispatcher import Dispatcher
from apps.platforms.services import get_platform_service
from apps.platforms.services.base import Destination, to_iso
from apps.posts.composer import Draft, GmbLocationRef, MODE_SCHEDULE
from apps.posts.status import summarize

from conftest import FakeBackend

LATER = datetime(2026, 3, 6, 14, 30, tzinfo=dt_timezone.utc)
CAROUSEL = ResolvedMedia(carousel=[("https://s/1.jpg", "photo"), ("https://s/2.jpg", "photo")])


def destination(account_id, platform):
    return Destination(id=account_id, platform=platform, label=account_id)


def test_to_iso_uses_utc_milliseconds():
    assert to_iso(LATER) == "2026-03-06T14:30:00.000Z"


class TestFacebook:
    def test_scheduled_carousel(self, accounts):
        draft = Draft(accounts, content="Weekend sale", mode=MODE_SCHEDULE, schedule_at=LATER)
        draft.is_carousel = True

        request = get_platform_service("facebook", FakeBackend()).build_request(
            destination("fb-1", "facebook"), draft, CAROUSEL
        )

        assert request.endpoint == "facebook/post/fb-1"
        assert request.json == {
            "message": "Weekend sale",
            "privacy": "PUBLIC",
            "shareToStory": False,
            "scheduledPublishTime": "2026-03-06T14:30:00.000Z",
            "isCarousel": True,
            "carouselUrls": ["https://s/1.jpg", "https://s/2.jpg"],
            "mediaType": "photo",
        }

    def test_text_only_post(self, accounts):
        draft = Draft(accounts, content="Just words")
        request = get_platform_service("facebook", FakeBackend()).build_request(
            destination("fb-1", "facebook"), draft, ResolvedMedia()
        )
        assert request.json == {"message": "Just words", "privacy": "PUBLIC", "shareToStory": False}


class TestInstagram:
    def test_immediate_carousel(self, accounts):
        draft = Draft(accounts, content="Look")
        draft.is_carousel = True

        request = get_platform_service("instagram", FakeBackend()).build_request(
            destination("ig-1", "instagram"), draft, CAROUSEL
        )

        assert request.endpoint == "instagram/post/ig-1"
        assert request.json == {
            "caption": "Look",
            "mediaType": "carousel",
            "carouselItems": [
                {"url": "https://s/1.jpg", "type": "photo"},
                {"url": "https://s/2.jpg", "type": "photo"},
            ],
        }

    def test_scheduled_carousel_goes_to_queue(self, accounts):
        draft = Draft(accounts, content="Look", mode=MODE_SCHEDULE, schedule_at=LATER, timezone_name="Asia/Tokyo")
        draft.is_carousel = True

        request = get_platform_service("instagram", FakeBackend()).build_request(
            destination("ig-1", "instagram"), draft, CAROUSEL
        )

        assert request.endpoint == "scheduled-posts"
        assert request.json is None
        assert request.form["socialAccountId"] == "ig-1"
        assert request.form["timezone"] == "Asia/Tokyo"
        assert request.form["mediaUrl"] == "https://s/1.jpg"
        assert json.loads(request.form["carouselUrls"]) == ["https://s/1.jpg", "https://s/2.jpg"]


class TestYouTube:
    def test_uploads_the_video_file(self, accounts, video_item):
        draft = Draft(accounts, content="About this video", mode=MODE_SCHEDULE, schedule_at=LATER,
                      youtube_title="Launch", youtube_visibility="unlisted")
        draft.select_account("yt-1")
        draft.set_media(video_item)

        request = get_platform_service("youtube", FakeBackend()).build_request(
            destination("yt-1", "youtube"), draft, ResolvedMedia()
        )

        assert request.endpoint == "youtube/upload/yt-1"
        assert request.form["title"] == "Launch"
        assert request.form["description"] == "About this video"
        assert request.form["privacyStatus"] == "unlisted"
        assert request.form["publishAt"] == "2026-03-06T14:30:00.000Z"
        assert request.files == [("video", ("clip.mp4", video_item.content, "video/mp4"))]

    def test_missing_video_is_a_failed_result(self, accounts):
        draft = Draft(accounts, content="x", youtube_title="t")
        backend = FakeBackend()

        result = get_platform_service("youtube", backend).publish(destination("yt-1", "youtube"), draft, ResolvedMedia())

        assert not result.success
        assert result.error_message == "video file required"
        assert backend.calls == []


class TestGmb:
    def test_photo_post_with_cta(self, accounts):
        draft = Draft(accounts, content="Open late", mode=MODE_SCHEDULE, schedule_at=LATER,
                      gmb_cta_type="BOOK", gmb_cta_url="https://book.example.com")
        media = ResolvedMedia(gmb_url="https://s/g.jpg", gmb_type="photo")

        request = get_platform_service("gmb", FakeBackend()).build_request(
            Destination(id="loc-1", platform="gmb", label="Downtown"), draft, media
        )

        assert request.endpoint == "gmb/posts"
        assert request.json == {
            "locationId": "loc-1",
            "content": "Open late",
            "imageUrl": "https://s/g.jpg",
            "scheduledAt": "2026-03-06T14:30:00.000Z",
            "ctaType": "BOOK",
            "ctaUrl": "https://book.example.com",
        }

    def test_call_cta_drops_url(self, accounts):
        draft = Draft(accounts, content="Ring us", gmb_cta_type="CALL", gmb_cta_url="https://ignored")
        request = get_platform_service("gmb", FakeBackend()).build_request(
            Destination(id="loc-1", platform="gmb", label="Downtown"), draft, ResolvedMedia()
        )
        assert request.json["ctaType"] == "CALL"
        assert "ctaUrl" not in request.json


def test_unknown_platform():
    with pytest.raises(ValueError, match="Unsupported platform: tiktok"):
        get_platform_service("tiktok", FakeBackend())


class TestDispatcher:
    def test_accounts_then_locations_one_failure_does_not_stop_the_rest(self, accounts):
        draft = Draft(accounts, content="Hello")
        draft.select_account("fb-1")
        draft.select_account("ig-1")
        draft.selection.select_gmb_location(GmbLocationRef(id="loc-1", name="Downtown"))
        backend = FakeBackend({
            ("POST", "instagram/post/ig-1"): BackendAPIError("Media required"),
            ("POST", "facebook/post/fb-1"): {"id": "fb-post"},
            ("POST", "gmb/posts"): {"id": "gmb-post"},
        })

        results = Dispatcher(backend).dispatch(draft, ResolvedMedia())

        assert backend.endpoints() == ["facebook/post/fb-1", "instagram/post/ig-1", "gmb/posts"]
        assert [r.success for r in results] == [True, False, True]
        assert results[0].result.platform_post_id == "fb-post"
        assert results[1].failure_line == "Instagram (Shop Main): Media required"

    def test_failure_line_stays_on_one_line(self, accounts):
        draft = Draft(accounts, content="Hello")
        draft.select_account("fb-1")
        backend = FakeBackend({("POST", "facebook/post/fb-1"): BackendAPIError("Token expired.\n  Reconnect the page.")})

        results = Dispatcher(backend).dispatch(draft, ResolvedMedia())

        assert results[0].failure_line == "Facebook (Shop Page): Token expired. Reconnect the page."


class TestSummarize:
    class Outcome:
        def __init__(self, success, line=""):
            self.success = success
            self.failure_line = line

    def test_post_now_messages(self):
        ok, bad = self.Outcome(True), self.Outcome(False, "Facebook (Page): boom")

        assert summarize([ok, ok], "publish") == "Queued successfully for 2 account(s)."
        assert summarize([ok, bad], "publish") == "Queued for 1 account(s). Failed for 1:\nFacebook (Page): boom"
        assert summarize([bad], "publish") == "Post failed:\nFacebook (Page): boom"

    def test_schedule_messages(self):
        ok, bad = self.Outcome(True), self.Outcome(False, "YouTube (Channel): quota")

        assert summarize([ok], "schedule", LATER, "Europe/Paris") == (
            "Scheduled successfully for 1 account(s). Post(s) will go out at Mar 6, 2026, 3:30 PM."
        )
        assert summarize([ok, bad, bad], "schedule", LATER) == (
            "Scheduled for 1 account(s). Failed for 2:\nYouTube (Channel): quota\nYouTube (Channel): quota"
        )
        assert summarize([bad], "schedule", LATER) == "Scheduling failed:\nYouTube (Channel): quota"
