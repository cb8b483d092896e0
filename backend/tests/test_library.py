"""
Tests for the media library: listing, bulk delete and zip download
"""
import io
import zipfile
from unittest.mock import patch

import pytest
import requests

from api.exceptions import BackendAPIError, ValidationError
from apps.library.services import LibraryService, is_youtube_url

from conftest import FakeBackend, STORAGE_PUBLIC, fake_response

MEDIA = [
    {"id": "m1", "platform": "instagram", "content": "Older", "status": "success",
     "mediaUrl": f"{STORAGE_PUBLIC}/Instagram/ig-1/a.jpg", "createdAt": "2026-03-01T10:00:00Z"},
    {"id": "m2", "platform": "facebook", "content": "Newer", "status": "pending",
     "mediaUrl": f"{STORAGE_PUBLIC}/Facebook/fb-1/a.jpg", "createdAt": "2026-03-04T10:00:00Z"},
    {"id": "m3", "platform": "youtube", "content": "{}", "status": "success",
     "mediaUrl": "https://www.youtube.com/watch?v=abc", "createdAt": "2026-03-02T10:00:00Z"},
    {"id": "m4", "platform": "instagram", "content": "No media", "createdAt": "2026-03-05T10:00:00Z"},
]
GMB = [
    {"id": "g1", "content": "Store photo", "imageUrl": "https://cdn.example.com/store.jpg",
     "createdAt": "2026-03-03T10:00:00Z", "locationId": "loc-1"},
]


def library(extra=None):
    responses = {
        ("GET", "scheduled-posts/media/all"): MEDIA,
        ("GET", "gmb/posts/all"): GMB,
    }
    responses.update(extra or {})
    backend = FakeBackend(responses)
    return LibraryService(backend), backend


def test_items_with_media_newest_first():
    service, _ = library()

    items = service.list_items()

    assert [item["id"] for item in items] == ["m2", "g1", "m3", "m1"]
    assert items[2]["is_video"] is True
    assert [item["id"] for item in service.list_items(platform="gmb")] == ["g1"]


def test_is_youtube_url():
    assert is_youtube_url("https://youtu.be/abc")
    assert not is_youtube_url(f"{STORAGE_PUBLIC}/Instagram/a.jpg")


def test_download_plan_splits_zip_and_open():
    service, _ = library()

    plan = service.download_plan(["m1", "m3", "g1", "gone"])

    assert [item["id"] for item in plan["zip"]] == ["m1"]
    assert [item["id"] for item in plan["open"]] == ["m3", "g1"]
    assert plan["missing"] == ["gone"]


def test_empty_selection_is_rejected():
    service, backend = library()
    with pytest.raises(ValidationError, match="Select at least one item."):
        service.bulk_delete([])
    assert backend.calls == []


def test_bulk_delete_reports_failures():
    service, backend = library({("DELETE", "scheduled-posts/m2"): BackendAPIError("Locked")})

    result = service.bulk_delete(["m1", "m2", "g1", "gone"])

    assert backend.endpoints("DELETE") == ["scheduled-posts/m1", "scheduled-posts/m2", "gmb/posts/g1"]
    assert result == {
        "message": "Deleted 2 items, 2 failed",
        "success": False,
        "deleted_count": 2,
        "failed_count": 2,
        "failed_ids": ["gone", "m2"],
    }


def test_archive_names_do_not_collide():
    taken = set()
    item = {"id": "x", "platform": "instagram", "media_url": "https://s/path/a.jpg"}

    assert LibraryService.archive_name(item, taken) == "instagram-a.jpg"
    assert LibraryService.archive_name(item, taken) == "instagram-a-1.jpg"


def test_build_zip_fetches_storage_files_and_skips_failures():
    service, _ = library()
    storage_urls = {
        MEDIA[0]["mediaUrl"]: fake_response(200, text="image-one"),
        MEDIA[1]["mediaUrl"]: fake_response(500, text=""),
    }

    with patch("apps.library.services.requests.get", side_effect=lambda url, timeout: storage_urls[url]) as mocked:
        content, plan = service.build_zip(["m1", "m2", "m3"])

    assert mocked.call_count == 2
    assert plan["skipped"] == ["m2"]
    assert [item["id"] for item in plan["open"]] == ["m3"]
    with zipfile.ZipFile(io.BytesIO(content)) as archive:
        assert archive.namelist() == ["instagram-a.jpg"]
        assert archive.read("instagram-a.jpg") == b"image-one"


def test_build_zip_skips_unreachable_files():
    service, _ = library()

    with patch("apps.library.services.requests.get", side_effect=requests.exceptions.Timeout("slow")):
        content, plan = service.build_zip(["m1"])

    assert plan["skipped"] == ["m1"]
    with zipfile.ZipFile(io.BytesIO(content)) as archive:
        assert archive.namelist() == []


def test_build_zip_needs_a_zippable_item():
    service, _ = library()
    with pytest.raises(ValidationError):
        service.build_zip(["m3", "g1"])


def test_bulk_delete_all_succeed():
    service, _ = library()

    result = service.bulk_delete(["m1", "g1"])

    assert result["message"] == "Deleted 2 items successfully"
    assert result["success"] is True
    assert result["failed_ids"] == []
