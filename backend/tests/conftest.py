"""
Pytest configuration and shared fixtures for the dashboard API tests
"""
import io
import json
import os
import time
from datetime import datetime, timezone as dt_timezone
from unittest.mock import MagicMock

# TestClient builds the API urls more than once per session
os.environ.setdefault("NINJA_SKIP_REGISTRY", "yes")

import jwt
import pytest
from PIL import Image

from apps.accounts.services import SocialAccount
from apps.media.services import MediaItem

JWT_SECRET = "test-jwt-secret-32-chars-long-123"
BACKEND_URL = "http://backend.test/api/v1"
STORAGE_PUBLIC = "https://test.supabase.co/storage/v1/object/public"

# Thursday noon UTC
NOW = datetime(2026, 3, 5, 12, 0, tzinfo=dt_timezone.utc)


def make_token(user_id="user-1", expires_in=3600, **claims):
    payload = {
        "sub": user_id,
        "aud": "authenticated",
        "exp": int(time.time()) + expires_in,
        "email": "owner@example.com",
        "role": "authenticated",
    }
    payload.update(claims)
    return jwt.encode(payload, JWT_SECRET, algorithm="HS256")


def auth_headers(token=None):
    return {"Authorization": f"Bearer {token or make_token()}"}


def jpeg_bytes(size=(10, 10)):
    buffer = io.BytesIO()
    Image.new("RGB", size, color=(200, 30, 30)).save(buffer, "JPEG")
    return buffer.getvalue()


def fake_response(status_code=200, body=None, headers=None, text=None):
    """Stand-in for a requests.Response"""
    response = MagicMock()
    response.status_code = status_code
    response.ok = status_code < 400
    if text is None:
        text = json.dumps(body) if body is not None else ""
    response.text = text
    response.content = text.encode()
    if body is not None:
        response.json.return_value = body
    else:
        response.json.side_effect = ValueError("No JSON")
    response.headers = headers or {}
    return response


def route_requests(routes):
    """
    side_effect for a patched ``requests.request`` that answers by
    (method, endpoint); unknown routes get a 404.
    """
    def respond(method, url, **kwargs):
        endpoint = url.replace(BACKEND_URL + "/", "")
        status_code, body = routes.get((method, endpoint), (404, {"message": "Not found"}))
        return fake_response(status_code, body)
    return respond


class FakeBackend:
    """Records every backend call and answers from a (method, endpoint) table"""

    def __init__(self, responses=None):
        self.responses = responses or {}
        self.calls = []
        self.token = "test-token"

    def _respond(self, method, endpoint, payload=None):
        self.calls.append((method, endpoint, payload))
        result = self.responses.get((method, endpoint), {})
        if isinstance(result, Exception):
            raise result
        return result

    def endpoints(self, method=None):
        return [endpoint for m, endpoint, _ in self.calls if method is None or m == method]

    def get(self, endpoint, params=None):
        return self._respond("GET", endpoint, params)

    def post_json(self, endpoint, body):
        return self._respond("POST", endpoint, body)

    def post_form(self, endpoint, data, files=None):
        return self._respond("POST", endpoint, {"data": data, "files": files or []})

    def put_json(self, endpoint, body=None):
        return self._respond("PUT", endpoint, body)

    def delete(self, endpoint, params=None):
        return self._respond("DELETE", endpoint, params)

    def request(self, endpoint, method="GET", **kwargs):
        return self._respond(method, endpoint, kwargs.get("json_body"))


ACCOUNTS_PAYLOAD = [
    {"id": "ig-1", "platform": "INSTAGRAM", "displayName": "Shop Main", "username": "shop.main"},
    {"id": "ig-2", "platform": "instagram", "displayName": "Shop Outlet", "username": "shop.outlet"},
    {"id": "fb-1", "platform": "facebook", "displayName": "Shop Page"},
    {"id": "yt-1", "platform": "youtube", "displayName": "Shop Channel"},
    {"id": "gmb-1", "platform": "gmb", "displayName": "Shop Business"},
]


@pytest.fixture
def accounts():
    return [SocialAccount.from_api(item) for item in ACCOUNTS_PAYLOAD]


@pytest.fixture
def jpeg_item():
    content = jpeg_bytes()
    return MediaItem(name="photo.jpg", content_type="image/jpeg", size=len(content), content=content)


@pytest.fixture
def png_item():
    buffer = io.BytesIO()
    Image.new("RGB", (12, 12)).save(buffer, "PNG")
    content = buffer.getvalue()
    return MediaItem(name="second.png", content_type="image/png", size=len(content), content=content)


@pytest.fixture
def video_item():
    content = b"\x00\x00\x00\x18ftypmp42" + b"\x00" * 1024
    return MediaItem(name="clip.mp4", content_type="video/mp4", size=len(content), content=content)


@pytest.fixture
def storage():
    """Storage client double: every upload lands at a predictable public URL"""
    mock = MagicMock()
    mock.upload.side_effect = (
        lambda bucket, path, content, content_type, name=None: f"{STORAGE_PUBLIC}/{bucket}/{path}"
    )
    return mock


@pytest.fixture
def token():
    return make_token()


@pytest.fixture(autouse=True)
def clear_cache():
    from django.core.cache import cache
    cache.clear()
    yield
    cache.clear()
