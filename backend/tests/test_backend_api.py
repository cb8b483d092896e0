"""
Tests for the backend REST client and its error extraction
"""
from unittest.mock import patch

import pytest
import requests

from api.exceptions import BackendAPIError, BackendUnavailable
from apps.backend_api.services import BackendAPIService, parse_api_error, SERVER_ERROR_MESSAGE

from conftest import BACKEND_URL, fake_response


class TestParseApiError:
    def test_empty_body(self):
        assert parse_api_error("") == "Unknown error"
        assert parse_api_error(None) == "Unknown error"

    def test_message_field(self):
        assert parse_api_error('{"message": "Token expired"}') == "Token expired"

    def test_error_string(self):
        assert parse_api_error('{"error": "Page not found"}') == "Page not found"

    def test_nested_error_message(self):
        assert parse_api_error('{"error": {"message": "Rate limited", "code": 4}}') == "Rate limited"

    def test_status_message(self):
        assert parse_api_error('{"statusMessage": "Bad Gateway"}') == "Bad Gateway"

    def test_server_error_page(self):
        assert parse_api_error("<html>Internal Server Error</html>") == SERVER_ERROR_MESSAGE

    def test_plain_text_is_truncated(self):
        text = "x" * 500
        assert parse_api_error(text) == "x" * 200

    def test_multi_line_page_becomes_one_line(self):
        assert parse_api_error("<html>\n<body>Bad Gateway</body>\n</html>") == "<html> <body>Bad Gateway</body> </html>"


class TestBackendAPIService:
    def test_sends_bearer_token_and_timeout(self):
        backend = BackendAPIService("session-token")
        with patch("apps.backend_api.services.requests.request",
                   return_value=fake_response(200, [{"id": "1"}])) as mocked:
            data = backend.get("social-accounts")

        assert data == [{"id": "1"}]
        args, kwargs = mocked.call_args
        assert args == ("GET", f"{BACKEND_URL}/social-accounts")
        assert kwargs["headers"] == {"Authorization": "Bearer session-token"}
        assert kwargs["timeout"] == 60

    def test_non_2xx_raises_with_extracted_message(self):
        backend = BackendAPIService("t")
        with patch("apps.backend_api.services.requests.request",
                   return_value=fake_response(401, {"message": "Session expired"})):
            with pytest.raises(BackendAPIError) as exc_info:
                backend.post_json("facebook/post/fb-1", {"message": "hi"})

        assert str(exc_info.value) == "Session expired"
        assert exc_info.value.status_code == 401

    def test_unreachable_backend(self):
        backend = BackendAPIService("t")
        with patch("apps.backend_api.services.requests.request",
                   side_effect=requests.exceptions.ConnectionError("refused")):
            with pytest.raises(BackendUnavailable) as exc_info:
                backend.get("alerts")

        message = str(exc_info.value)
        assert message.startswith("Failed to connect to backend: refused")
        assert f"Is the backend running on {BACKEND_URL}?" in message

    def test_empty_and_non_json_bodies(self):
        backend = BackendAPIService("t")
        with patch("apps.backend_api.services.requests.request", return_value=fake_response(204)):
            assert backend.delete("alerts/1") == {}
        with patch("apps.backend_api.services.requests.request",
                   return_value=fake_response(200, text="OK")):
            assert backend.get("alerts") == {"raw": "OK"}

    def test_post_form_sends_multipart_parts(self):
        backend = BackendAPIService("t")
        video = ("video", ("clip.mp4", b"data", "video/mp4"))
        with patch("apps.backend_api.services.requests.request",
                   return_value=fake_response(200, {"id": "v1"})) as mocked:
            backend.post_form("youtube/upload/yt-1", {"title": "Demo", "publishAt": None, "tags": ""}, [video])

        parts = mocked.call_args.kwargs["files"]
        assert ("title", (None, "Demo")) in parts
        assert ("tags", (None, "")) in parts
        assert all(name != "publishAt" for name, _ in parts)
        assert parts[-1] == video
