"""
Backend API Service for the dashboard's REST backend
"""
import json
import logging
from typing import Optional

import requests
from django.conf import settings

from api.exceptions import BackendAPIError, BackendUnavailable

logger = logging.getLogger('api')

SERVER_ERROR_MESSAGE = "Server error. Please try again."


def parse_api_error(text: Optional[str]) -> str:
    """
    Turn a backend error body into one readable sentence.

    JSON bodies give their ``message``, ``error`` (a string, or an object with
    its own ``message``) or ``statusMessage``. Server error pages collapse to a
    generic message; anything else is cut to 200 characters.
    """
    if not text or not text.strip():
        return "Unknown error"

    try:
        body = json.loads(text)
    except ValueError:
        body = None

    if isinstance(body, dict):
        if isinstance(body.get('message'), str):
            return body['message']
        error = body.get('error')
        if isinstance(error, str):
            return error
        if isinstance(error, dict) and isinstance(error.get('message'), str):
            return error['message']
        if isinstance(body.get('statusMessage'), str):
            return body['statusMessage']

    if "Internal Server Error" in text or "500" in text:
        return SERVER_ERROR_MESSAGE
    return " ".join(text.split())[:200]


class BackendAPIService:
    """Service for backend REST API operations on behalf of one session"""

    def __init__(self, token: str, base_url: str = None, timeout: int = None):
        self.token = token
        self.base_url = (base_url or settings.BACKEND_API_URL).rstrip('/')
        self.timeout = timeout or settings.BACKEND_TIMEOUT

    def _headers(self) -> dict:
        return {'Authorization': f'Bearer {self.token}'}

    def _make_request(self, endpoint: str, method: str = 'GET', params: dict = None,
                      json_body=None, data: dict = None, files=None,
                      allow_redirects: bool = True) -> requests.Response:
        """Make a request to the backend; raises only when it cannot be reached"""
        url = f"{self.base_url}/{endpoint.lstrip('/')}"

        try:
            response = requests.request(
                method,
                url,
                params=params,
                json=json_body,
                data=data,
                files=files,
                headers=self._headers(),
                allow_redirects=allow_redirects,
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            logger.error(f"[BACKEND_UNREACHABLE] {method} {url}: {str(e)}")
            raise BackendUnavailable(
                f"Failed to connect to backend: {str(e)}. "
                f"Is the backend running on {self.base_url}?"
            )

        if not response.ok:
            logger.warning(f"[BACKEND_ERROR] {method} {url} -> {response.status_code}")
        return response

    def raw_request(self, endpoint: str, method: str = 'GET', allow_redirects: bool = True, **kwargs) -> requests.Response:
        """The undecoded response, for callers that read status codes or headers themselves"""
        return self._make_request(endpoint, method=method, allow_redirects=allow_redirects, **kwargs)

    def request(self, endpoint: str, method: str = 'GET', **kwargs):
        """Make a request and return the decoded body, raising BackendAPIError on non-2xx"""
        response = self._make_request(endpoint, method=method, **kwargs)

        if not response.ok:
            raise BackendAPIError(parse_api_error(response.text), status_code=response.status_code)

        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError:
            return {"raw": response.text}

    def get(self, endpoint: str, params: dict = None):
        return self.request(endpoint, 'GET', params=params)

    def post_json(self, endpoint: str, body: dict):
        return self.request(endpoint, 'POST', json_body=body)

    def post_form(self, endpoint: str, data: dict, files: list = None):
        """
        Multipart POST. Plain fields travel as ``(None, value)`` parts so the
        body is multipart even without a file; ``files`` is a list of
        ``(field, (filename, content, content_type))`` tuples.
        """
        parts = [(key, (None, str(value))) for key, value in data.items() if value is not None]
        parts.extend(files or [])
        return self.request(endpoint, 'POST', files=parts)

    def put_json(self, endpoint: str, body: dict = None):
        return self.request(endpoint, 'PUT', json_body=body if body is not None else {})

    def delete(self, endpoint: str, params: dict = None):
        return self.request(endpoint, 'DELETE', params=params)
