"""
Base Platform Service - Abstract class for all publishing destinations
"""
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone as dt_timezone
from typing import Any, Dict, List, Optional

from api.exceptions import BackendAPIError, BackendUnavailable, ValidationError

logger = logging.getLogger('platforms')


def to_iso(value: datetime) -> str:
    """UTC ISO-8601 with a Z suffix, as the backend expects"""
    return value.astimezone(dt_timezone.utc).isoformat(timespec='milliseconds').replace('+00:00', 'Z')


@dataclass
class PostResult:
    """Result of publishing a post"""
    success: bool
    platform_post_id: Optional[str] = None
    platform_post_url: Optional[str] = None
    error_message: Optional[str] = None


@dataclass
class Destination:
    """One place a draft goes: a connected account or a GMB location"""
    id: str
    platform: str
    label: str
    social_account_id: Optional[str] = None


@dataclass
class PublishRequest:
    """Backend call for one destination: JSON body or multipart form"""
    endpoint: str
    json: Optional[Dict[str, Any]] = None
    form: Optional[Dict[str, Any]] = None
    files: List[tuple] = field(default_factory=list)


class BasePlatformService(ABC):
    """
    Abstract base class for platform publishers.
    Subclasses only build the request; sending and error capture are shared.
    """

    PLATFORM_NAME: str = "base"

    def __init__(self, backend):
        self.backend = backend

    @abstractmethod
    def build_request(self, destination: Destination, draft, media) -> PublishRequest:
        """
        Build the backend call for one destination

        Args:
            destination: Account or location being published to
            draft: The composer draft (content, mode, schedule, platform options)
            media: ResolvedMedia with public URLs for the draft's files

        Returns:
            PublishRequest describing the endpoint and body
        """

    def publish(self, destination: Destination, draft, media) -> PostResult:
        """
        Publish to one destination. Never raises for backend failures so the
        caller can carry on with the next destination.
        """
        try:
            request = self.build_request(destination, draft, media)
        except ValidationError as e:
            return PostResult(success=False, error_message=str(e))

        logger.debug(f"[{self.PLATFORM_NAME.upper()}_REQUEST] {request.endpoint} {request.json or request.form}")
        try:
            if request.json is not None:
                data = self.backend.post_json(request.endpoint, request.json)
            else:
                data = self.backend.post_form(request.endpoint, request.form or {}, request.files)
        except (BackendAPIError, BackendUnavailable) as e:
            return PostResult(success=False, error_message=str(e))

        if not isinstance(data, dict):
            data = {}
        return PostResult(
            success=True,
            platform_post_id=data.get('id') or data.get('postId'),
            platform_post_url=data.get('permalink') or data.get('url'),
        )

    @staticmethod
    def compact(body: Dict[str, Any]) -> Dict[str, Any]:
        """Drop unset fields from a request body"""
        return {key: value for key, value in body.items() if value is not None}
