from ninja import Schema
from typing import Optional, List
from datetime import datetime


class MediaRefSchema(Schema):
    """
    One draft media item. ``upload_index`` points at a file in the request's
    ``files`` list; otherwise ``url`` names a recent upload.
    """
    name: str
    content_type: Optional[str] = None
    type: Optional[str] = None  # 'photo' | 'video' for recent uploads
    size: int = 0
    url: Optional[str] = None
    upload_index: Optional[int] = None


class GmbLocationSchema(Schema):
    id: str
    social_account_id: Optional[str] = None
    name: Optional[str] = None


class DraftSchema(Schema):
    content: str = ""
    account_ids: List[str] = []
    platforms: List[str] = []
    gmb_locations: List[GmbLocationSchema] = []
    mode: str = "publish"
    schedule_at: Optional[datetime] = None
    timezone: str = "UTC"
    is_carousel: bool = False
    media: List[MediaRefSchema] = []
    youtube_title: str = ""
    youtube_visibility: str = "public"
    gmb_cta_type: Optional[str] = None
    gmb_cta_url: Optional[str] = None


class ComposerStateSchema(Schema):
    """What the composer offers for the current selection"""
    account_ids: List[str]
    gmb_location_ids: List[str] = []
    platforms: List[str]
    carousel_available: bool
    carousel_images_only: bool
    accepts: str
    notice: Optional[str] = None


class ValidationResultSchema(Schema):
    """Schema for draft validation result"""
    valid: bool
    errors: List[str] = []
    state: Optional[ComposerStateSchema] = None


class DispatchResultSchema(Schema):
    destination_id: str
    platform: str
    label: str
    success: bool
    platform_post_id: Optional[str] = None
    platform_post_url: Optional[str] = None
    error: Optional[str] = None


class SubmitResponseSchema(Schema):
    success: bool
    message: str
    success_count: int
    fail_count: int
    results: List[DispatchResultSchema] = []
