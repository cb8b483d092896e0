from ninja import Schema
from typing import Dict, List, Optional


class GmbLocationSchema(Schema):
    id: str
    name: str
    address: Optional[str] = None
    social_account_id: Optional[str] = None


class GmbPostSchema(Schema):
    id: str
    location_id: Optional[str] = None
    content: str = ""
    status: str
    media_url: Optional[str] = None
    is_video: bool = False
    scheduled_at: Optional[str] = None
    posted_at: Optional[str] = None
    cta_type: Optional[str] = None
    cta_url: Optional[str] = None
    permalink: Optional[str] = None


class SyncLocationsSchema(Schema):
    social_account_id: str


class SyncResultSchema(Schema):
    processed: int
    message: str


LocationsByAccountSchema = Dict[str, List[GmbLocationSchema]]
