from ninja import Schema
from typing import List, Optional


class LibraryItemSchema(Schema):
    id: str
    platform: str
    media_url: str
    is_video: bool = False
    caption: str = ""
    status: Optional[str] = None
    account_id: Optional[str] = None
    account_name: Optional[str] = None
    location_id: Optional[str] = None
    created_at: Optional[str] = None


class SelectionSchema(Schema):
    ids: List[str]


class BulkDeleteResponseSchema(Schema):
    message: str
    success: bool
    deleted_count: int
    failed_count: int
    failed_ids: List[str]


class DownloadPlanSchema(Schema):
    zip: List[LibraryItemSchema]
    open: List[LibraryItemSchema]
    missing: List[str]
