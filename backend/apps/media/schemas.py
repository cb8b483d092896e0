from ninja import Schema
from typing import List, Optional


class RecentUploadSchema(Schema):
    """Schema for one file in an account's upload folder"""
    name: str
    url: str
    type: str
    size: int = 0
    created: str = ''
    status: str = 'ready'


class RecentUploadsPageSchema(Schema):
    items: List[RecentUploadSchema]
    page: int
    has_more: bool


class MediaUploadResponseSchema(Schema):
    """Schema for media upload response"""
    file_url: str
    file_type: str
    file_size: int
    width: Optional[int] = None
    height: Optional[int] = None
    message: str
