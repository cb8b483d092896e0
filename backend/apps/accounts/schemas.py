"""
Schemas for Social Accounts API
"""
from ninja import Schema
from typing import Dict, List, Optional


class SocialAccountSchema(Schema):
    """Schema for social account response"""
    id: str
    platform: str
    display_name: Optional[str] = None
    username: Optional[str] = None
    external_id: Optional[str] = None
    is_active: bool = True
    label: str


class AccountDirectorySchema(Schema):
    accounts: List[SocialAccountSchema]
    grouped: Dict[str, List[SocialAccountSchema]]


class ConnectUrlSchema(Schema):
    platform: str
    url: str
