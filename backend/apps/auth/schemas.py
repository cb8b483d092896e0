"""
Authentication Schemas
"""
from ninja import Schema
from typing import Any, Dict, Optional


class SessionUserSchema(Schema):
    user_id: str
    email: Optional[str] = None
    role: Optional[str] = None
    profile: Optional[Dict[str, Any]] = None


class SyncResponseSchema(Schema):
    success: bool
    user: Optional[Dict[str, Any]] = None
