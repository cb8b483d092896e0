from ninja import Schema
from typing import Any, Dict, List, Optional


class AlertPageSchema(Schema):
    alerts: List[Dict[str, Any]]
    has_more: bool
    next_cursor: Optional[str] = None


class UnreadCountSchema(Schema):
    count: int
