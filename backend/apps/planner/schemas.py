from ninja import Schema
from typing import Dict, List, Optional
from datetime import datetime


class PlannerPostSchema(Schema):
    id: str
    platform: str
    caption: str
    content: str = ""
    status: str
    raw_status: str
    is_posted: bool = False
    media_url: Optional[str] = None
    is_video: bool = False
    permalink: Optional[str] = None
    scheduled_at: Optional[str] = None
    posted_at: Optional[str] = None
    time_label: Optional[str] = None
    account_id: Optional[str] = None
    account_name: Optional[str] = None
    location_id: Optional[str] = None


class DayCellSchema(Schema):
    date: str
    day: int
    counts: Dict[str, int]
    is_today: bool
    is_past: bool


class MonthSchema(Schema):
    """Sunday-first weeks; cells outside the month are null"""
    year: int
    month: int
    title: str
    today: str
    weeks: List[List[Optional[DayCellSchema]]]


class DaySchema(Schema):
    date: str
    is_today: bool
    is_past: bool
    posts: List[PlannerPostSchema]


class RescheduleSchema(Schema):
    scheduled_at: datetime
