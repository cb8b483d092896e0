"""
Planner API Endpoints
"""
from datetime import date
from typing import List, Optional
from ninja import Router
from api.dependencies import AuthBearer, get_backend
from .schemas import DaySchema, MonthSchema, PlannerPostSchema, RescheduleSchema
from .services import PlannerService

router = Router()


@router.get("/calendar", auth=AuthBearer(), response=MonthSchema)
def month_calendar(request, year: Optional[int] = None, month: Optional[int] = None, tz: str = "UTC"):
    """Month grid with per-platform post counts for each day"""
    return PlannerService(get_backend(request), timezone_name=tz).month(year, month)


@router.get("/day", auth=AuthBearer(), response=DaySchema)
def day_posts(request, day: date, platform: Optional[str] = None, status: Optional[str] = None,
              tz: str = "UTC"):
    return PlannerService(get_backend(request), timezone_name=tz).day(day, platform=platform, status=status)


@router.get("/upcoming", auth=AuthBearer(), response=List[PlannerPostSchema])
def upcoming_posts(request, platform: Optional[str] = None, tz: str = "UTC"):
    """Scheduled posts still to go out, earliest first"""
    return PlannerService(get_backend(request), timezone_name=tz).upcoming(platform=platform)


@router.post("/posts/{post_id}/reschedule", auth=AuthBearer())
def reschedule_post(request, post_id: str, data: RescheduleSchema):
    result = PlannerService(get_backend(request)).reschedule(post_id, data.scheduled_at)
    return {"success": True, "message": "Post rescheduled", "post": result}


@router.post("/posts/{post_id}/cancel", auth=AuthBearer())
def cancel_post(request, post_id: str):
    PlannerService(get_backend(request)).cancel(post_id)
    return {"success": True, "message": "Scheduled post cancelled"}


@router.delete("/posts/{post_id}", auth=AuthBearer())
def delete_post(request, post_id: str):
    PlannerService(get_backend(request)).delete(post_id)
    return {"success": True, "message": "Post deleted"}
