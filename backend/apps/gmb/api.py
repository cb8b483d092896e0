"""
Google My Business API Endpoints
"""
from typing import List, Optional
from ninja import Router
from api.dependencies import AuthBearer, get_backend
from apps.planner.services import CalendarPost
from .schemas import (
    GmbLocationSchema, GmbPostSchema, LocationsByAccountSchema, SyncLocationsSchema, SyncResultSchema,
)
from .services import GmbService

router = Router()


def post_to_dict(post: CalendarPost) -> dict:
    return {
        "id": post.id,
        "location_id": post.location_id,
        "content": post.content,
        "status": post.status,
        "media_url": post.media_url,
        "is_video": post.is_video,
        "scheduled_at": post.scheduled_at.isoformat() if post.scheduled_at else None,
        "posted_at": post.posted_at.isoformat() if post.posted_at else None,
        "cta_type": post.raw.get('ctaType'),
        "cta_url": post.raw.get('ctaUrl'),
        "permalink": post.permalink,
    }


@router.get("/locations", auth=AuthBearer(), response=List[GmbLocationSchema])
def list_locations(request, account_id: str, q: Optional[str] = None):
    """Locations of one GMB account, optionally filtered by name or address"""
    return GmbService(get_backend(request)).locations(account_id, query=q)


@router.get("/locations/by-account", auth=AuthBearer(), response=LocationsByAccountSchema)
def locations_by_account(request):
    return GmbService(get_backend(request)).locations_by_account()


@router.post("/locations/sync", auth=AuthBearer(), response=SyncResultSchema)
def sync_locations(request, data: SyncLocationsSchema):
    return GmbService(get_backend(request)).sync_locations(data.social_account_id)


@router.delete("/locations/{location_id}", auth=AuthBearer())
def delete_location(request, location_id: str):
    GmbService(get_backend(request)).delete_location(location_id)
    return {"success": True, "message": "Location removed"}


@router.get("/locations/{location_id}/posts", auth=AuthBearer(), response=List[GmbPostSchema])
def location_posts(request, location_id: str):
    return [post_to_dict(p) for p in GmbService(get_backend(request)).location_posts(location_id)]


@router.get("/posts", auth=AuthBearer(), response=List[GmbPostSchema])
def all_posts(request, scheduled: bool = False):
    service = GmbService(get_backend(request))
    posts = service.scheduled_posts() if scheduled else service.all_posts()
    return [post_to_dict(p) for p in posts]


@router.delete("/posts/{post_id}", auth=AuthBearer())
def delete_post(request, post_id: str):
    GmbService(get_backend(request)).delete_post(post_id)
    return {"success": True, "message": "Post deleted"}
