"""
Authentication API Endpoints
"""
import logging
from ninja import Router
from django.http import HttpRequest
from .schemas import SessionUserSchema, SyncResponseSchema
from api.dependencies import AuthBearer, get_backend
from api.exceptions import BackendAPIError

router = Router()
logger = logging.getLogger('auth')


@router.get("/me", response=SessionUserSchema, auth=AuthBearer())
def get_current_user_info(request: HttpRequest):
    """
    Current session user, with the backend profile when it is available
    """
    user = request.auth
    profile = None
    try:
        profile = get_backend(request).get('users/profile')
    except BackendAPIError as e:
        logger.warning(f"[AUTH_PROFILE] Profile unavailable for {user.user_id}: {str(e)}")

    return {
        "user_id": user.user_id,
        "email": user.email,
        "role": user.role,
        "profile": profile,
    }


@router.post("/sync", response=SyncResponseSchema, auth=AuthBearer())
def sync_user(request: HttpRequest):
    """
    Make sure the backend knows the signed-in user
    """
    result = get_backend(request).post_json('auth/sync', {})
    logger.info(f"[AUTH_SYNC] User {request.auth.user_id} synced")
    return {"success": True, "user": result}
