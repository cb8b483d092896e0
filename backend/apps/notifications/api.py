"""
Alerts API Endpoints
"""
from typing import Optional
from ninja import Router
from api.dependencies import AuthBearer, get_backend, require_auth
from .schemas import AlertPageSchema, UnreadCountSchema
from .services import AlertService

router = Router()


def _service(request) -> AlertService:
    return AlertService(get_backend(request), require_auth(request).user_id)


@router.get("/", auth=AuthBearer(), response=AlertPageSchema)
def list_alerts(request, limit: int = 4, cursor: Optional[str] = None, unread_only: bool = False):
    return _service(request).list_alerts(limit=limit, cursor=cursor, unread_only=unread_only)


@router.get("/unread-count", auth=AuthBearer(), response=UnreadCountSchema)
def unread_count(request):
    """Polled by the top bar every 30 seconds"""
    return {"count": _service(request).unread_count()}


@router.put("/read-all", auth=AuthBearer())
def mark_all_read(request):
    _service(request).mark_all_read()
    return {"success": True}


@router.put("/{alert_id}/read", auth=AuthBearer())
def mark_read(request, alert_id: str):
    _service(request).mark_read(alert_id)
    return {"success": True}


@router.delete("/{alert_id}", auth=AuthBearer())
def delete_alert(request, alert_id: str):
    _service(request).delete(alert_id)
    return {"success": True}
