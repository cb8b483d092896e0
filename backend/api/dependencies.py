"""
Common API Dependencies
"""
from ninja.security import HttpBearer
from typing import Optional
from django.http import HttpRequest


class AuthBearer(HttpBearer):
    """Session JWT Bearer Authentication"""

    def authenticate(self, request: HttpRequest, token: str) -> Optional[any]:
        from apps.auth.services import AuthService
        from api.exceptions import PermissionDenied
        try:
            return AuthService.verify_token(token)
        except PermissionDenied:
            return None


# Dependency functions
def get_current_user(request):
    """Get current authenticated user"""
    if hasattr(request, 'auth') and request.auth:
        return request.auth
    return None


def require_auth(request):
    """Require authentication"""
    user = get_current_user(request)
    if not user:
        from api.exceptions import PermissionDenied
        raise PermissionDenied("Authentication required")
    return user


def get_backend(request):
    """Backend API client bound to the caller's session token"""
    from apps.backend_api.services import BackendAPIService
    return BackendAPIService(require_auth(request).token)
