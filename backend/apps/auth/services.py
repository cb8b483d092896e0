"""
Authentication Business Logic

Sessions are issued by Supabase Auth. The dashboard only verifies the
access token and forwards it unchanged to the backend API.
"""
import jwt
import logging
from dataclasses import dataclass
from typing import Optional
from django.conf import settings
from api.exceptions import PermissionDenied

# Setup logger for authentication
logger = logging.getLogger('auth')


@dataclass
class SessionUser:
    """Caller identity taken from a verified session token"""
    user_id: str
    token: str
    email: Optional[str] = None
    role: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return True


class AuthService:
    """Authentication Service"""

    @staticmethod
    def decode_token(token: str) -> dict:
        """Decode and verify a Supabase session JWT"""
        if not settings.SUPABASE_JWT_SECRET:
            logger.error("[AUTH_ERROR] SUPABASE_JWT_SECRET is not configured")
            raise PermissionDenied("Session verification is not configured")

        try:
            return jwt.decode(
                token,
                settings.SUPABASE_JWT_SECRET,
                algorithms=[settings.JWT_ALGORITHM],
                audience=settings.SUPABASE_JWT_AUDIENCE,
            )
        except jwt.ExpiredSignatureError:
            logger.warning("[AUTH_FAILED] Token has expired")
            raise PermissionDenied("Token has expired")
        except jwt.InvalidTokenError as e:
            logger.warning(f"[AUTH_FAILED] Invalid token: {str(e)}")
            raise PermissionDenied("Invalid token")

    @staticmethod
    def verify_token(token: str) -> SessionUser:
        """Verify session token and return the caller"""
        payload = AuthService.decode_token(token)
        user_id = payload.get('sub')
        if not user_id:
            raise PermissionDenied("Invalid token payload")

        return SessionUser(
            user_id=str(user_id),
            token=token,
            email=payload.get('email'),
            role=payload.get('role'),
        )
