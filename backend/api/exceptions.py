"""
Global Exception Handlers
"""
from django.http import JsonResponse
import traceback
import logging

logger = logging.getLogger('api')


def custom_exception_handler(request, exc):
    """
    Custom exception handler for Django Ninja API
    """
    # Expected errors are reported to the caller, not logged with a traceback
    if not isinstance(exc, DashboardError):
        logger.error(f"API Error: {str(exc)}\n{traceback.format_exc()}")

    status_code = getattr(exc, 'status_code', 500)

    error_response = {
        "error": True,
        "message": str(exc),
        "type": exc.__class__.__name__,
    }

    errors = getattr(exc, 'errors', None)
    if errors:
        error_response["errors"] = errors

    # Add details in debug mode
    from django.conf import settings
    if settings.DEBUG:
        error_response["traceback"] = traceback.format_exc()

    return JsonResponse(error_response, status=status_code)


# Custom Exception Classes
class DashboardError(Exception):
    status_code = 500


class ValidationError(DashboardError):
    """Draft, media or size checks that fail before any network call."""
    status_code = 400

    def __init__(self, message, errors=None):
        super().__init__(message)
        self.errors = list(errors) if errors else [message]


class PermissionDenied(DashboardError):
    status_code = 403


class NotFound(DashboardError):
    status_code = 404


class UploadError(DashboardError):
    """Object storage rejected an upload."""
    status_code = 502


class BackendAPIError(DashboardError):
    """The backend answered with a non-2xx status."""
    status_code = 502

    def __init__(self, message, status_code=None):
        super().__init__(message)
        if status_code:
            self.status_code = status_code


class BackendUnavailable(DashboardError):
    status_code = 503
