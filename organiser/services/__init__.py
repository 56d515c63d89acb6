"""Business logic services for the Interview Organiser API."""

from .token import create_token, decode_token, should_refresh_token
from .rbac import require_role, require_admin, get_current_user
from .notifications import NotificationService, get_notification_service, notify_safely
from .interview_service import InterviewService
from .auth_service import AuthService

__all__ = [
    "create_token",
    "decode_token",
    "should_refresh_token",
    "require_role",
    "require_admin",
    "get_current_user",
    "NotificationService",
    "get_notification_service",
    "notify_safely",
    "InterviewService",
    "AuthService",
]
