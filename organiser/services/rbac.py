"""Role-based access control for API endpoints."""

from typing import Any, Callable

from fastapi import Request
import structlog

from organiser.middleware.error_handler import ForbiddenError, UnauthorizedError
from organiser.models.enums import UserRole

logger = structlog.get_logger()


# Role hierarchy - higher roles include permissions of lower roles
ROLE_HIERARCHY = {
    UserRole.ADMIN.value: [
        UserRole.ADMIN.value,
        UserRole.ORG_ADMIN.value,
        UserRole.RECRUITER.value,
        UserRole.INTERVIEWER.value,
        UserRole.CANDIDATE.value,
    ],
    UserRole.ORG_ADMIN.value: [UserRole.ORG_ADMIN.value, UserRole.RECRUITER.value],
    UserRole.RECRUITER.value: [UserRole.RECRUITER.value],
    UserRole.INTERVIEWER.value: [UserRole.INTERVIEWER.value],
    UserRole.CANDIDATE.value: [UserRole.CANDIDATE.value],
}

STAFF_ROLES = [UserRole.ADMIN.value, UserRole.ORG_ADMIN.value, UserRole.RECRUITER.value]


def has_role(user_roles: list[str], required_role: str) -> bool:
    """
    Check if any of the user's roles grants the required role.

    Args:
        user_roles: Role names from the token
        required_role: Required role to check

    Returns:
        True if user has required role or higher
    """
    return any(
        required_role in ROLE_HIERARCHY.get(role, [])
        for role in user_roles
    )


def get_current_user(request: Request) -> dict[str, Any]:
    """
    Get current user from request state.

    Usage:
        @router.get("/me")
        def get_me(user: dict = Depends(get_current_user)):
            return user
    """
    if not hasattr(request.state, "user"):
        raise UnauthorizedError()
    return request.state.user


def require_role(allowed_roles: list[str]) -> Callable:
    """
    Dependency that requires user to have one of the specified roles.

    Usage:
        @router.post("/staff-only")
        def staff_endpoint(user: dict = Depends(require_role(["RECRUITER"]))):
            ...
    """
    def check_role(request: Request) -> dict[str, Any]:
        user = get_current_user(request)
        user_roles = user.get("roles", [])

        for role in allowed_roles:
            if has_role(user_roles, role):
                return user

        logger.warning(
            "Role check failed",
            user=user.get("sub"),
            required=allowed_roles,
            user_roles=user_roles,
        )
        raise ForbiddenError()

    return check_role


def require_admin(request: Request) -> dict[str, Any]:
    """Dependency that requires admin role."""
    return require_role([UserRole.ADMIN.value])(request)


def is_staff(user: dict[str, Any]) -> bool:
    """Whether the user holds ADMIN, ORG_ADMIN or RECRUITER."""
    user_roles = user.get("roles", [])
    return any(has_role(user_roles, role) for role in STAFF_ROLES)


def is_linked_user(user: dict[str, Any], *user_ids) -> bool:
    """Whether the token subject is one of the given linked user ids."""
    return str(user.get("sub")) in {str(uid) for uid in user_ids if uid is not None}
