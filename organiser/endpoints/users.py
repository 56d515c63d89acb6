"""User management endpoints."""

from typing import Optional

import structlog
from fastapi import APIRouter, Depends, Query
from sqlalchemy import String, cast
from sqlalchemy.orm import Session

from organiser.config.database import get_db
from organiser.config.settings import settings
from organiser.middleware.error_handler import ForbiddenError, InvalidArgumentError, NotFoundError
from organiser.models import Organisation, User, UserRole
from organiser.schemas.base import PaginatedResponse, paginate_meta
from organiser.schemas.users import UserResponse, UserUpdate
from organiser.services.rbac import get_current_user, has_role, require_admin

logger = structlog.get_logger()
router = APIRouter()


def get_user_or_404(db: Session, user_id: int) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFoundError("User", user_id)
    return user


def is_self_or_admin(current_user: dict, user_id: int) -> bool:
    return (
        str(current_user.get("sub")) == str(user_id)
        or has_role(current_user.get("roles", []), UserRole.ADMIN.value)
    )


@router.get("", response_model=PaginatedResponse[UserResponse])
async def list_users(
    db: Session = Depends(get_db),
    page: int = Query(1, ge=1),
    per_page: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    role: Optional[UserRole] = Query(None),
    is_active: Optional[bool] = Query(None),
    current_user: dict = Depends(require_admin),
):
    """List users. Admin only."""
    query = db.query(User)
    if is_active is not None:
        query = query.filter(User.is_active == is_active)
    if role:
        # roles is a JSON list; match the quoted name in its text form
        query = query.filter(
            cast(User.roles, String).contains(f'"{role.value}"', autoescape=True)
        )

    total = query.count()
    page_items = (
        query.order_by(User.id)
        .offset((page - 1) * per_page)
        .limit(per_page)
        .all()
    )

    return PaginatedResponse(
        data=[UserResponse.model_validate(u) for u in page_items],
        meta=paginate_meta(page, per_page, total),
    )


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: dict = Depends(get_current_user),
):
    """Get a user. Users may read their own record; admins may read any."""
    if not is_self_or_admin(current_user, user_id):
        raise ForbiddenError()
    return UserResponse.model_validate(get_user_or_404(db, user_id))


@router.put("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: int,
    data: UserUpdate,
    db: Session = Depends(get_db),
    current_user: dict = Depends(get_current_user),
):
    """Update a user. Only admins may change roles, organisation or active flag."""
    if not is_self_or_admin(current_user, user_id):
        raise ForbiddenError()
    user = get_user_or_404(db, user_id)

    update_data = data.model_dump(exclude_unset=True)
    privileged = {"roles", "recruiter_id", "is_active"} & update_data.keys()
    if privileged and not has_role(current_user.get("roles", []), UserRole.ADMIN.value):
        raise ForbiddenError(f"Only admins may change: {', '.join(sorted(privileged))}")

    if update_data.get("recruiter_id") is not None:
        if not db.query(Organisation.id).filter(Organisation.id == update_data["recruiter_id"]).first():
            raise NotFoundError("Organisation", update_data["recruiter_id"])

    if "roles" in update_data:
        if not update_data["roles"]:
            raise InvalidArgumentError("A user needs at least one role", field="roles")
        update_data["roles"] = list(dict.fromkeys(r.value for r in data.roles))

    for key, value in update_data.items():
        if value is None and key in ("first_name", "is_active"):
            continue
        setattr(user, key, value)

    db.commit()
    db.refresh(user)

    logger.info("User updated", id=user.id, fields=list(update_data.keys()))
    return UserResponse.model_validate(user)


@router.delete("/{user_id}", status_code=204)
async def delete_user(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: dict = Depends(require_admin),
):
    """Delete a user. Admin only; admins cannot delete themselves."""
    if str(current_user.get("sub")) == str(user_id):
        raise InvalidArgumentError("You cannot delete your own account")
    user = get_user_or_404(db, user_id)

    db.delete(user)
    db.commit()

    logger.info("User deleted", id=user_id)
