"""User management (admin only).

Endpoints:
    GET   /api/users/              List users
    PATCH /api/users/{id}/role     Change a user's role
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from shiptrack.auth.deps import require_permission
from shiptrack.database import get_db
from shiptrack.middleware.exceptions import InvalidInputError, ResourceNotFoundError
from shiptrack.models.user import User
from shiptrack.schemas.auth import RoleUpdate, UserOut
from shiptrack.utils.activity import log_activity

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/", response_model=list[UserOut])
async def list_users(
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(require_permission("users.read")),
):
    result = await db.execute(select(User).order_by(User.created_at))
    return [UserOut.model_validate(u) for u in result.scalars().all()]


@router.patch("/{user_id}/role", response_model=UserOut)
async def update_role(
    user_id: str,
    body: RoleUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_permission("users.manage")),
):
    """Assign a role. Admins cannot change their own role."""
    if user_id == user.id:
        raise InvalidInputError("You cannot change your own role", error_code="SELF_ROLE_CHANGE")

    target = await db.get(User, user_id)
    if target is None:
        raise ResourceNotFoundError("User", user_id)

    previous = target.role
    if previous != body.role:
        target.role = body.role
        logger.info("Role of %s changed %s -> %s by %s", target.id, previous.value, body.role.value, user.id)
        await log_activity(
            db, user,
            action="role_changed",
            entity_type="user",
            entity_id=target.id,
            entity_code=target.email,
            summary=f"{previous.value} → {body.role.value}",
        )
    await db.flush()
    return UserOut.model_validate(target)
