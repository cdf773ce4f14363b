"""Signed-in user endpoint.

Tokens are issued by the external identity provider; this router only
reports who the bearer is and what their role allows.

Endpoints:
    GET /api/auth/user   Current user with effective permissions
"""

from fastapi import APIRouter, Depends

from shiptrack.auth.deps import get_current_user
from shiptrack.auth.permissions import resolve_permissions
from shiptrack.models.user import User
from shiptrack.schemas.auth import CurrentUserOut, UserOut

router = APIRouter()


@router.get("/user", response_model=CurrentUserOut)
async def get_me(user: User = Depends(get_current_user)):
    """Return the current user, created on first call."""
    return CurrentUserOut(
        **UserOut.model_validate(user).model_dump(),
        permissions=resolve_permissions(user.role),
    )
