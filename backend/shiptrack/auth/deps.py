"""FastAPI dependencies for authentication and authorization.

Dependencies:
  get_current_user        → decode bearer token, upsert the user, return User
  require_permission(...) → restrict to roles holding ALL listed permissions

The returned User is the request-scoped identity; handlers pass it on to
services instead of reading any global session state.
"""

import logging

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from shiptrack.auth.jwt import decode_token
from shiptrack.auth.permissions import has_permission
from shiptrack.config import settings
from shiptrack.database import get_db
from shiptrack.middleware.exceptions import AuthenticationError, PermissionDeniedError
from shiptrack.models.user import User, UserRole

logger = logging.getLogger(__name__)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl=settings.identity_token_url, auto_error=False)

PROFILE_CLAIMS = ("email", "first_name", "last_name", "profile_image_url")


# ── Core user dependency ────────────────────────────────────

async def get_current_user(
    token: str | None = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Decode the token and return the matching user, creating it on first login.

    Profile fields always follow the identity provider's claims. A new
    user starts as VIEWER unless their e-mail is in INITIAL_ADMIN_EMAILS.
    """
    if not token:
        raise AuthenticationError()

    payload = decode_token(token)
    user_id: str | None = payload.get("sub")
    if not user_id or payload.get("type", "access") != "access":
        raise AuthenticationError("Invalid or expired token")

    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()

    if user is None:
        email = payload.get("email")
        role = (
            UserRole.ADMIN
            if email and email.lower() in settings.initial_admins
            else UserRole.VIEWER
        )
        user = User(id=user_id, role=role)
        db.add(user)
        logger.info("First login for user %s, role %s", user_id, role.value)

    for claim in PROFILE_CLAIMS:
        if claim in payload and getattr(user, claim) != payload[claim]:
            setattr(user, claim, payload[claim])

    await db.flush()
    return user


# ── Permission-based access control ─────────────────────────

def require_permission(*perms: str):
    """Dependency factory: restrict to users whose role holds ALL listed permissions.

    The role is read from the DB row loaded by get_current_user, so a role
    change applies from the user's next request.

    Usage:
        @router.post("/suppliers")
        async def create_supplier(user: User = Depends(require_permission("supplier.write"))):
            ...
    """
    async def _check(user: User = Depends(get_current_user)) -> User:
        missing = [p for p in perms if not has_permission(user.role, p)]
        if missing:
            logger.info(
                "Denied %s (role %s) missing %s", user.id, user.role.value, ", ".join(missing)
            )
            raise PermissionDeniedError()
        return user

    return _check
