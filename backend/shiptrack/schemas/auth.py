"""Pydantic schemas for the signed-in user and user management."""

from datetime import datetime

from pydantic import BaseModel

from shiptrack.models.user import UserRole


class UserOut(BaseModel):
    id: str
    email: str | None
    first_name: str | None
    last_name: str | None
    profile_image_url: str | None
    role: UserRole
    created_at: datetime

    model_config = {"from_attributes": True}


class CurrentUserOut(UserOut):
    permissions: list[str]


class RoleUpdate(BaseModel):
    role: UserRole
