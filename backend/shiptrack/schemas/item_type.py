"""Pydantic schemas for ItemType CRUD operations."""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from shiptrack.schemas.common import not_null


class ItemTypeCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None


class ItemTypeUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None

    @field_validator("name")
    @classmethod
    def name_not_null(cls, value):
        return not_null(value, "name")


class ItemTypeOut(BaseModel):
    id: str
    name: str
    description: str | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
