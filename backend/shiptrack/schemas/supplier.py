"""Pydantic schemas for Supplier CRUD operations."""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from shiptrack.schemas.common import not_null


class SupplierCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    contact_info: str | None = None
    default_country: str | None = Field(None, max_length=100)


class SupplierUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    contact_info: str | None = None
    default_country: str | None = Field(None, max_length=100)

    @field_validator("name")
    @classmethod
    def name_not_null(cls, value):
        return not_null(value, "name")


class SupplierOut(BaseModel):
    id: str
    name: str
    contact_info: str | None
    default_country: str | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
