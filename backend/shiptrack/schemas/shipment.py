"""Pydantic schemas for shipments and their workflow."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field, field_validator

from shiptrack.models.shipment import ShipmentStatus
from shiptrack.schemas.common import not_null
from shiptrack.schemas.importing import ImportingDetailsOut
from shiptrack.schemas.shipment_item import ShipmentItemOut


class ShipmentCreate(BaseModel):
    shipment_name: str = Field(..., min_length=1, max_length=255)
    shipment_number: str = Field(..., min_length=1, max_length=100)
    # Generated when omitted; only admins may supply their own
    backend_master_key: str | None = Field(None, min_length=1, max_length=100)


class ShipmentUpdate(BaseModel):
    """Status is not editable here; see /advance and /status."""
    shipment_name: str | None = Field(None, min_length=1, max_length=255)
    shipment_number: str | None = Field(None, min_length=1, max_length=100)
    backend_master_key: str | None = Field(None, min_length=1, max_length=100)

    model_config = {"extra": "forbid"}

    @field_validator("shipment_name", "shipment_number", "backend_master_key")
    @classmethod
    def fields_not_null(cls, value, info):
        return not_null(value, info.field_name)


class StatusUpdate(BaseModel):
    status: ShipmentStatus


class ShipmentSummary(BaseModel):
    id: str
    shipment_name: str
    shipment_number: str
    backend_master_key: str
    status: ShipmentStatus
    created_by_id: str | None
    updated_by_id: str | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ShipmentDetail(ShipmentSummary):
    items: list[ShipmentItemOut] = []
    importing_details: ImportingDetailsOut | None = None
    customs_availability: str
    next_status: ShipmentStatus | None = None
    total_ctn: int
    total_pcs: int
    total_price: Decimal
