"""Pydantic schemas for import costing (importing details)."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel

from shiptrack.schemas.common import Money, Percent, SquareMeters


class ImportingDetailsIn(BaseModel):
    """Upsert body. total_shipment_price and commission_amount are derived."""
    commission_percent: Percent = Decimal("0")
    shipment_cost: Money = Decimal("0")
    shipment_space_m2: SquareMeters = Decimal("0")


class ImportingDetailsOut(BaseModel):
    id: str
    shipment_id: str
    total_shipment_price: Decimal
    commission_percent: Decimal
    commission_amount: Decimal
    shipment_cost: Decimal
    shipment_space_m2: Decimal
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
