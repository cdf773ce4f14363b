"""Pydantic schemas for shipment line items.

`cou` and `total` are output-only. If a client sends them they are ignored
and recomputed from ctn, pcs_per_ctn and pri.

Counts and unit price are capped so that cou fits a 32-bit integer column
and a line total fits Numeric(18, 2).
"""

from datetime import datetime
from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, Field, field_validator, model_validator

from shiptrack.schemas.common import NamedRef, not_null

MAX_CTN = 100_000
MAX_PCS_PER_CTN = 10_000
# MAX_CTN × MAX_PCS_PER_CTN × MAX_UNIT_PRICE < 10**16
MAX_UNIT_PRICE = Decimal("9999999.99")

Cartons = Annotated[int, Field(ge=0, le=MAX_CTN)]
PiecesPerCarton = Annotated[int, Field(ge=0, le=MAX_PCS_PER_CTN)]
UnitPrice = Annotated[Decimal, Field(ge=0, le=MAX_UNIT_PRICE, max_digits=18, decimal_places=2)]


class ShipmentItemIn(BaseModel):
    supplier_id: str
    item_type_id: str
    item_photo_url: str | None = None
    ctn: Cartons = 0
    pcs_per_ctn: PiecesPerCarton = 0
    pri: UnitPrice = Decimal("0")


class ShipmentItemUpdate(BaseModel):
    supplier_id: str | None = None
    item_type_id: str | None = None
    item_photo_url: str | None = None
    ctn: Cartons | None = None
    pcs_per_ctn: PiecesPerCarton | None = None
    pri: UnitPrice | None = None

    @field_validator("supplier_id", "item_type_id", "ctn", "pcs_per_ctn", "pri")
    @classmethod
    def required_not_null(cls, value, info):
        return not_null(value, info.field_name)


class BulkItemRow(ShipmentItemIn):
    # Present → update that item; absent or unknown → insert a new one
    id: str | None = None


class BulkItemsRequest(BaseModel):
    items: list[BulkItemRow]

    @model_validator(mode="after")
    def unique_ids(self):
        seen: set[str] = set()
        for row in self.items:
            if row.id is None:
                continue
            if row.id in seen:
                raise ValueError(f"Item {row.id} appears more than once")
            seen.add(row.id)
        return self


class ShipmentItemOut(BaseModel):
    id: str
    shipment_id: str
    supplier_id: str
    item_type_id: str
    supplier: NamedRef | None = None
    item_type: NamedRef | None = None
    item_photo_url: str | None
    ctn: int
    pcs_per_ctn: int
    cou: int
    pri: Decimal
    total: Decimal
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
