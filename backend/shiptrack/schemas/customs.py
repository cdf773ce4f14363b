"""Pydantic schemas for customs reconciliation."""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, Field, field_validator

from shiptrack.schemas.common import Money, NamedRef, not_null

# BigInteger column
MAX_PIECES = 2**63 - 1


# ── Per item type ────────────────────────────────────────────

class CustomsPerTypeCreate(BaseModel):
    """Piece and carton totals are snapshotted from the items, not sent."""
    item_type_id: str
    paid_customs: Money = Decimal("0")
    takhreg: Money = Decimal("0")


class CustomsPerTypeUpdate(BaseModel):
    paid_customs: Money | None = None
    takhreg: Money | None = None

    @field_validator("paid_customs", "takhreg")
    @classmethod
    def fees_not_null(cls, value, info):
        return not_null(value, info.field_name)


class CustomsPerTypeFees(BaseModel):
    item_type_id: str
    paid_customs: Money = Decimal("0")
    takhreg: Money = Decimal("0")


class CustomsPerTypeOut(BaseModel):
    id: str
    customs_id: str
    item_type_id: str
    item_type: NamedRef | None = None
    total_pcs_per_type: int
    total_ctn_per_type: int
    paid_customs: Decimal
    takhreg: Decimal

    model_config = {"from_attributes": True}


# ── Customs record ───────────────────────────────────────────

class CustomsUpdate(BaseModel):
    """Upsert body. loss_or_damage_pieces is derived; recorded is a snapshot."""
    bill_date: date | None = None
    total_pieces_adjusted: int | None = Field(None, ge=0, le=MAX_PIECES)
    per_type: list[CustomsPerTypeFees] = []

    @field_validator("total_pieces_adjusted")
    @classmethod
    def adjusted_not_null(cls, value):
        return not_null(value, "total_pieces_adjusted")


class CustomsOut(BaseModel):
    id: str
    shipment_id: str
    bill_date: date | None
    total_pieces_recorded: int
    total_pieces_adjusted: int
    loss_or_damage_pieces: int
    per_type: list[CustomsPerTypeOut]
    total_paid_customs: Decimal
    total_paid_takhreg: Decimal
    created_at: datetime
    updated_at: datetime


class CustomsView(BaseModel):
    """GET /shipments/{id}/customs: customs data only when available."""
    shipment_id: str
    status: str
    availability: str
    customs: CustomsOut | None = None


class CustomsSummaryRow(BaseModel):
    id: str
    shipment_id: str
    shipment_name: str
    shipment_number: str
    bill_date: date | None
    total_pieces_recorded: int
    total_pieces_adjusted: int
    loss_or_damage_pieces: int
    total_paid_customs: Decimal
    total_paid_takhreg: Decimal
