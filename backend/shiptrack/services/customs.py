"""Customs reconciliation: piece adjustment, per-type duty rows, summaries."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from shiptrack.middleware.exceptions import (
    InvalidInputError,
    ResourceNotFoundError,
    WorkflowError,
)
from shiptrack.models.customs import Customs, CustomsPerType
from shiptrack.models.item_type import ItemType
from shiptrack.models.shipment import Shipment
from shiptrack.schemas.customs import (
    CustomsOut,
    CustomsPerTypeCreate,
    CustomsPerTypeOut,
    CustomsPerTypeUpdate,
    CustomsSummaryRow,
    CustomsUpdate,
)
from shiptrack.services import calculator
from shiptrack.services.workflow import ensure_customs


def build_customs_out(customs: Customs) -> CustomsOut:
    return CustomsOut(
        id=customs.id,
        shipment_id=customs.shipment_id,
        bill_date=customs.bill_date,
        total_pieces_recorded=customs.total_pieces_recorded,
        total_pieces_adjusted=customs.total_pieces_adjusted,
        loss_or_damage_pieces=customs.loss_or_damage_pieces,
        per_type=[CustomsPerTypeOut.model_validate(r) for r in customs.per_type],
        total_paid_customs=calculator.total_paid_customs(customs.per_type),
        total_paid_takhreg=calculator.total_paid_takhreg(customs.per_type),
        created_at=customs.created_at,
        updated_at=customs.updated_at,
    )


def _row_for_type(customs: Customs, item_type_id: str) -> CustomsPerType | None:
    return next((r for r in customs.per_type if r.item_type_id == item_type_id), None)


def update_customs(shipment: Shipment, body: CustomsUpdate) -> Customs:
    """Apply bill date, adjusted pieces and per-type fees.

    The caller has already checked the shipment is CUSTOMS_RECEIVED. The
    record normally exists from that transition; if not, it is seeded now.
    """
    customs = ensure_customs(shipment)
    data = body.model_dump(exclude_unset=True, include={"bill_date", "total_pieces_adjusted"})

    if "bill_date" in data:
        customs.bill_date = data["bill_date"]
    if "total_pieces_adjusted" in data:
        customs.total_pieces_adjusted = data["total_pieces_adjusted"]
    customs.loss_or_damage_pieces = calculator.loss_or_damage(
        customs.total_pieces_recorded, customs.total_pieces_adjusted
    )

    for fees in body.per_type:
        row = _row_for_type(customs, fees.item_type_id)
        if row is None:
            raise InvalidInputError(
                f"No customs row for item type {fees.item_type_id} on this shipment"
            )
        row.paid_customs = calculator.money(fees.paid_customs)
        row.takhreg = calculator.money(fees.takhreg)

    return customs


async def add_per_type_row(
    db: AsyncSession,
    shipment: Shipment,
    body: CustomsPerTypeCreate,
) -> CustomsPerType:
    """Add a duty row for an item type present on the shipment but not yet listed."""
    customs = shipment.customs
    item_type = await db.get(ItemType, body.item_type_id)
    if item_type is None:
        raise InvalidInputError(f"Unknown item type: {body.item_type_id}")

    totals = calculator.totals_per_item_type(shipment.items)
    if body.item_type_id not in totals:
        raise InvalidInputError(f"Item type {item_type.name} is not on this shipment")
    if _row_for_type(customs, body.item_type_id) is not None:
        raise WorkflowError(
            f"Customs already has a row for item type {item_type.name}",
            error_code="DUPLICATE_ITEM_TYPE",
        )

    pcs, ctn = totals[body.item_type_id]
    row = CustomsPerType(
        item_type_id=item_type.id,
        item_type=item_type,
        total_pcs_per_type=pcs,
        total_ctn_per_type=ctn,
        paid_customs=calculator.money(body.paid_customs),
        takhreg=calculator.money(body.takhreg),
    )
    customs.per_type.append(row)
    return row


def find_per_type_row(customs: Customs, row_id: str) -> CustomsPerType:
    row = next((r for r in customs.per_type if r.id == row_id), None)
    if row is None:
        raise ResourceNotFoundError("Customs per-type row", row_id)
    return row


def update_per_type_row(row: CustomsPerType, body: CustomsPerTypeUpdate) -> CustomsPerType:
    data = body.model_dump(exclude_unset=True)
    if "paid_customs" in data:
        row.paid_customs = calculator.money(data["paid_customs"])
    if "takhreg" in data:
        row.takhreg = calculator.money(data["takhreg"])
    return row


async def customs_summary(db: AsyncSession) -> list[CustomsSummaryRow]:
    """One row per customs record with its shipment and fee totals."""
    result = await db.execute(
        select(Customs, Shipment.shipment_name, Shipment.shipment_number)
        .join(Shipment, Customs.shipment_id == Shipment.id)
        .order_by(Customs.created_at.desc())
    )
    rows = []
    for customs, shipment_name, shipment_number in result.all():
        rows.append(CustomsSummaryRow(
            id=customs.id,
            shipment_id=customs.shipment_id,
            shipment_name=shipment_name,
            shipment_number=shipment_number,
            bill_date=customs.bill_date,
            total_pieces_recorded=customs.total_pieces_recorded,
            total_pieces_adjusted=customs.total_pieces_adjusted,
            loss_or_damage_pieces=customs.loss_or_damage_pieces,
            total_paid_customs=calculator.total_paid_customs(customs.per_type),
            total_paid_takhreg=calculator.total_paid_takhreg(customs.per_type),
        ))
    return rows
