"""Customs reconciliation router.

Customs data exists, and can be edited, only once the shipment is
CUSTOMS_RECEIVED; earlier the view reports the availability stage only.

Endpoints:
    GET    /api/shipments/{id}/customs                  Availability + customs record
    PUT    /api/shipments/{id}/customs                  Bill date, adjusted pieces, fees
    GET    /api/customs/summary                         Customs totals across shipments
    POST   /api/customs/{customs_id}/per-type           Add a per-type duty row
    PATCH  /api/customs/{customs_id}/per-type/{row_id}  Update fees on a row
    DELETE /api/customs/{customs_id}/per-type/{row_id}  Remove a row
"""

from fastapi import APIRouter, Depends, Response
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from shiptrack.auth.deps import require_permission
from shiptrack.database import get_db
from shiptrack.middleware.exceptions import ResourceNotFoundError
from shiptrack.models.customs import Customs
from shiptrack.models.shipment import Shipment
from shiptrack.models.user import User
from shiptrack.schemas.customs import (
    CustomsOut,
    CustomsPerTypeCreate,
    CustomsPerTypeOut,
    CustomsPerTypeUpdate,
    CustomsSummaryRow,
    CustomsUpdate,
    CustomsView,
)
from shiptrack.services import customs as customs_service
from shiptrack.services.shipments import get_shipment
from shiptrack.services.workflow import (
    CustomsAvailability,
    customs_availability,
    require_writable,
)
from shiptrack.utils.activity import log_activity

router = APIRouter()


async def _shipment_for_customs(db: AsyncSession, customs_id: str) -> Shipment:
    result = await db.execute(
        select(Shipment).join(Customs, Customs.shipment_id == Shipment.id).where(Customs.id == customs_id)
    )
    shipment = result.scalar_one_or_none()
    if shipment is None:
        raise ResourceNotFoundError("Customs", customs_id)
    return shipment


# ── Per shipment ─────────────────────────────────────────────

@router.get("/shipments/{shipment_id}/customs", response_model=CustomsView)
async def get_customs(
    shipment_id: str,
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(require_permission("customs.read")),
):
    shipment = await get_shipment(db, shipment_id)
    availability = customs_availability(shipment.status)

    customs = None
    if availability == CustomsAvailability.AVAILABLE and shipment.customs is not None:
        customs = customs_service.build_customs_out(shipment.customs)

    return CustomsView(
        shipment_id=shipment.id,
        status=shipment.status.value,
        availability=availability.value,
        customs=customs,
    )


@router.put("/shipments/{shipment_id}/customs", response_model=CustomsOut)
async def put_customs(
    shipment_id: str,
    body: CustomsUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_permission("customs.write")),
):
    """Record bill date, counted pieces and per-type fees; loss is derived."""
    shipment = await get_shipment(db, shipment_id)
    require_writable(shipment, "customs")

    customs = customs_service.update_customs(shipment, body)
    shipment.updated_by_id = user.id
    await db.flush()

    await log_activity(
        db, user,
        action="updated", entity_type="customs",
        entity_id=customs.id, entity_code=shipment.shipment_number,
        summary=f"adjusted {customs.total_pieces_adjusted}, loss {customs.loss_or_damage_pieces}",
    )
    return customs_service.build_customs_out(customs)


# ── Across shipments ─────────────────────────────────────────

@router.get("/customs/summary", response_model=list[CustomsSummaryRow])
async def get_customs_summary(
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(require_permission("customs.read")),
):
    return await customs_service.customs_summary(db)


# ── Per-type rows ────────────────────────────────────────────

@router.post(
    "/customs/{customs_id}/per-type",
    response_model=CustomsPerTypeOut,
    status_code=201,
)
async def add_per_type(
    customs_id: str,
    body: CustomsPerTypeCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_permission("customs.write")),
):
    shipment = await _shipment_for_customs(db, customs_id)
    require_writable(shipment, "customs")

    row = await customs_service.add_per_type_row(db, shipment, body)
    shipment.updated_by_id = user.id
    await db.flush()
    return CustomsPerTypeOut.model_validate(row)


@router.patch("/customs/{customs_id}/per-type/{row_id}", response_model=CustomsPerTypeOut)
async def update_per_type(
    customs_id: str,
    row_id: str,
    body: CustomsPerTypeUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_permission("customs.write")),
):
    shipment = await _shipment_for_customs(db, customs_id)
    require_writable(shipment, "customs")

    row = customs_service.find_per_type_row(shipment.customs, row_id)
    customs_service.update_per_type_row(row, body)
    shipment.updated_by_id = user.id
    await db.flush()
    return CustomsPerTypeOut.model_validate(row)


@router.delete("/customs/{customs_id}/per-type/{row_id}", status_code=204)
async def delete_per_type(
    customs_id: str,
    row_id: str,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_permission("customs.write")),
):
    shipment = await _shipment_for_customs(db, customs_id)
    require_writable(shipment, "customs")

    row = customs_service.find_per_type_row(shipment.customs, row_id)
    shipment.customs.per_type.remove(row)
    shipment.updated_by_id = user.id
    await db.flush()
    return Response(status_code=204)
