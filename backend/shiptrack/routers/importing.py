"""Importing details (import costing) router.

Endpoints:
    GET /api/shipments/{id}/importing-details   Current details or null
    PUT /api/shipments/{id}/importing-details   Create or update
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from shiptrack.auth.deps import require_permission
from shiptrack.database import get_db
from shiptrack.models.user import User
from shiptrack.schemas.importing import ImportingDetailsIn, ImportingDetailsOut
from shiptrack.services.importing import upsert_importing_details
from shiptrack.services.shipments import get_shipment
from shiptrack.services.workflow import require_writable

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/{shipment_id}/importing-details", response_model=ImportingDetailsOut | None)
async def get_importing_details(
    shipment_id: str,
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(require_permission("importing.read")),
):
    shipment = await get_shipment(db, shipment_id)
    if shipment.importing_details is None:
        return None
    return ImportingDetailsOut.model_validate(shipment.importing_details)


@router.put("/{shipment_id}/importing-details", response_model=ImportingDetailsOut)
async def put_importing_details(
    shipment_id: str,
    body: ImportingDetailsIn,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_permission("importing.write")),
):
    """Save costing inputs; total price and commission are derived from the items."""
    shipment = await get_shipment(db, shipment_id)
    require_writable(shipment, "importing")

    details = upsert_importing_details(shipment, body)
    shipment.updated_by_id = user.id
    await db.flush()
    logger.info(
        "Importing details for shipment %s: total %s, commission %s",
        shipment.id, details.total_shipment_price, details.commission_amount,
    )
    return ImportingDetailsOut.model_validate(details)
