"""Shipment line items router.

Endpoints:
    GET    /api/shipments/{id}/items              List items
    POST   /api/shipments/{id}/items              Add one item
    PUT    /api/shipments/{id}/items              Replace the item list (diff)
    PATCH  /api/shipments/{id}/items/{item_id}    Update one item
    DELETE /api/shipments/{id}/items/{item_id}    Remove one item
"""

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from shiptrack.auth.deps import require_permission
from shiptrack.database import get_db
from shiptrack.middleware.exceptions import ResourceNotFoundError
from shiptrack.models.shipment import Shipment
from shiptrack.models.user import User
from shiptrack.schemas.shipment_item import (
    BulkItemsRequest,
    ShipmentItemIn,
    ShipmentItemOut,
    ShipmentItemUpdate,
)
from shiptrack.services import items as item_service
from shiptrack.services.shipments import get_shipment
from shiptrack.services.workflow import require_writable
from shiptrack.utils.activity import log_shipment_activity

router = APIRouter()


def _find_or_404(shipment: Shipment, item_id: str):
    item = item_service.find_item(shipment, item_id)
    if item is None:
        raise ResourceNotFoundError("Shipment item", item_id)
    return item


@router.get("/{shipment_id}/items", response_model=list[ShipmentItemOut])
async def list_items(
    shipment_id: str,
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(require_permission("item.read")),
):
    shipment = await get_shipment(db, shipment_id)
    return [ShipmentItemOut.model_validate(i) for i in shipment.items]


@router.post("/{shipment_id}/items", response_model=ShipmentItemOut, status_code=201)
async def add_item(
    shipment_id: str,
    body: ShipmentItemIn,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_permission("item.write")),
):
    """Add a line item. cou and total are computed here."""
    shipment = await get_shipment(db, shipment_id)
    require_writable(shipment, "items")

    item = await item_service.add_item(db, shipment, body)
    shipment.updated_by_id = user.id
    await db.flush()
    return ShipmentItemOut.model_validate(item)


@router.put("/{shipment_id}/items", response_model=list[ShipmentItemOut])
async def replace_items(
    shipment_id: str,
    body: BulkItemsRequest,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_permission("item.write")),
):
    """Replace the whole item list in one transaction.

    Rows with a known id update that item, rows without one are inserted,
    and existing items missing from the body are deleted.
    """
    shipment = await get_shipment(db, shipment_id)
    require_writable(shipment, "items")

    items = await item_service.replace_items(db, shipment, body.items)
    shipment.updated_by_id = user.id
    await db.flush()

    await log_shipment_activity(
        db, user, shipment, "items_replaced",
        summary=f"{len(items)} item(s)",
    )
    return [ShipmentItemOut.model_validate(i) for i in items]


@router.patch("/{shipment_id}/items/{item_id}", response_model=ShipmentItemOut)
async def update_item(
    shipment_id: str,
    item_id: str,
    body: ShipmentItemUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_permission("item.write")),
):
    shipment = await get_shipment(db, shipment_id)
    require_writable(shipment, "items")
    item = _find_or_404(shipment, item_id)

    await item_service.update_item(db, shipment, item, body)
    shipment.updated_by_id = user.id
    await db.flush()
    return ShipmentItemOut.model_validate(item)


@router.delete("/{shipment_id}/items/{item_id}", status_code=204)
async def delete_item(
    shipment_id: str,
    item_id: str,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_permission("item.write")),
):
    shipment = await get_shipment(db, shipment_id)
    require_writable(shipment, "items")
    item = _find_or_404(shipment, item_id)

    item_service.remove_item(shipment, item)
    shipment.updated_by_id = user.id
    await db.flush()
    return Response(status_code=204)
