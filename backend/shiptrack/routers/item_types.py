"""Item type management router.

Endpoints:
    GET    /api/item-types/          List item types
    POST   /api/item-types/          Create item type
    GET    /api/item-types/{id}      Item type detail
    PATCH  /api/item-types/{id}      Update item type
    DELETE /api/item-types/{id}      Delete (refused while items or customs rows use it)
"""

from fastapi import APIRouter, Depends, Response
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from shiptrack.auth.deps import require_permission
from shiptrack.database import get_db
from shiptrack.middleware.exceptions import ResourceInUseError, ResourceNotFoundError
from shiptrack.models.customs import CustomsPerType
from shiptrack.models.item_type import ItemType
from shiptrack.models.shipment_item import ShipmentItem
from shiptrack.models.user import User
from shiptrack.schemas.item_type import ItemTypeCreate, ItemTypeOut, ItemTypeUpdate
from shiptrack.utils.activity import log_activity

router = APIRouter()


async def _get_item_type(db: AsyncSession, item_type_id: str) -> ItemType:
    item_type = await db.get(ItemType, item_type_id)
    if item_type is None:
        raise ResourceNotFoundError("Item type", item_type_id)
    return item_type


@router.get("/", response_model=list[ItemTypeOut])
async def list_item_types(
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(require_permission("item_type.read")),
):
    result = await db.execute(select(ItemType).order_by(ItemType.name))
    return [ItemTypeOut.model_validate(t) for t in result.scalars().all()]


@router.post("/", response_model=ItemTypeOut, status_code=201)
async def create_item_type(
    body: ItemTypeCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_permission("item_type.write")),
):
    item_type = ItemType(**body.model_dump())
    db.add(item_type)
    await db.flush()
    await log_activity(
        db, user,
        action="created", entity_type="item_type",
        entity_id=item_type.id, entity_code=item_type.name,
    )
    return ItemTypeOut.model_validate(item_type)


@router.get("/{item_type_id}", response_model=ItemTypeOut)
async def get_item_type(
    item_type_id: str,
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(require_permission("item_type.read")),
):
    return ItemTypeOut.model_validate(await _get_item_type(db, item_type_id))


@router.patch("/{item_type_id}", response_model=ItemTypeOut)
async def update_item_type(
    item_type_id: str,
    body: ItemTypeUpdate,
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(require_permission("item_type.write")),
):
    item_type = await _get_item_type(db, item_type_id)
    for key, value in body.model_dump(exclude_unset=True).items():
        setattr(item_type, key, value)
    await db.flush()
    return ItemTypeOut.model_validate(item_type)


@router.delete("/{item_type_id}", status_code=204)
async def delete_item_type(
    item_type_id: str,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_permission("item_type.delete")),
):
    item_type = await _get_item_type(db, item_type_id)

    items = await db.execute(
        select(func.count()).select_from(ShipmentItem).where(ShipmentItem.item_type_id == item_type.id)
    )
    item_count = items.scalar() or 0
    if item_count:
        raise ResourceInUseError("Item type", item_type.name, f"{item_count} shipment item(s)")

    rows = await db.execute(
        select(func.count()).select_from(CustomsPerType).where(CustomsPerType.item_type_id == item_type.id)
    )
    row_count = rows.scalar() or 0
    if row_count:
        raise ResourceInUseError("Item type", item_type.name, f"{row_count} customs row(s)")

    await db.delete(item_type)
    await log_activity(
        db, user,
        action="deleted", entity_type="item_type",
        entity_id=item_type.id, entity_code=item_type.name,
    )
    await db.flush()
    return Response(status_code=204)
