"""Supplier management router.

Endpoints:
    GET    /api/suppliers/          List suppliers (optional name search)
    POST   /api/suppliers/          Create supplier
    GET    /api/suppliers/{id}      Supplier detail
    PATCH  /api/suppliers/{id}      Update supplier
    DELETE /api/suppliers/{id}      Delete supplier (refused while items use it)
"""

from fastapi import APIRouter, Depends, Response
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from shiptrack.auth.deps import require_permission
from shiptrack.database import get_db
from shiptrack.middleware.exceptions import ResourceInUseError, ResourceNotFoundError
from shiptrack.models.shipment_item import ShipmentItem
from shiptrack.models.supplier import Supplier
from shiptrack.models.user import User
from shiptrack.schemas.supplier import SupplierCreate, SupplierOut, SupplierUpdate
from shiptrack.utils.activity import log_activity

router = APIRouter()


async def _get_supplier(db: AsyncSession, supplier_id: str) -> Supplier:
    supplier = await db.get(Supplier, supplier_id)
    if supplier is None:
        raise ResourceNotFoundError("Supplier", supplier_id)
    return supplier


@router.get("/", response_model=list[SupplierOut])
async def list_suppliers(
    search: str | None = None,
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(require_permission("supplier.read")),
):
    query = select(Supplier)
    if search:
        query = query.where(Supplier.name.ilike(f"%{search}%"))
    result = await db.execute(query.order_by(Supplier.name))
    return [SupplierOut.model_validate(s) for s in result.scalars().all()]


@router.post("/", response_model=SupplierOut, status_code=201)
async def create_supplier(
    body: SupplierCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_permission("supplier.write")),
):
    supplier = Supplier(**body.model_dump())
    db.add(supplier)
    await db.flush()
    await log_activity(
        db, user,
        action="created", entity_type="supplier",
        entity_id=supplier.id, entity_code=supplier.name,
    )
    return SupplierOut.model_validate(supplier)


@router.get("/{supplier_id}", response_model=SupplierOut)
async def get_supplier(
    supplier_id: str,
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(require_permission("supplier.read")),
):
    return SupplierOut.model_validate(await _get_supplier(db, supplier_id))


@router.patch("/{supplier_id}", response_model=SupplierOut)
async def update_supplier(
    supplier_id: str,
    body: SupplierUpdate,
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(require_permission("supplier.write")),
):
    supplier = await _get_supplier(db, supplier_id)
    for key, value in body.model_dump(exclude_unset=True).items():
        setattr(supplier, key, value)
    await db.flush()
    return SupplierOut.model_validate(supplier)


@router.delete("/{supplier_id}", status_code=204)
async def delete_supplier(
    supplier_id: str,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_permission("supplier.delete")),
):
    supplier = await _get_supplier(db, supplier_id)

    in_use = await db.execute(
        select(func.count()).select_from(ShipmentItem).where(ShipmentItem.supplier_id == supplier.id)
    )
    count = in_use.scalar() or 0
    if count:
        raise ResourceInUseError("Supplier", supplier.name, f"{count} shipment item(s)")

    await db.delete(supplier)
    await log_activity(
        db, user,
        action="deleted", entity_type="supplier",
        entity_id=supplier.id, entity_code=supplier.name,
    )
    await db.flush()
    return Response(status_code=204)
