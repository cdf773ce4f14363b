"""Shipment management router.

Endpoints:
    GET    /api/shipments/                List shipments (filters + pagination)
    POST   /api/shipments/                Create shipment (status CREATED)
    GET    /api/shipments/{id}            Detail with items, importing details, totals
    PATCH  /api/shipments/{id}            Update name / number (master key: admin only)
    DELETE /api/shipments/{id}            Delete shipment and everything it owns
    POST   /api/shipments/{id}/advance    Move one workflow step forward
    PATCH  /api/shipments/{id}/status     Set status directly (admin)
    GET    /api/shipments/{id}/qr         QR code SVG encoding the master key
"""

import io
import json
import logging

import segno
from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from shiptrack.auth.deps import require_permission
from shiptrack.auth.permissions import has_permission
from shiptrack.config import settings
from shiptrack.database import get_db
from shiptrack.middleware.exceptions import InvalidInputError, PermissionDeniedError
from shiptrack.models.shipment import Shipment, ShipmentStatus
from shiptrack.models.user import User
from shiptrack.schemas.common import PaginatedResponse
from shiptrack.schemas.shipment import (
    ShipmentCreate,
    ShipmentDetail,
    ShipmentSummary,
    ShipmentUpdate,
    StatusUpdate,
)
from shiptrack.services import workflow
from shiptrack.services.shipments import build_detail, get_shipment
from shiptrack.utils.activity import log_shipment_activity
from shiptrack.utils.master_key import master_key_in_use, next_master_key

logger = logging.getLogger(__name__)

router = APIRouter()


# ── GET /api/shipments/ ──────────────────────────────────────

@router.get("/", response_model=PaginatedResponse[ShipmentSummary])
async def list_shipments(
    status: ShipmentStatus | None = None,
    search: str | None = Query(None, description="Match name, number or master key"),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(require_permission("shipment.read")),
):
    """List shipments, newest first."""
    base = select(Shipment)
    if status:
        base = base.where(Shipment.status == status)
    if search:
        pattern = f"%{search}%"
        base = base.where(or_(
            Shipment.shipment_name.ilike(pattern),
            Shipment.shipment_number.ilike(pattern),
            Shipment.backend_master_key.ilike(pattern),
        ))

    total = (await db.execute(select(func.count()).select_from(base.subquery()))).scalar() or 0
    result = await db.execute(
        base.order_by(Shipment.created_at.desc(), Shipment.id).limit(limit).offset(offset)
    )
    return PaginatedResponse[ShipmentSummary](
        items=[ShipmentSummary.model_validate(s) for s in result.scalars().all()],
        total=total,
        limit=limit,
        offset=offset,
    )


# ── POST /api/shipments/ ─────────────────────────────────────

@router.post("/", response_model=ShipmentDetail, status_code=201)
async def create_shipment(
    body: ShipmentCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_permission("shipment.write")),
):
    """Create a shipment. The master key is generated unless an admin supplies one."""
    if body.backend_master_key is not None:
        if not has_permission(user.role, "shipment.master_key"):
            raise PermissionDeniedError()
        if await master_key_in_use(db, body.backend_master_key):
            raise InvalidInputError(
                f"Master key already in use: {body.backend_master_key}",
                error_code="DUPLICATE_MASTER_KEY",
            )
        master_key = body.backend_master_key
    else:
        master_key = await next_master_key(db)

    shipment = Shipment(
        shipment_name=body.shipment_name,
        shipment_number=body.shipment_number,
        backend_master_key=master_key,
        status=ShipmentStatus.CREATED,
        created_by_id=user.id,
        updated_by_id=user.id,
        items=[],
        importing_details=None,
        customs=None,
    )
    db.add(shipment)
    await db.flush()

    logger.info("Shipment %s created by %s (%s)", shipment.id, user.id, master_key)
    await log_shipment_activity(
        db, user, shipment, "created",
        summary=shipment.shipment_name,
    )
    return build_detail(shipment)


# ── GET /api/shipments/{shipment_id} ─────────────────────────

@router.get("/{shipment_id}", response_model=ShipmentDetail)
async def get_shipment_detail(
    shipment_id: str,
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(require_permission("shipment.read")),
):
    return build_detail(await get_shipment(db, shipment_id))


# ── PATCH /api/shipments/{shipment_id} ───────────────────────

@router.patch("/{shipment_id}", response_model=ShipmentDetail)
async def update_shipment(
    shipment_id: str,
    body: ShipmentUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_permission("shipment.write")),
):
    """Update header fields. Status changes go through /advance or /status."""
    shipment = await get_shipment(db, shipment_id)
    updates = body.model_dump(exclude_unset=True)

    new_key = updates.get("backend_master_key")
    if new_key is not None and new_key != shipment.backend_master_key:
        if not has_permission(user.role, "shipment.master_key"):
            raise PermissionDeniedError()
        if await master_key_in_use(db, new_key, exclude_id=shipment.id):
            raise InvalidInputError(
                f"Master key already in use: {new_key}",
                error_code="DUPLICATE_MASTER_KEY",
            )

    for key, value in updates.items():
        setattr(shipment, key, value)
    shipment.updated_by_id = user.id
    await db.flush()

    await log_shipment_activity(
        db, user, shipment, "updated",
        details={"fields": sorted(updates)},
    )
    return build_detail(shipment)


# ── DELETE /api/shipments/{shipment_id} ──────────────────────

@router.delete("/{shipment_id}", status_code=204)
async def delete_shipment(
    shipment_id: str,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_permission("shipment.delete")),
):
    """Delete a shipment with its items, importing details and customs."""
    shipment = await get_shipment(db, shipment_id)
    await db.delete(shipment)

    logger.info("Shipment %s deleted by %s", shipment.id, user.id)
    await log_shipment_activity(
        db, user, shipment, "deleted",
        summary=shipment.shipment_name,
    )
    await db.flush()
    return Response(status_code=204)


# ── Workflow ─────────────────────────────────────────────────

@router.post("/{shipment_id}/advance", response_model=ShipmentDetail)
async def advance_shipment(
    shipment_id: str,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_permission("shipment.advance")),
):
    """Advance to the next status. The final step needs an admin."""
    shipment = await get_shipment(db, shipment_id)
    await workflow.advance(db, shipment, user)
    await db.flush()
    return build_detail(shipment)


@router.patch("/{shipment_id}/status", response_model=ShipmentDetail)
async def set_shipment_status(
    shipment_id: str,
    body: StatusUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_permission("shipment.status_override")),
):
    shipment = await get_shipment(db, shipment_id)
    await workflow.overwrite_status(db, shipment, user, body.status)
    await db.flush()
    return build_detail(shipment)


# ── GET /api/shipments/{shipment_id}/qr ──────────────────────

@router.get("/{shipment_id}/qr")
async def get_shipment_qr(
    shipment_id: str,
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(require_permission("shipment.read")),
):
    """Return an SVG QR code carrying the shipment's master key."""
    shipment = await get_shipment(db, shipment_id)

    qr_data = json.dumps({
        "type": "shipment",
        "master_key": shipment.backend_master_key,
        "number": shipment.shipment_number,
        "status": shipment.status.value,
    }, separators=(",", ":"))

    qr = segno.make(qr_data)
    buf = io.BytesIO()
    qr.save(buf, kind="svg", scale=4, dark="#1d4ed8")
    return Response(content=buf.getvalue(), media_type="image/svg+xml")
