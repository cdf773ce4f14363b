"""Audit trail entries for ShipTrack writes.

Entries are added to the request's session and commit or roll back with
the change they describe. Shipment-level events (creation, edits, item
replacement, status moves) go through `log_shipment_activity`, which
keys the entry by shipment id and shipment number.
"""

from __future__ import annotations

from typing import Literal

from sqlalchemy.ext.asyncio import AsyncSession

from shiptrack.models.activity_log import ActivityLog
from shiptrack.models.shipment import Shipment
from shiptrack.models.user import User

EntityType = Literal["shipment", "supplier", "item_type", "customs", "user"]
Action = Literal[
    "created", "updated", "deleted", "status_changed", "items_replaced", "role_changed",
]


async def log_activity(
    db: AsyncSession,
    user: User,
    *,
    action: Action,
    entity_type: EntityType,
    entity_id: str | None = None,
    entity_code: str | None = None,
    summary: str | None = None,
    details: dict | None = None,
) -> ActivityLog:
    entry = ActivityLog(
        user_id=user.id,
        user_name=user.full_name,
        action=action,
        entity_type=entity_type,
        entity_id=entity_id,
        entity_code=entity_code,
        summary=summary,
        details=details,
    )
    db.add(entry)
    return entry


async def log_shipment_activity(
    db: AsyncSession,
    user: User,
    shipment: Shipment,
    action: Action,
    *,
    summary: str | None = None,
    details: dict | None = None,
) -> ActivityLog:
    """Record an event on `shipment`, identified by its shipment number."""
    return await log_activity(
        db, user,
        action=action,
        entity_type="shipment",
        entity_id=shipment.id,
        entity_code=shipment.shipment_number,
        summary=summary,
        details=details,
    )
