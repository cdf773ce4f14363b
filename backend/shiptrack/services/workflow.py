"""Shipment workflow state machine.

    CREATED → IMPORTING_DETAILS_DONE → CUSTOMS_IN_PROGRESS → CUSTOMS_RECEIVED

Strictly linear and forward-only. `advance()` moves one step; the last
step (customs received) needs `shipment.receive_customs`, every other step
`shipment.advance`. `overwrite_status()` is the admin escape hatch: it can
jump forward, and moves backward only when ALLOW_STATUS_ROLLBACK is set.

Sub-resource gates:
  items, importing details   writable in every status
  customs, customs-per-type  visible and writable only in CUSTOMS_RECEIVED

Reaching CUSTOMS_RECEIVED creates the Customs record exactly once, with the
recorded piece count snapshotted from the current items.
"""

import enum
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from shiptrack.auth.permissions import has_permission
from shiptrack.config import settings
from shiptrack.middleware.exceptions import PermissionDeniedError, WorkflowError
from shiptrack.models.customs import Customs, CustomsPerType
from shiptrack.models.shipment import Shipment, ShipmentStatus
from shiptrack.models.user import User
from shiptrack.services import calculator
from shiptrack.utils.activity import log_shipment_activity

logger = logging.getLogger(__name__)

STATUS_ORDER: list[ShipmentStatus] = [
    ShipmentStatus.CREATED,
    ShipmentStatus.IMPORTING_DETAILS_DONE,
    ShipmentStatus.CUSTOMS_IN_PROGRESS,
    ShipmentStatus.CUSTOMS_RECEIVED,
]

SUCCESSORS: dict[ShipmentStatus, ShipmentStatus] = {
    ShipmentStatus.CREATED: ShipmentStatus.IMPORTING_DETAILS_DONE,
    ShipmentStatus.IMPORTING_DETAILS_DONE: ShipmentStatus.CUSTOMS_IN_PROGRESS,
    ShipmentStatus.CUSTOMS_IN_PROGRESS: ShipmentStatus.CUSTOMS_RECEIVED,
}

# Permission needed to advance *from* a status
ADVANCE_PERMISSIONS: dict[ShipmentStatus, str] = {
    ShipmentStatus.CREATED: "shipment.advance",
    ShipmentStatus.IMPORTING_DETAILS_DONE: "shipment.advance",
    ShipmentStatus.CUSTOMS_IN_PROGRESS: "shipment.receive_customs",
}

WRITABLE_IN: dict[str, frozenset[ShipmentStatus]] = {
    "items": frozenset(STATUS_ORDER),
    "importing": frozenset(STATUS_ORDER),
    "customs": frozenset({ShipmentStatus.CUSTOMS_RECEIVED}),
}


class CustomsAvailability(str, enum.Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    AVAILABLE = "available"


# ── Pure rules ──────────────────────────────────────────────

def next_status(status: ShipmentStatus) -> ShipmentStatus | None:
    """Successor of `status`, or None when it is terminal."""
    return SUCCESSORS.get(status)


def status_rank(status: ShipmentStatus) -> int:
    return STATUS_ORDER.index(status)


def can_advance(status: ShipmentStatus, role) -> bool:
    perm = ADVANCE_PERMISSIONS.get(status)
    return perm is not None and has_permission(role, perm)


def customs_availability(status: ShipmentStatus) -> CustomsAvailability:
    if status == ShipmentStatus.CUSTOMS_RECEIVED:
        return CustomsAvailability.AVAILABLE
    if status == ShipmentStatus.CUSTOMS_IN_PROGRESS:
        return CustomsAvailability.IN_PROGRESS
    return CustomsAvailability.NOT_STARTED


def require_writable(shipment: Shipment, sub_resource: str) -> None:
    """Raise WorkflowError if `sub_resource` can't be edited in the current status."""
    if shipment.status in WRITABLE_IN[sub_resource]:
        return
    if sub_resource == "customs":
        if customs_availability(shipment.status) == CustomsAvailability.IN_PROGRESS:
            message = "Customs is in progress and not yet available"
        else:
            message = "Customs has not started for this shipment"
        raise WorkflowError(message, error_code="CUSTOMS_NOT_AVAILABLE")
    raise WorkflowError(
        f"{sub_resource} cannot be edited while shipment is {shipment.status.value}"
    )


# ── Transitions ─────────────────────────────────────────────

async def advance(db: AsyncSession, shipment: Shipment, actor: User) -> Shipment:
    """Move the shipment one step forward."""
    target = next_status(shipment.status)
    if target is None:
        raise WorkflowError(
            f"Shipment is already {shipment.status.value}; no further status",
            error_code="TERMINAL_STATUS",
        )
    if not has_permission(actor.role, ADVANCE_PERMISSIONS[shipment.status]):
        raise PermissionDeniedError()

    await _transition(db, shipment, target, actor, via="advance")
    return shipment


async def overwrite_status(
    db: AsyncSession,
    shipment: Shipment,
    actor: User,
    target: ShipmentStatus,
) -> Shipment:
    """Set an explicit status (admin only)."""
    if not has_permission(actor.role, "shipment.status_override"):
        raise PermissionDeniedError()
    if target == shipment.status:
        return shipment
    if status_rank(target) < status_rank(shipment.status) and not settings.allow_status_rollback:
        raise WorkflowError(
            f"Cannot move shipment back from {shipment.status.value} to {target.value}",
            error_code="STATUS_ROLLBACK_DISABLED",
        )

    await _transition(db, shipment, target, actor, via="override")
    return shipment


async def _transition(
    db: AsyncSession,
    shipment: Shipment,
    target: ShipmentStatus,
    actor: User,
    *,
    via: str,
) -> None:
    previous = shipment.status
    shipment.status = target
    shipment.updated_by_id = actor.id

    if target == ShipmentStatus.CUSTOMS_RECEIVED:
        ensure_customs(shipment)

    logger.info(
        "Shipment %s status %s -> %s (%s by %s)",
        shipment.id, previous.value, target.value, via, actor.id,
    )
    await log_shipment_activity(
        db, actor, shipment, "status_changed",
        summary=f"{previous.value} → {target.value}",
        details={"from": previous.value, "to": target.value, "via": via},
    )


def ensure_customs(shipment: Shipment) -> Customs:
    """Create the shipment's Customs record if it doesn't exist yet.

    The recorded piece count and the per-type rows are snapshots of the
    items at this moment; later item edits don't touch them.
    """
    if shipment.customs is not None:
        return shipment.customs

    items = list(shipment.items)
    recorded = calculator.total_pieces(items)
    customs = Customs(
        total_pieces_recorded=recorded,
        total_pieces_adjusted=recorded,
        loss_or_damage_pieces=calculator.loss_or_damage(recorded, recorded),
    )

    item_types = {item.item_type_id: item.item_type for item in items}
    for type_id, (pcs, ctn) in calculator.totals_per_item_type(items).items():
        customs.per_type.append(CustomsPerType(
            item_type_id=type_id,
            item_type=item_types[type_id],
            total_pcs_per_type=pcs,
            total_ctn_per_type=ctn,
            paid_customs=calculator.money(0),
            takhreg=calculator.money(0),
        ))

    shipment.customs = customs
    logger.info(
        "Customs created for shipment %s: %d pieces over %d item type(s)",
        shipment.id, recorded, len(customs.per_type),
    )
    return customs
