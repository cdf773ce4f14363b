"""Declarative role → capability table for ShipTrack RBAC.

Design:
  - Three fixed roles with strictly nested capability sets:
        VIEWER ⊂ OPERATOR ⊂ ADMIN
  - The table lives here, not in the DB; a user's role does.
  - `require_permission(...)` in `shiptrack.auth.deps` consults this table
    once per request.

Permission naming: `<resource>.<action>`
  Resources: supplier, item_type, shipment, item, importing, customs,
             dashboard, users, activity
  Actions:   read, write, delete, plus workflow-specific actions on shipment
"""

from __future__ import annotations

from shiptrack.models.user import UserRole


# ── Capability groups ───────────────────────────────────────

READ_PERMISSIONS: frozenset[str] = frozenset({
    "supplier.read",
    "item_type.read",
    "shipment.read",
    "item.read",
    "importing.read",
    "customs.read",
    "dashboard.read",
})

WRITE_PERMISSIONS: frozenset[str] = frozenset({
    "supplier.write",
    "item_type.write",
    "shipment.write",
    "item.write",
    "importing.write",
    "customs.write",
    "shipment.advance",         # CREATED → … → CUSTOMS_IN_PROGRESS
})

ADMIN_PERMISSIONS: frozenset[str] = frozenset({
    "supplier.delete",
    "item_type.delete",
    "shipment.delete",
    "shipment.receive_customs",  # CUSTOMS_IN_PROGRESS → CUSTOMS_RECEIVED
    "shipment.status_override",  # set any status directly
    "shipment.master_key",       # set / change backend_master_key
    "users.read",
    "users.manage",
    "activity.read",
})

ALL_PERMISSIONS: frozenset[str] = READ_PERMISSIONS | WRITE_PERMISSIONS | ADMIN_PERMISSIONS


# ── Role → permissions ──────────────────────────────────────

ROLE_PERMISSIONS: dict[UserRole, frozenset[str]] = {
    UserRole.VIEWER: READ_PERMISSIONS,
    UserRole.OPERATOR: READ_PERMISSIONS | WRITE_PERMISSIONS,
    UserRole.ADMIN: ALL_PERMISSIONS,
}


def resolve_permissions(role: UserRole | str) -> list[str]:
    """Effective permissions for a role, sorted for stable output."""
    return sorted(ROLE_PERMISSIONS.get(UserRole(role), frozenset()))


def has_permission(role: UserRole | str, required: str) -> bool:
    """Check whether a role holds a permission."""
    return required in ROLE_PERMISSIONS.get(UserRole(role), frozenset())
