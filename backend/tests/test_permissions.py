"""Role → permission table tests."""

import pytest

from shiptrack.auth.permissions import (
    ADMIN_PERMISSIONS,
    READ_PERMISSIONS,
    ROLE_PERMISSIONS,
    WRITE_PERMISSIONS,
    has_permission,
    resolve_permissions,
)
from shiptrack.models.user import UserRole


@pytest.mark.unit
@pytest.mark.auth
class TestRolePermissions:

    def test_roles_are_nested(self):
        viewer = ROLE_PERMISSIONS[UserRole.VIEWER]
        operator = ROLE_PERMISSIONS[UserRole.OPERATOR]
        admin = ROLE_PERMISSIONS[UserRole.ADMIN]
        assert viewer < operator < admin

    def test_viewer_reads_only(self):
        assert resolve_permissions(UserRole.VIEWER) == sorted(READ_PERMISSIONS)
        for perm in WRITE_PERMISSIONS | ADMIN_PERMISSIONS:
            assert not has_permission(UserRole.VIEWER, perm)

    def test_operator_writes_but_cannot_delete(self):
        assert has_permission(UserRole.OPERATOR, "shipment.write")
        assert has_permission(UserRole.OPERATOR, "customs.write")
        assert has_permission(UserRole.OPERATOR, "shipment.advance")
        assert not has_permission(UserRole.OPERATOR, "shipment.delete")
        assert not has_permission(UserRole.OPERATOR, "supplier.delete")

    def test_only_admin_receives_customs(self):
        assert has_permission(UserRole.ADMIN, "shipment.receive_customs")
        assert not has_permission(UserRole.OPERATOR, "shipment.receive_customs")

    def test_only_admin_manages_users(self):
        assert has_permission("ADMIN", "users.manage")
        assert not has_permission("OPERATOR", "users.manage")

    def test_unknown_permission(self):
        assert not has_permission(UserRole.ADMIN, "shipment.teleport")
