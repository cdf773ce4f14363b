"""Role × method × resource access checks across the whole API."""

import pytest
import pytest_asyncio
from httpx import AsyncClient

from helpers import add_item, item_payload
from shiptrack.models.item_type import ItemType
from shiptrack.models.supplier import Supplier
from shiptrack.models.user import User


@pytest_asyncio.fixture
async def resources(
    client: AsyncClient,
    session_factory,
    admin_headers: dict,
    operator_headers: dict,
    viewer_headers: dict,
    viewer_user: User,
    supplier: Supplier,
    item_type: ItemType,
    second_item_type: ItemType,
    shipment: dict,
) -> dict:
    """One of everything, with path ids and per-role headers."""
    async with session_factory() as session:
        spare_supplier = Supplier(name="Unused Supplier")
        session.add(spare_supplier)
        await session.commit()

    item = await add_item(client, shipment["id"], operator_headers, **item_payload(supplier, item_type))
    return {
        "headers": {"ADMIN": admin_headers, "OPERATOR": operator_headers, "VIEWER": viewer_headers},
        "ids": {
            "supplier": supplier.id,
            "spare_supplier": spare_supplier.id,
            "item_type": item_type.id,
            "spare_item_type": second_item_type.id,
            "shipment": shipment["id"],
            "item": item["id"],
            "viewer": viewer_user.id,
        },
        "item_body": item_payload(supplier, item_type),
    }


def _body(body, resources: dict):
    return resources["item_body"] if body == "ITEM" else body


FORBIDDEN = [
    # viewers cannot write anything
    ("VIEWER", "POST", "/api/suppliers/", {"name": "New"}),
    ("VIEWER", "PATCH", "/api/suppliers/{supplier}", {"name": "Renamed"}),
    ("VIEWER", "DELETE", "/api/suppliers/{spare_supplier}", None),
    ("VIEWER", "POST", "/api/item-types/", {"name": "New"}),
    ("VIEWER", "PATCH", "/api/item-types/{item_type}", {"name": "Renamed"}),
    ("VIEWER", "DELETE", "/api/item-types/{spare_item_type}", None),
    ("VIEWER", "POST", "/api/shipments/", {"shipment_name": "X", "shipment_number": "X-1"}),
    ("VIEWER", "PATCH", "/api/shipments/{shipment}", {"shipment_name": "Renamed"}),
    ("VIEWER", "DELETE", "/api/shipments/{shipment}", None),
    ("VIEWER", "POST", "/api/shipments/{shipment}/advance", None),
    ("VIEWER", "PATCH", "/api/shipments/{shipment}/status", {"status": "CUSTOMS_RECEIVED"}),
    ("VIEWER", "POST", "/api/shipments/{shipment}/items", "ITEM"),
    ("VIEWER", "PUT", "/api/shipments/{shipment}/items", {"items": []}),
    ("VIEWER", "PATCH", "/api/shipments/{shipment}/items/{item}", {"ctn": 1}),
    ("VIEWER", "DELETE", "/api/shipments/{shipment}/items/{item}", None),
    ("VIEWER", "PUT", "/api/shipments/{shipment}/importing-details", {"commission_percent": "5"}),
    ("VIEWER", "PUT", "/api/shipments/{shipment}/customs", {"total_pieces_adjusted": 1}),
    ("VIEWER", "POST", "/api/customs/{shipment}/per-type", {"item_type_id": "x"}),
    ("VIEWER", "PATCH", "/api/customs/{shipment}/per-type/{item}", {"paid_customs": "1"}),
    ("VIEWER", "DELETE", "/api/customs/{shipment}/per-type/{item}", None),
    ("VIEWER", "GET", "/api/users/", None),
    ("VIEWER", "PATCH", "/api/users/{viewer}/role", {"role": "ADMIN"}),
    ("VIEWER", "GET", "/api/activity/", None),
    # operators write but do not delete reference data or shipments
    ("OPERATOR", "DELETE", "/api/suppliers/{spare_supplier}", None),
    ("OPERATOR", "DELETE", "/api/item-types/{spare_item_type}", None),
    ("OPERATOR", "DELETE", "/api/shipments/{shipment}", None),
    ("OPERATOR", "PATCH", "/api/shipments/{shipment}/status", {"status": "CUSTOMS_RECEIVED"}),
    ("OPERATOR", "GET", "/api/users/", None),
    ("OPERATOR", "PATCH", "/api/users/{viewer}/role", {"role": "OPERATOR"}),
    ("OPERATOR", "GET", "/api/activity/", None),
]

ADMIN_ALLOWED = [
    ("PATCH", "/api/suppliers/{supplier}", {"name": "Renamed"}, 200),
    ("DELETE", "/api/suppliers/{spare_supplier}", None, 204),
    ("PATCH", "/api/item-types/{item_type}", {"name": "Renamed"}, 200),
    ("DELETE", "/api/item-types/{spare_item_type}", None, 204),
    ("PATCH", "/api/shipments/{shipment}", {"shipment_name": "Renamed"}, 200),
    ("PATCH", "/api/shipments/{shipment}/status", {"status": "CUSTOMS_RECEIVED"}, 200),
    ("DELETE", "/api/shipments/{shipment}", None, 204),
    ("POST", "/api/shipments/{shipment}/items", "ITEM", 201),
    ("PATCH", "/api/shipments/{shipment}/items/{item}", {"ctn": 1}, 200),
    ("DELETE", "/api/shipments/{shipment}/items/{item}", None, 204),
    ("GET", "/api/users/", None, 200),
    ("PATCH", "/api/users/{viewer}/role", {"role": "OPERATOR"}, 200),
    ("GET", "/api/activity/", None, 200),
]


@pytest.mark.auth
@pytest.mark.asyncio
class TestAccessMatrix:

    @pytest.mark.parametrize(
        ("role", "method", "path", "body"),
        FORBIDDEN,
        ids=[f"{role} {method} {path}" for role, method, path, _ in FORBIDDEN],
    )
    async def test_forbidden(self, client: AsyncClient, resources: dict, role, method, path, body):
        response = await client.request(
            method,
            path.format(**resources["ids"]),
            json=_body(body, resources),
            headers=resources["headers"][role],
        )

        assert response.status_code == 403
        assert response.json()["error"]["message"] == "Forbidden"

    @pytest.mark.parametrize(
        ("method", "path", "body", "expected"),
        ADMIN_ALLOWED,
        ids=[f"{method} {path}" for method, path, _, _ in ADMIN_ALLOWED],
    )
    async def test_admin_allowed(self, client: AsyncClient, resources: dict, method, path, body, expected):
        response = await client.request(
            method,
            path.format(**resources["ids"]),
            json=_body(body, resources),
            headers=resources["headers"]["ADMIN"],
        )

        assert response.status_code == expected, response.text
