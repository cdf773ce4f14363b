"""Request helpers shared by the API tests."""

from httpx import AsyncClient

from shiptrack.models.item_type import ItemType
from shiptrack.models.supplier import Supplier


def item_payload(supplier: Supplier, item_type: ItemType, **overrides) -> dict:
    payload = {
        "supplier_id": supplier.id,
        "item_type_id": item_type.id,
        "ctn": 10,
        "pcs_per_ctn": 24,
        "pri": "2.50",
    }
    payload.update(overrides)
    return payload


async def add_item(client: AsyncClient, shipment_id: str, headers: dict, **payload) -> dict:
    response = await client.post(
        f"/api/shipments/{shipment_id}/items", json=payload, headers=headers
    )
    assert response.status_code == 201, response.text
    return response.json()


async def set_status(client: AsyncClient, shipment_id: str, status: str, headers: dict) -> dict:
    """Set a shipment's status directly (needs admin headers)."""
    response = await client.patch(
        f"/api/shipments/{shipment_id}/status", json={"status": status}, headers=headers
    )
    assert response.status_code == 200, response.text
    return response.json()
