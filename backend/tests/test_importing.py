"""Importing details (import costing) tests."""

import pytest
from httpx import AsyncClient

from helpers import add_item, item_payload
from shiptrack.models.item_type import ItemType
from shiptrack.models.supplier import Supplier


@pytest.mark.api
@pytest.mark.asyncio
class TestImportingDetails:

    async def test_none_before_first_save(self, client: AsyncClient, viewer_headers: dict, shipment: dict):
        response = await client.get(
            f"/api/shipments/{shipment['id']}/importing-details", headers=viewer_headers
        )
        assert response.status_code == 200
        assert response.json() is None

    async def test_upsert_derives_totals(
        self,
        client: AsyncClient,
        operator_headers: dict,
        shipment: dict,
        supplier: Supplier,
        item_type: ItemType,
    ):
        await add_item(client, shipment["id"], operator_headers, **item_payload(supplier, item_type))

        response = await client.put(
            f"/api/shipments/{shipment['id']}/importing-details",
            json={"commission_percent": "5", "shipment_cost": "1200.00", "shipment_space_m2": "33.5"},
            headers=operator_headers,
        )
        assert response.status_code == 200
        data = response.json()
        assert data["total_shipment_price"] == "600.00"
        assert data["commission_amount"] == "30.00"
        assert data["commission_percent"] == "5.00"
        assert data["shipment_space_m2"] == "33.500"

        response = await client.put(
            f"/api/shipments/{shipment['id']}/importing-details",
            json={"commission_percent": "10", "shipment_cost": "1200.00"},
            headers=operator_headers,
        )
        assert response.json()["id"] == data["id"]
        assert response.json()["commission_amount"] == "60.00"

    async def test_item_changes_refresh_total(
        self,
        client: AsyncClient,
        operator_headers: dict,
        shipment: dict,
        supplier: Supplier,
        item_type: ItemType,
    ):
        await client.put(
            f"/api/shipments/{shipment['id']}/importing-details",
            json={"commission_percent": "5"},
            headers=operator_headers,
        )
        await add_item(client, shipment["id"], operator_headers, **item_payload(supplier, item_type))

        response = await client.get(f"/api/shipments/{shipment['id']}", headers=operator_headers)
        details = response.json()["importing_details"]
        assert details["total_shipment_price"] == "600.00"
        assert details["commission_amount"] == "30.00"

    @pytest.mark.parametrize("percent", ["-1", "100.5"])
    async def test_percent_out_of_range(
        self, client: AsyncClient, operator_headers: dict, shipment: dict, percent
    ):
        response = await client.put(
            f"/api/shipments/{shipment['id']}/importing-details",
            json={"commission_percent": percent},
            headers=operator_headers,
        )
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    async def test_viewer_cannot_save(self, client: AsyncClient, viewer_headers: dict, shipment: dict):
        response = await client.put(
            f"/api/shipments/{shipment['id']}/importing-details",
            json={"commission_percent": "5"},
            headers=viewer_headers,
        )
        assert response.status_code == 403
