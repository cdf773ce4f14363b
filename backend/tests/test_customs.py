"""Customs reconciliation tests."""

import pytest
import pytest_asyncio
from httpx import AsyncClient

from helpers import add_item, item_payload, set_status
from shiptrack.config import settings
from shiptrack.models.item_type import ItemType
from shiptrack.models.supplier import Supplier


@pytest.mark.api
@pytest.mark.asyncio
class TestCustomsGate:

    async def test_not_started(self, client: AsyncClient, viewer_headers: dict, shipment: dict):
        response = await client.get(f"/api/shipments/{shipment['id']}/customs", headers=viewer_headers)

        assert response.status_code == 200
        assert response.json() == {
            "shipment_id": shipment["id"],
            "status": "CREATED",
            "availability": "not_started",
            "customs": None,
        }

    async def test_in_progress_hides_data(
        self, client: AsyncClient, admin_headers: dict, shipment: dict
    ):
        await set_status(client, shipment["id"], "CUSTOMS_IN_PROGRESS", admin_headers)

        response = await client.get(f"/api/shipments/{shipment['id']}/customs", headers=admin_headers)
        assert response.json()["availability"] == "in_progress"
        assert response.json()["customs"] is None

    async def test_write_before_received(
        self, client: AsyncClient, operator_headers: dict, shipment: dict
    ):
        response = await client.put(
            f"/api/shipments/{shipment['id']}/customs",
            json={"total_pieces_adjusted": 10},
            headers=operator_headers,
        )
        assert response.status_code == 409
        assert response.json()["error"]["code"] == "CUSTOMS_NOT_AVAILABLE"


@pytest.mark.api
@pytest.mark.asyncio
class TestCustomsRecord:

    @pytest_asyncio.fixture
    async def received(
        self,
        client: AsyncClient,
        admin_headers: dict,
        shipment: dict,
        supplier: Supplier,
        item_type: ItemType,
    ) -> dict:
        """Shipment with one 240-piece line, moved to CUSTOMS_RECEIVED."""
        await add_item(client, shipment["id"], admin_headers, **item_payload(supplier, item_type))
        await set_status(client, shipment["id"], "CUSTOMS_RECEIVED", admin_headers)
        response = await client.get(f"/api/shipments/{shipment['id']}/customs", headers=admin_headers)
        return response.json()["customs"]

    async def test_adjust_pieces(
        self, client: AsyncClient, operator_headers: dict, shipment: dict, received: dict
    ):
        response = await client.put(
            f"/api/shipments/{shipment['id']}/customs",
            json={"total_pieces_adjusted": 230, "bill_date": "2026-10-01"},
            headers=operator_headers,
        )
        assert response.status_code == 200
        data = response.json()
        assert data["total_pieces_recorded"] == 240
        assert data["total_pieces_adjusted"] == 230
        assert data["loss_or_damage_pieces"] == 10
        assert data["bill_date"] == "2026-10-01"

    async def test_surplus_gives_negative_loss(
        self, client: AsyncClient, operator_headers: dict, shipment: dict, received: dict
    ):
        response = await client.put(
            f"/api/shipments/{shipment['id']}/customs",
            json={"total_pieces_adjusted": 250},
            headers=operator_headers,
        )
        assert response.json()["loss_or_damage_pieces"] == -10

    async def test_per_type_fees_and_totals(
        self,
        client: AsyncClient,
        operator_headers: dict,
        shipment: dict,
        item_type: ItemType,
        received: dict,
    ):
        response = await client.put(
            f"/api/shipments/{shipment['id']}/customs",
            json={"per_type": [
                {"item_type_id": item_type.id, "paid_customs": "150.25", "takhreg": "40"},
            ]},
            headers=operator_headers,
        )
        assert response.status_code == 200
        data = response.json()
        assert data["per_type"][0]["paid_customs"] == "150.25"
        assert data["total_paid_customs"] == "150.25"
        assert data["total_paid_takhreg"] == "40.00"
        # Untouched fields keep their values
        assert data["total_pieces_adjusted"] == 240

    async def test_fees_for_type_not_on_shipment(
        self,
        client: AsyncClient,
        operator_headers: dict,
        shipment: dict,
        second_item_type: ItemType,
        received: dict,
    ):
        response = await client.put(
            f"/api/shipments/{shipment['id']}/customs",
            json={"per_type": [{"item_type_id": second_item_type.id, "paid_customs": "1"}]},
            headers=operator_headers,
        )
        assert response.status_code == 400

    async def test_negative_adjusted_rejected(
        self, client: AsyncClient, operator_headers: dict, shipment: dict, received: dict
    ):
        response = await client.put(
            f"/api/shipments/{shipment['id']}/customs",
            json={"total_pieces_adjusted": -1},
            headers=operator_headers,
        )
        assert response.status_code == 400

    async def test_viewer_cannot_write(
        self, client: AsyncClient, viewer_headers: dict, shipment: dict, received: dict
    ):
        response = await client.put(
            f"/api/shipments/{shipment['id']}/customs",
            json={"total_pieces_adjusted": 1},
            headers=viewer_headers,
        )
        assert response.status_code == 403


@pytest.mark.api
@pytest.mark.asyncio
class TestPerTypeRows:

    @pytest_asyncio.fixture
    async def received(
        self,
        client: AsyncClient,
        admin_headers: dict,
        shipment: dict,
        supplier: Supplier,
        item_type: ItemType,
        second_item_type: ItemType,
    ) -> dict:
        await add_item(client, shipment["id"], admin_headers, **item_payload(supplier, item_type))
        await add_item(
            client, shipment["id"], admin_headers,
            **item_payload(supplier, second_item_type, ctn=2, pcs_per_ctn=6),
        )
        await set_status(client, shipment["id"], "CUSTOMS_RECEIVED", admin_headers)
        response = await client.get(f"/api/shipments/{shipment['id']}/customs", headers=admin_headers)
        return response.json()["customs"]

    async def test_update_row(self, client: AsyncClient, operator_headers: dict, received: dict):
        row = received["per_type"][0]

        response = await client.patch(
            f"/api/customs/{received['id']}/per-type/{row['id']}",
            json={"takhreg": "12.50"},
            headers=operator_headers,
        )
        assert response.status_code == 200
        assert response.json()["takhreg"] == "12.50"
        assert response.json()["paid_customs"] == "0.00"

    async def test_delete_and_re_add_row(
        self,
        client: AsyncClient,
        operator_headers: dict,
        second_item_type: ItemType,
        received: dict,
    ):
        row = next(r for r in received["per_type"] if r["item_type_id"] == second_item_type.id)

        response = await client.delete(
            f"/api/customs/{received['id']}/per-type/{row['id']}", headers=operator_headers
        )
        assert response.status_code == 204

        response = await client.post(
            f"/api/customs/{received['id']}/per-type",
            json={"item_type_id": second_item_type.id, "paid_customs": "75"},
            headers=operator_headers,
        )
        assert response.status_code == 201
        data = response.json()
        assert data["total_pcs_per_type"] == 12
        assert data["total_ctn_per_type"] == 2
        assert data["paid_customs"] == "75.00"

    async def test_duplicate_row(
        self, client: AsyncClient, operator_headers: dict, item_type: ItemType, received: dict
    ):
        response = await client.post(
            f"/api/customs/{received['id']}/per-type",
            json={"item_type_id": item_type.id},
            headers=operator_headers,
        )
        assert response.status_code == 409
        assert response.json()["error"]["code"] == "DUPLICATE_ITEM_TYPE"

    async def test_type_not_on_shipment(
        self, client: AsyncClient, operator_headers: dict, received: dict, session_factory
    ):
        async with session_factory() as session:
            stray = ItemType(name="Unshipped")
            session.add(stray)
            await session.commit()

        response = await client.post(
            f"/api/customs/{received['id']}/per-type",
            json={"item_type_id": stray.id},
            headers=operator_headers,
        )
        assert response.status_code == 400

    async def test_unknown_customs(self, client: AsyncClient, operator_headers: dict):
        response = await client.patch(
            "/api/customs/missing/per-type/row", json={"takhreg": "1"}, headers=operator_headers
        )
        assert response.status_code == 404

    async def test_unknown_row(self, client: AsyncClient, operator_headers: dict, received: dict):
        response = await client.delete(
            f"/api/customs/{received['id']}/per-type/missing", headers=operator_headers
        )
        assert response.status_code == 404

    async def test_rows_locked_after_rollback(
        self,
        client: AsyncClient,
        admin_headers: dict,
        shipment: dict,
        received: dict,
        monkeypatch,
    ):
        monkeypatch.setattr(settings, "allow_status_rollback", True)
        await set_status(client, shipment["id"], "CUSTOMS_IN_PROGRESS", admin_headers)

        row = received["per_type"][0]
        response = await client.patch(
            f"/api/customs/{received['id']}/per-type/{row['id']}",
            json={"takhreg": "1"},
            headers=admin_headers,
        )
        assert response.status_code == 409


@pytest.mark.api
@pytest.mark.asyncio
class TestCustomsSummary:

    async def test_summary(
        self,
        client: AsyncClient,
        admin_headers: dict,
        viewer_headers: dict,
        shipment: dict,
        supplier: Supplier,
        item_type: ItemType,
    ):
        await add_item(client, shipment["id"], admin_headers, **item_payload(supplier, item_type))
        await set_status(client, shipment["id"], "CUSTOMS_RECEIVED", admin_headers)
        await client.put(
            f"/api/shipments/{shipment['id']}/customs",
            json={
                "total_pieces_adjusted": 238,
                "per_type": [{"item_type_id": item_type.id, "paid_customs": "99.99", "takhreg": "0.01"}],
            },
            headers=admin_headers,
        )

        response = await client.get("/api/customs/summary", headers=viewer_headers)
        assert response.status_code == 200
        rows = response.json()
        assert len(rows) == 1
        assert rows[0]["shipment_number"] == "SHIP-001"
        assert rows[0]["loss_or_damage_pieces"] == 2
        assert rows[0]["total_paid_customs"] == "99.99"
        assert rows[0]["total_paid_takhreg"] == "0.01"

    async def test_summary_empty(self, client: AsyncClient, viewer_headers: dict):
        response = await client.get("/api/customs/summary", headers=viewer_headers)
        assert response.json() == []
