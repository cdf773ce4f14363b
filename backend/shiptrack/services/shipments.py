"""Shipment lookup and response building shared by the shipment routers."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from shiptrack.middleware.exceptions import ResourceNotFoundError
from shiptrack.models.shipment import Shipment
from shiptrack.schemas.importing import ImportingDetailsOut
from shiptrack.schemas.shipment import ShipmentDetail, ShipmentSummary
from shiptrack.schemas.shipment_item import ShipmentItemOut
from shiptrack.services import calculator
from shiptrack.services.workflow import customs_availability, next_status


async def get_shipment(db: AsyncSession, shipment_id: str) -> Shipment:
    result = await db.execute(select(Shipment).where(Shipment.id == shipment_id))
    shipment = result.scalar_one_or_none()
    if shipment is None:
        raise ResourceNotFoundError("Shipment", shipment_id)
    return shipment


def build_detail(shipment: Shipment) -> ShipmentDetail:
    items = list(shipment.items)
    summary = ShipmentSummary.model_validate(shipment)
    return ShipmentDetail(
        **summary.model_dump(),
        items=[ShipmentItemOut.model_validate(i) for i in items],
        importing_details=(
            ImportingDetailsOut.model_validate(shipment.importing_details)
            if shipment.importing_details is not None
            else None
        ),
        customs_availability=customs_availability(shipment.status).value,
        next_status=next_status(shipment.status),
        total_ctn=calculator.total_cartons(items),
        total_pcs=calculator.total_pieces(items),
        total_price=calculator.shipment_total_price(items),
    )
