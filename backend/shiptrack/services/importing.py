"""Import costing for a shipment.

total_shipment_price always mirrors the current items, so it is refreshed
both when the details are saved and whenever the item list changes.
"""

from shiptrack.models.importing_details import ImportingDetails
from shiptrack.models.shipment import Shipment
from shiptrack.schemas.importing import ImportingDetailsIn
from shiptrack.services import calculator


def recompute(details: ImportingDetails, shipment: Shipment) -> None:
    details.total_shipment_price = calculator.shipment_total_price(shipment.items)
    details.commission_amount = calculator.commission_amount(
        details.total_shipment_price, details.commission_percent
    )


def upsert_importing_details(shipment: Shipment, body: ImportingDetailsIn) -> ImportingDetails:
    """Create or update the shipment's importing details from `body`."""
    details = shipment.importing_details
    if details is None:
        details = ImportingDetails()
        shipment.importing_details = details

    details.commission_percent = calculator.money(body.commission_percent)
    details.shipment_cost = calculator.money(body.shipment_cost)
    details.shipment_space_m2 = calculator.space(body.shipment_space_m2)
    recompute(details, shipment)
    return details


def refresh_importing_totals(shipment: Shipment) -> None:
    """Re-derive importing totals after an item change (no-op if none yet)."""
    if shipment.importing_details is not None:
        recompute(shipment.importing_details, shipment)
