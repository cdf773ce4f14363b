"""Dashboard statistics across all shipments.

Money is summed in Python as Decimal, not with SQL SUM.
"""

from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from shiptrack.models.shipment import Shipment, ShipmentStatus
from shiptrack.models.shipment_item import ShipmentItem
from shiptrack.schemas.dashboard import DashboardStats
from shiptrack.services import calculator


async def dashboard_stats(db: AsyncSession) -> DashboardStats:
    status_rows = await db.execute(
        select(Shipment.status, func.count(Shipment.id)).group_by(Shipment.status)
    )
    by_status = {s.value: 0 for s in ShipmentStatus}
    for status, count in status_rows.all():
        by_status[status.value] = count

    item_rows = await db.execute(
        select(ShipmentItem.ctn, ShipmentItem.cou, ShipmentItem.total)
    )
    total_ctn = 0
    total_pcs = 0
    total_value = Decimal("0")
    for ctn, cou, total in item_rows.all():
        total_ctn += ctn
        total_pcs += cou
        total_value += total

    return DashboardStats(
        total_shipments=sum(by_status.values()),
        total_ctn=total_ctn,
        total_pcs=total_pcs,
        total_value=calculator.money(total_value),
        shipments_by_status=by_status,
    )
