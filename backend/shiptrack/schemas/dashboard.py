"""Dashboard statistics schema."""

from decimal import Decimal

from pydantic import BaseModel


class DashboardStats(BaseModel):
    total_shipments: int
    total_ctn: int
    total_pcs: int
    total_value: Decimal
    shipments_by_status: dict[str, int]
