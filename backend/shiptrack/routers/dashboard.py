"""Dashboard router.

Endpoints:
    GET /api/dashboard/stats   Shipment counts and item totals
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from shiptrack.auth.deps import require_permission
from shiptrack.database import get_db
from shiptrack.models.user import User
from shiptrack.schemas.dashboard import DashboardStats
from shiptrack.services.dashboard import dashboard_stats

router = APIRouter()


@router.get("/stats", response_model=DashboardStats)
async def get_stats(
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(require_permission("dashboard.read")),
):
    return await dashboard_stats(db)
