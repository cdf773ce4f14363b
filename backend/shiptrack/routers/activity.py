"""Activity log router (admin only).

Endpoints:
    GET /api/activity   Audit trail, newest first, with optional filters
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from shiptrack.auth.deps import require_permission
from shiptrack.database import get_db
from shiptrack.models.activity_log import ActivityLog
from shiptrack.models.user import User
from shiptrack.schemas.activity import ActivityEntry, ActivityListResponse

router = APIRouter()


@router.get("/", response_model=ActivityListResponse)
async def list_activity(
    entity_type: str | None = Query(None),
    entity_id: str | None = Query(None),
    action: str | None = Query(None),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(require_permission("activity.read")),
):
    """List activity log entries with optional filters."""
    query = select(ActivityLog)
    count_query = select(func.count()).select_from(ActivityLog)

    if entity_type:
        query = query.where(ActivityLog.entity_type == entity_type)
        count_query = count_query.where(ActivityLog.entity_type == entity_type)
    if entity_id:
        query = query.where(ActivityLog.entity_id == entity_id)
        count_query = count_query.where(ActivityLog.entity_id == entity_id)
    if action:
        query = query.where(ActivityLog.action == action)
        count_query = count_query.where(ActivityLog.action == action)

    total_r = await db.execute(count_query)
    total = total_r.scalar() or 0

    result = await db.execute(
        query.order_by(ActivityLog.created_at.desc())
        .offset(offset)
        .limit(limit)
    )
    items = [ActivityEntry.model_validate(a) for a in result.scalars().all()]

    return ActivityListResponse(items=items, total=total)
