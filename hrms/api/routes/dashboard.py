"""Dashboard Routes: headline counts and recent activity for the caller."""

import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from hrms.api.dependencies import get_current_actor
from hrms.api.routes.leave_requests import leave_response
from hrms.core.permissions import Actor
from hrms.infrastructure.database import get_db
from hrms.schemas.leave import LeaveRequestResponse
from hrms.services.dashboard_service import DashboardService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/dashboard", tags=["dashboard"])


@router.get("/stats")
async def dashboard_stats(
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    return await DashboardService(db, actor).stats()


@router.get("/recent-leave-requests", response_model=list[LeaveRequestResponse])
async def recent_leave_requests(
    limit: int = Query(5, ge=1, le=50),
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    rows = await DashboardService(db, actor).recent_leave_requests(limit)
    return [leave_response(leave, employee) for leave, employee in rows]
