"""smm_matrix.routers.performance
================================
Mini-README: Growth charts for staff and admins. ``/performance`` charts the signed-in
member's own history and ``/performance/{user_id}`` any user's; both seed a synthetic
history when none exists. The same series is served as JSON for the chart script.
"""

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import get_db_session
from ..models import User
from ..schemas import PerformanceSeries
from ..security import STAFF_ROLES, require_role
from ..services import ensure_history
from ..templating import TEMPLATES

router = APIRouter(tags=["Performance"])

require_staff = require_role(STAFF_ROLES)


async def _series_for(session: AsyncSession, user_id: int) -> PerformanceSeries:
    target = await session.get(User, user_id)
    if target is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    metrics = await ensure_history(session, user_id)
    return PerformanceSeries.from_metrics(target.id, target.email, metrics)


def _render(request: Request, me: User, series: PerformanceSeries):
    return TEMPLATES.TemplateResponse(
        request,
        "performance.html",
        {"user": me, "series": series, "title": f"Performance {series.user_id}"},
    )


@router.get("/performance")
async def own_performance(
    request: Request,
    me: User = Depends(require_staff),
    session: AsyncSession = Depends(get_db_session),
):
    return _render(request, me, await _series_for(session, me.id))


@router.get("/performance/{user_id}")
async def user_performance(
    user_id: int,
    request: Request,
    me: User = Depends(require_staff),
    session: AsyncSession = Depends(get_db_session),
):
    return _render(request, me, await _series_for(session, user_id))


@router.get("/api/performance/{user_id}", response_model=PerformanceSeries)
async def performance_data(
    user_id: int,
    me: User = Depends(require_staff),
    session: AsyncSession = Depends(get_db_session),
):
    return await _series_for(session, user_id)
