"""smm_matrix.routers.admin
==========================
Mini-README: Defines administrator routes: the dashboard with headline aggregates,
recent posts, recent orders and open tickets; blog post creation; role assignment by
email; and order/ticket status changes along their declared transitions. Every route
is gated on the admin role before its body runs.
"""

from fastapi import APIRouter, Depends, Form, HTTPException, Request, status
from fastapi.responses import RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import get_db_session
from ..logger import get_logger
from ..models import OrderStatus, User, UserRole
from ..schemas import DashboardStatsRead
from ..security import ADMIN_ROLES, require_role
from ..services import (
    InvalidStatusTransitionError,
    assign_role_by_email,
    close_ticket,
    compute_dashboard_stats,
    create_post,
    list_open_tickets,
    list_posts,
    normalize_email,
    recent_orders,
    update_order_status,
)
from ..templating import TEMPLATES

LOGGER = get_logger(__name__)

router = APIRouter(tags=["Admin"])

require_admin = require_role(ADMIN_ROLES)


def _back_to_dashboard() -> RedirectResponse:
    return RedirectResponse(url="/dashboard", status_code=status.HTTP_303_SEE_OTHER)


@router.get("/dashboard")
async def admin_dashboard(
    request: Request,
    me: User = Depends(require_admin),
    session: AsyncSession = Depends(get_db_session),
):
    """Render an overview dashboard for administrators."""

    context = {
        "user": me,
        "stats": await compute_dashboard_stats(session),
        "posts": await list_posts(session, limit=8),
        "orders": await recent_orders(session, limit=8),
        "tickets": await list_open_tickets(session),
        "roles": [role.value for role in UserRole],
        "order_statuses": [order_status.value for order_status in OrderStatus],
        "title": "Admin Dashboard",
    }
    return TEMPLATES.TemplateResponse(request, "admin_dashboard.html", context)


@router.get("/admin/api/stats", response_model=DashboardStatsRead)
async def dashboard_stats(
    me: User = Depends(require_admin),
    session: AsyncSession = Depends(get_db_session),
):
    return await compute_dashboard_stats(session)


@router.post("/admin/create_post")
async def admin_create_post(
    title: str = Form(""),
    image: str = Form(""),
    excerpt: str = Form(""),
    body: str = Form(""),
    me: User = Depends(require_admin),
    session: AsyncSession = Depends(get_db_session),
):
    """Publish a blog post; a missing title is ignored."""

    if not title.strip():
        return _back_to_dashboard()
    await create_post(session, title=title, author=me.name or me.email, image=image, excerpt=excerpt, body=body)
    return _back_to_dashboard()


@router.post("/admin/assign_role")
async def admin_assign_role(
    email: str = Form(""),
    role: str = Form(UserRole.USER.value),
    me: User = Depends(require_admin),
    session: AsyncSession = Depends(get_db_session),
):
    if not normalize_email(email):
        return _back_to_dashboard()
    try:
        new_role = UserRole(role.strip().lower())
    except ValueError:
        LOGGER.warning("Admin %s tried to assign unknown role %r", me.email, role)
        return _back_to_dashboard()

    await assign_role_by_email(session, email, new_role)
    return _back_to_dashboard()


@router.post("/admin/orders/{order_id}/status")
async def admin_update_order_status(
    order_id: int,
    new_status: str = Form(..., alias="status"),
    me: User = Depends(require_admin),
    session: AsyncSession = Depends(get_db_session),
):
    try:
        target = OrderStatus(new_status)
        order = await update_order_status(session, order_id, target)
    except ValueError as exc:
        # Covers unknown status names and InvalidStatusTransitionError.
        await session.rollback()
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    if order is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Order not found")
    return _back_to_dashboard()


@router.post("/admin/tickets/{ticket_id}/close")
async def admin_close_ticket(
    ticket_id: int,
    me: User = Depends(require_admin),
    session: AsyncSession = Depends(get_db_session),
):
    try:
        ticket = await close_ticket(session, ticket_id)
    except InvalidStatusTransitionError as exc:
        await session.rollback()
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    if ticket is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Ticket not found")
    return _back_to_dashboard()
