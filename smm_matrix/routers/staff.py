"""smm_matrix.routers.staff
==========================
Mini-README: Staff control panel routes, open to staff and admins: the user list, a
per-user detail fragment loaded by the panel script, and the account mutations
(add staff, promote, demote, delete, record metrics, toggle newsletter opt-out).
Mutations redirect back to the panel.
"""

from fastapi import APIRouter, Depends, Form, Request, status
from fastapi.responses import RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import get_db_session
from ..logger import get_logger
from ..models import User, UserRole
from ..schemas import UserRead
from ..security import STAFF_ROLES, require_role
from ..services import (
    EmailAlreadyRegisteredError,
    append_snapshot,
    create_account,
    delete_account,
    latest_metric,
    list_users,
    parse_count,
    set_role,
    toggle_unsubscribed,
)
from ..templating import TEMPLATES

LOGGER = get_logger(__name__)

router = APIRouter(prefix="/staff", tags=["Staff"])

require_staff = require_role(STAFF_ROLES)


def _back_to_panel() -> RedirectResponse:
    return RedirectResponse(url="/staff", status_code=status.HTTP_303_SEE_OTHER)


@router.get("")
async def staff_panel(
    request: Request,
    me: User = Depends(require_staff),
    session: AsyncSession = Depends(get_db_session),
):
    users = await list_users(session)
    return TEMPLATES.TemplateResponse(request, "staff_panel.html", {"user": me, "users": users, "title": "Staff Panel"})


@router.get("/api/users", response_model=list[UserRead])
async def staff_user_listing(
    me: User = Depends(require_staff),
    session: AsyncSession = Depends(get_db_session),
):
    return await list_users(session)


@router.get("/user_detail/{user_id}")
async def user_detail(
    user_id: int,
    request: Request,
    me: User = Depends(require_staff),
    session: AsyncSession = Depends(get_db_session),
):
    """HTML fragment with the latest snapshot and the unsubscribe toggle."""

    target = await session.get(User, user_id)
    latest = await latest_metric(session, user_id) if target else None
    return TEMPLATES.TemplateResponse(
        request,
        "staff_user_detail.html",
        {"target": target, "latest": latest},
    )


@router.post("/add")
async def add_staff(
    email: str = Form(""),
    password: str = Form(""),
    name: str = Form(""),
    me: User = Depends(require_staff),
    session: AsyncSession = Depends(get_db_session),
):
    """Create a staff account; duplicates are silently ignored."""

    if not email.strip() or not password:
        return _back_to_panel()
    try:
        await create_account(session, email=email, password=password, name=name, role=UserRole.STAFF)
    except EmailAlreadyRegisteredError:
        LOGGER.warning("Staff %s tried to add existing account %s", me.email, email)
    return _back_to_panel()


@router.post("/promote")
async def promote_user(
    user_id: int = Form(..., alias="id"),
    me: User = Depends(require_staff),
    session: AsyncSession = Depends(get_db_session),
):
    await set_role(session, user_id, UserRole.STAFF)
    return _back_to_panel()


@router.post("/demote")
async def demote_user(
    user_id: int = Form(..., alias="id"),
    me: User = Depends(require_staff),
    session: AsyncSession = Depends(get_db_session),
):
    await set_role(session, user_id, UserRole.USER)
    return _back_to_panel()


@router.post("/delete")
async def delete_user(
    user_id: int = Form(..., alias="id"),
    me: User = Depends(require_staff),
    session: AsyncSession = Depends(get_db_session),
):
    LOGGER.info("Staff %s deleting user id=%s", me.email, user_id)
    await delete_account(session, user_id)
    return _back_to_panel()


@router.post("/metrics")
async def record_metrics(
    user_id: str = Form(""),
    add_likes: str = Form(""),
    add_follows: str = Form(""),
    me: User = Depends(require_staff),
    session: AsyncSession = Depends(get_db_session),
):
    """Append a snapshot; negative or non-numeric counts become zero."""

    target_id = parse_count(user_id)
    if not target_id:
        return _back_to_panel()
    await append_snapshot(session, target_id, parse_count(add_likes), parse_count(add_follows))
    return _back_to_panel()


@router.post("/toggle_unsubscribe")
async def toggle_unsubscribe(
    user_id: int = Form(..., alias="id"),
    me: User = Depends(require_staff),
    session: AsyncSession = Depends(get_db_session),
):
    await toggle_unsubscribed(session, user_id)
    return _back_to_panel()
