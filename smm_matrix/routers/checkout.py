"""smm_matrix.routers.checkout
=============================
Mini-README: Placeholder purchase flow. Visitors must be signed in; submitting the
form records a paid order for the chosen plan without contacting a payment gateway.
"""

from fastapi import APIRouter, Depends, Form, HTTPException, Request, status
from fastapi.responses import RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import get_db_session
from ..models import Plan, User, UserRole
from ..security import get_optional_user
from ..services import fetch_plan, place_order
from ..templating import TEMPLATES

router = APIRouter(prefix="/checkout", tags=["Checkout"])


async def _plan_or_404(session: AsyncSession, plan_id: int | None) -> Plan:
    plan = await fetch_plan(session, plan_id)
    if plan is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Plan not found")
    return plan


@router.get("")
async def checkout_page(
    request: Request,
    plan_id: int | None = None,
    user: User | None = Depends(get_optional_user),
    session: AsyncSession = Depends(get_db_session),
):
    plan = await _plan_or_404(session, plan_id)
    if user is None:
        return RedirectResponse(url="/login", status_code=status.HTTP_302_FOUND)
    return TEMPLATES.TemplateResponse(request, "checkout.html", {"user": user, "plan": plan, "title": "Checkout"})


@router.post("")
async def checkout_submit(
    plan_id: int | None = None,
    ig_username: str = Form(""),
    notes: str = Form(""),
    user: User | None = Depends(get_optional_user),
    session: AsyncSession = Depends(get_db_session),
):
    """Record the order as paid and send the buyer on."""

    if user is None:
        return RedirectResponse(url="/login", status_code=status.HTTP_303_SEE_OTHER)
    plan = await _plan_or_404(session, plan_id)
    await place_order(session, user=user, plan=plan, ig_username=ig_username, notes=notes)
    destination = "/dashboard" if user.role == UserRole.ADMIN else "/"
    return RedirectResponse(url=destination, status_code=status.HTTP_303_SEE_OTHER)
