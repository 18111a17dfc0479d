"""smm_matrix.services.commerce_service
======================================
Mini-README: Orders, support tickets, newsletter subscribers, and the admin
aggregates built on them. Order and ticket statuses only move along the transitions
declared in ``models``; checkout is a placeholder that records a pending order and
immediately marks it paid without contacting any payment gateway.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..logger import get_logger
from ..models import Order, OrderStatus, Plan, Subscriber, Ticket, TicketStatus, User
from .account_service import count_users

LOGGER = get_logger(__name__)


class InvalidStatusTransitionError(ValueError):
    """Raised when an order or ticket is moved along an undeclared transition."""


@dataclass
class DashboardStats:
    """Headline numbers for the admin dashboard."""

    users: int
    pending_orders: int
    declined_orders: int
    subscribers: int
    total_accounting: Decimal


def transition_order(order: Order, target: OrderStatus) -> Order:
    """Move ``order`` to ``target`` or raise ``InvalidStatusTransitionError``."""

    current = OrderStatus(order.status)
    if not current.can_transition_to(target):
        raise InvalidStatusTransitionError(
            f"Order #{order.id} cannot move from {current.value} to {target.value}."
        )
    order.status = target
    return order


def transition_ticket(ticket: Ticket, target: TicketStatus) -> Ticket:
    current = TicketStatus(ticket.status)
    if not current.can_transition_to(target):
        raise InvalidStatusTransitionError(
            f"Ticket #{ticket.id} cannot move from {current.value} to {target.value}."
        )
    ticket.status = target
    return ticket


async def place_order(
    session: AsyncSession,
    *,
    user: User,
    plan: Plan,
    ig_username: str = "",
    notes: str = "",
) -> Order:
    """Record a purchase of ``plan``; payment is assumed to succeed."""

    order = Order(
        user_id=user.id,
        plan_id=plan.id,
        ig_username=ig_username.strip(),
        notes=notes.strip(),
        status=OrderStatus.PENDING,
    )
    # Placeholder for a payment gateway call.
    transition_order(order, OrderStatus.PAID)
    session.add(order)
    await session.commit()
    await session.refresh(order)
    LOGGER.info("User %s bought plan %s (order id=%s)", user.email, plan.name, order.id)
    return order


async def update_order_status(session: AsyncSession, order_id: int, target: OrderStatus) -> Order | None:
    order = await session.get(Order, order_id)
    if order is None:
        return None
    transition_order(order, target)
    await session.commit()
    LOGGER.info("Order id=%s moved to %s", order_id, target.value)
    return order


async def recent_orders(session: AsyncSession, *, limit: int = 8) -> list[Order]:
    stmt = select(Order).options(selectinload(Order.plan)).order_by(Order.id.desc()).limit(limit)
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def create_ticket(
    session: AsyncSession,
    *,
    user_id: int | None,
    email: str,
    instagram: str,
    subject: str,
    message: str,
) -> Ticket:
    ticket = Ticket(
        user_id=user_id,
        email=email or "",
        instagram=instagram or "",
        subject=subject or "",
        message=message or "",
    )
    session.add(ticket)
    await session.commit()
    await session.refresh(ticket)
    LOGGER.info("Opened ticket id=%s for user_id=%s", ticket.id, user_id)
    return ticket


async def close_ticket(session: AsyncSession, ticket_id: int) -> Ticket | None:
    ticket = await session.get(Ticket, ticket_id)
    if ticket is None:
        return None
    transition_ticket(ticket, TicketStatus.CLOSED)
    await session.commit()
    LOGGER.info("Closed ticket id=%s", ticket_id)
    return ticket


async def list_open_tickets(session: AsyncSession) -> list[Ticket]:
    stmt = select(Ticket).where(Ticket.status == TicketStatus.OPEN).order_by(Ticket.id.desc())
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def subscribe_email(session: AsyncSession, email: str) -> bool:
    """Best-effort newsletter signup; failures are logged and swallowed."""

    email = (email or "").strip()
    if not email:
        return False
    try:
        session.add(Subscriber(email=email))
        await session.commit()
    except SQLAlchemyError as exc:
        await session.rollback()
        LOGGER.warning("Ignoring failed subscription for %s: %s", email, exc)
        return False
    LOGGER.info("New newsletter subscriber %s", email)
    return True


async def compute_dashboard_stats(session: AsyncSession) -> DashboardStats:
    """Aggregate users, order counts, subscribers, and paid revenue."""

    async def count_orders(*statuses: OrderStatus) -> int:
        stmt = select(func.count(Order.id)).where(Order.status.in_(statuses))
        return (await session.execute(stmt)).scalar_one()

    revenue_stmt = (
        select(func.coalesce(func.sum(Plan.price_usd), 0))
        .select_from(Order)
        .join(Plan, Plan.id == Order.plan_id)
        .where(Order.status == OrderStatus.PAID)
    )
    revenue = (await session.execute(revenue_stmt)).scalar_one()
    subscribers = (await session.execute(select(func.count(Subscriber.id)))).scalar_one()

    return DashboardStats(
        users=await count_users(session),
        pending_orders=await count_orders(OrderStatus.PENDING),
        declined_orders=await count_orders(OrderStatus.DECLINED, OrderStatus.CANCELLED),
        subscribers=subscribers,
        total_accounting=Decimal(str(revenue or 0)),
    )
