"""Unit tests for the service layer."""

from decimal import Decimal

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from smm_matrix.database import AsyncSessionMaker
from smm_matrix.models import (
    Metric,
    Order,
    OrderStatus,
    Plan,
    Post,
    Review,
    Status,
    Targets,
    Ticket,
    TicketStatus,
    User,
    UserRole,
)
from smm_matrix.services import (
    EmailAlreadyRegisteredError,
    InvalidStatusTransitionError,
    authenticate,
    create_account,
    ensure_history,
    seed_catalogue,
    seed_demo_data,
    subscribe_email,
    transition_order,
    transition_ticket,
)


async def _count(model) -> int:
    async with AsyncSessionMaker() as session:
        return (await session.execute(select(func.count()).select_from(model))).scalar_one()


class TestCreateAccount:
    """Account creation writes the user and its per-user rows together."""

    async def test_creates_all_rows(self, db_session) -> None:
        user = await create_account(
            db_session, email=" Owner@Example.com", password="pw", name=" Owen ", initial_likes=10, initial_follows=8
        )
        assert user.email == "owner@example.com"
        assert user.name == "Owen"
        assert user.role == UserRole.USER
        assert user.hashed_password != "pw"
        assert (await _count(Status), await _count(Targets), await _count(Metric)) == (1, 1, 1)

        metric = (await db_session.execute(select(Metric))).scalar_one()
        assert (metric.likes, metric.follows) == (10, 8)

    async def test_duplicate_writes_nothing(self, db_session) -> None:
        await create_account(db_session, email="dup@example.com", password="pw")
        with pytest.raises(EmailAlreadyRegisteredError):
            await create_account(db_session, email="DUP@example.com", password="other")
        assert (await _count(User), await _count(Status), await _count(Metric)) == (1, 1, 1)

    async def test_authenticate(self, db_session) -> None:
        await create_account(db_session, email="auth@example.com", password="right")
        assert (await authenticate(db_session, "AUTH@example.com", "right")).email == "auth@example.com"
        assert await authenticate(db_session, "auth@example.com", "wrong") is None
        assert await authenticate(db_session, "missing@example.com", "right") is None


class TestTransitions:
    """Declared status transitions for orders and tickets."""

    @pytest.mark.parametrize("target", [OrderStatus.PAID, OrderStatus.DECLINED, OrderStatus.CANCELLED])
    def test_pending_order_can_settle(self, target) -> None:
        order = Order(id=1, status=OrderStatus.PENDING)
        assert transition_order(order, target).status == target

    @pytest.mark.parametrize("current", [OrderStatus.PAID, OrderStatus.DECLINED, OrderStatus.CANCELLED])
    @pytest.mark.parametrize("target", list(OrderStatus))
    def test_settled_order_is_final(self, current, target) -> None:
        order = Order(id=1, status=current)
        with pytest.raises(InvalidStatusTransitionError):
            transition_order(order, target)
        assert order.status == current

    def test_ticket_closes_once(self) -> None:
        ticket = Ticket(id=1, status=TicketStatus.OPEN)
        transition_ticket(ticket, TicketStatus.CLOSED)
        with pytest.raises(InvalidStatusTransitionError):
            transition_ticket(ticket, TicketStatus.OPEN)
        with pytest.raises(InvalidStatusTransitionError):
            transition_ticket(ticket, TicketStatus.CLOSED)


class TestSubscribe:
    async def test_blank_email_is_not_stored(self, db_session) -> None:
        assert await subscribe_email(db_session, "   ") is False

    async def test_email_is_stripped(self, db_session) -> None:
        assert await subscribe_email(db_session, "  reader@example.com ") is True


class TestHistory:
    async def test_ensure_history_keeps_existing_points(self, db_session) -> None:
        user = await create_account(db_session, email="hist@example.com", password="pw", initial_likes=4)
        metrics = await ensure_history(db_session, user.id)
        assert [metric.likes for metric in metrics] == [4]


class TestSeeding:
    """Seeding fills empty tables and is safe to repeat."""

    async def test_catalogue_counts(self, db_session) -> None:
        await seed_catalogue(db_session)
        assert (await _count(Plan), await _count(Post), await _count(Review)) == (3, 6, 6)

    async def test_demo_data_is_idempotent(self, db_session) -> None:
        await seed_demo_data(db_session)
        await seed_demo_data(db_session)
        assert await _count(User) == 3
        assert await _count(Plan) == 3
        assert await _count(Status) == 3
        assert await _count(Metric) == 3

        admin = await authenticate(db_session, "admin@smm.local", "admin123")
        assert admin is not None and admin.role == UserRole.ADMIN
        targets = (await db_session.execute(select(Targets).where(Targets.user_id == admin.id))).scalar_one()
        assert targets.niche == "Fitness & Wellness"

    async def test_backfill_adds_missing_user_rows(self, db_session) -> None:
        db_session.add(User(email="legacy@example.com", hashed_password="x"))
        await db_session.commit()
        await seed_demo_data(db_session)
        assert (await _count(Status), await _count(Targets), await _count(Metric)) == (4, 4, 4)



class TestStoreConstraints:
    """Invariants the database enforces on its own."""

    @pytest.mark.parametrize("price", [Decimal("-10"), Decimal("-0.01")])
    async def test_negative_plan_price_is_rejected(self, db_session, price) -> None:
        db_session.add(Plan(name="Broken", price_usd=price, features=[]))
        with pytest.raises(IntegrityError):
            await db_session.commit()
        await db_session.rollback()
        assert await _count(Plan) == 0

    @pytest.mark.parametrize("rating", [0, 6, 9])
    async def test_rating_outside_one_to_five_is_rejected(self, db_session, rating) -> None:
        db_session.add(Review(name="Critic", stars=rating, content="..."))
        with pytest.raises(IntegrityError):
            await db_session.commit()
        await db_session.rollback()
        assert await _count(Review) == 0

    async def test_boundary_values_are_accepted(self, db_session) -> None:
        db_session.add_all(
            [Plan(name="Free", price_usd=0, features=[]), Review(name="A", stars=1), Review(name="B", stars=5)]
        )
        await db_session.commit()
        assert (await _count(Plan), await _count(Review)) == (1, 2)

    async def test_orm_delete_removes_per_user_rows(self, db_session) -> None:
        user = await create_account(db_session, email="gone@example.com", password="pw")
        await db_session.delete(user)
        await db_session.commit()
        assert (await _count(User), await _count(Status), await _count(Targets), await _count(Metric)) == (0, 0, 0, 0)
