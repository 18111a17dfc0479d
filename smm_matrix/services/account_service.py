"""smm_matrix.services.account_service
=====================================
Mini-README: Database operations for accounts. Creating an account also creates its
Status, Targets, and first Metric rows in the same transaction; deleting one removes
those rows and applies the configured policy to the account's orders and tickets.
Role changes and the unsubscribe toggle also live here so routers stay focused on
HTTP concerns.
"""

from __future__ import annotations

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import get_settings
from ..logger import get_logger
from ..models import Metric, Order, Status, Targets, Ticket, User, UserRole
from ..security import get_password_hash, verify_password

LOGGER = get_logger(__name__)


class EmailAlreadyRegisteredError(ValueError):
    """Raised when an account with the same normalised email already exists."""


def normalize_email(email: str | None) -> str:
    return (email or "").strip().lower()


async def fetch_user_by_email(session: AsyncSession, email: str) -> User | None:
    stmt = select(User).where(User.email == normalize_email(email))
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def list_users(session: AsyncSession) -> list[User]:
    """Return all accounts, newest first."""

    result = await session.execute(select(User).order_by(User.id.desc()))
    return list(result.scalars().all())


async def count_users(session: AsyncSession) -> int:
    return (await session.execute(select(func.count(User.id)))).scalar_one()


async def create_account(
    session: AsyncSession,
    *,
    email: str,
    password: str,
    name: str = "",
    instagram: str = "",
    role: UserRole = UserRole.USER,
    initial_likes: int = 0,
    initial_follows: int = 0,
) -> User:
    """Insert a user with its Status, Targets, and first Metric as one unit.

    Raises ``EmailAlreadyRegisteredError`` without writing anything when the email
    is taken.
    """

    normalized = normalize_email(email)
    if await fetch_user_by_email(session, normalized) is not None:
        LOGGER.warning("Account creation with existing email: %s", normalized)
        raise EmailAlreadyRegisteredError("Email already exists")

    user = User(
        email=normalized,
        hashed_password=get_password_hash(password),
        name=(name or "").strip(),
        instagram=(instagram or "").strip(),
        role=role,
    )
    session.add(user)
    try:
        await session.flush()
        session.add_all(
            [
                Status(user_id=user.id),
                Targets(user_id=user.id),
                Metric(user_id=user.id, likes=initial_likes, follows=initial_follows),
            ]
        )
        await session.commit()
    except IntegrityError as exc:
        # Lost a race with a concurrent signup for the same email.
        await session.rollback()
        raise EmailAlreadyRegisteredError("Email already exists") from exc

    await session.refresh(user)
    LOGGER.info("Created %s account %s (id=%s)", role.value, normalized, user.id)
    return user


async def authenticate(session: AsyncSession, email: str, password: str) -> User | None:
    """Return the user when ``password`` matches the stored hash."""

    user = await fetch_user_by_email(session, email)
    if user is None:
        LOGGER.debug("Login lookup found no account for %s", normalize_email(email))
        return None
    if not verify_password(password, user.hashed_password):
        return None
    return user


async def assign_role_by_email(session: AsyncSession, email: str, role: UserRole) -> bool:
    """Set the role of the account with ``email``; returns whether one was found."""

    user = await fetch_user_by_email(session, email)
    if user is None:
        LOGGER.warning("Role assignment for unknown email %s", normalize_email(email))
        return False
    user.role = role
    await session.commit()
    LOGGER.info("Assigned role %s to %s", role.value, user.email)
    return True


async def set_role(session: AsyncSession, user_id: int, role: UserRole) -> None:
    await session.execute(update(User).where(User.id == user_id).values(role=role))
    await session.commit()
    LOGGER.info("Set role of user id=%s to %s", user_id, role.value)


async def toggle_unsubscribed(session: AsyncSession, user_id: int) -> bool | None:
    """Flip the unsubscribed flag; returns the new value or ``None`` if missing."""

    user = await session.get(User, user_id)
    if user is None:
        return None
    user.unsubscribed = not user.unsubscribed
    await session.commit()
    LOGGER.info("User id=%s unsubscribed=%s", user_id, user.unsubscribed)
    return user.unsubscribed


async def delete_account(session: AsyncSession, user_id: int, *, policy: str | None = None) -> None:
    """Remove a user and its per-user rows.

    Orders and tickets follow ``policy`` (defaults to the configured
    ``user_deletion_policy``): ``retain`` keeps them pointing at the deleted id,
    ``anonymize`` clears their ``user_id``, ``purge`` deletes them.
    """

    policy = policy or get_settings().user_deletion_policy

    await session.execute(delete(Targets).where(Targets.user_id == user_id))
    await session.execute(delete(Status).where(Status.user_id == user_id))
    await session.execute(delete(Metric).where(Metric.user_id == user_id))

    if policy == "anonymize":
        await session.execute(update(Order).where(Order.user_id == user_id).values(user_id=None))
        await session.execute(update(Ticket).where(Ticket.user_id == user_id).values(user_id=None))
    elif policy == "purge":
        await session.execute(delete(Order).where(Order.user_id == user_id))
        await session.execute(delete(Ticket).where(Ticket.user_id == user_id))

    await session.execute(delete(User).where(User.id == user_id))
    await session.commit()
    LOGGER.info("Deleted user id=%s (orders/tickets policy=%s)", user_id, policy)
