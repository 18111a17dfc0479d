"""smm_matrix.models
===================
Mini-README: Contains SQLAlchemy ORM model definitions for SMM Matrix, including
accounts, blog posts, plans, orders, reviews, support tickets, growth metric
snapshots, targeting preferences, automation status flags, and newsletter
subscribers. Enumerations close the set of roles and of order/ticket statuses and
declare which status transitions are legal.
"""

import enum
from datetime import datetime
from typing import List, Optional

from sqlalchemy import JSON, Boolean, CheckConstraint, DateTime, Enum, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .database import Base


class UserRole(str, enum.Enum):
    """Enumerated user roles within the site."""

    USER = "user"
    STAFF = "staff"
    ADMIN = "admin"


class OrderStatus(str, enum.Enum):
    """Lifecycle of a plan purchase."""

    PENDING = "pending"
    PAID = "paid"
    DECLINED = "declined"
    CANCELLED = "cancelled"

    def can_transition_to(self, target: "OrderStatus") -> bool:
        return target in ORDER_TRANSITIONS[self]


class TicketStatus(str, enum.Enum):
    """Lifecycle of a support ticket."""

    OPEN = "open"
    CLOSED = "closed"

    def can_transition_to(self, target: "TicketStatus") -> bool:
        return target in TICKET_TRANSITIONS[self]


ORDER_TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.PAID, OrderStatus.DECLINED, OrderStatus.CANCELLED}),
    OrderStatus.PAID: frozenset(),
    OrderStatus.DECLINED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}

TICKET_TRANSITIONS: dict[TicketStatus, frozenset[TicketStatus]] = {
    TicketStatus.OPEN: frozenset({TicketStatus.CLOSED}),
    TicketStatus.CLOSED: frozenset(),
}


class User(Base):
    """Represents an account with a role used by the role gate."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    hashed_password: Mapped[str] = mapped_column(String(255), nullable=False)
    name: Mapped[str] = mapped_column(String(255), default="")
    role: Mapped[UserRole] = mapped_column(Enum(UserRole), default=UserRole.USER)
    instagram: Mapped[str] = mapped_column(String(255), default="")
    unsubscribed: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    # Per-user rows cannot exist without their account.
    status: Mapped[Optional["Status"]] = relationship(
        back_populates="user", uselist=False, cascade="all, delete-orphan"
    )
    targets: Mapped[Optional["Targets"]] = relationship(
        back_populates="user", uselist=False, cascade="all, delete-orphan"
    )
    metrics: Mapped[List["Metric"]] = relationship(
        back_populates="user", order_by="Metric.id", cascade="all, delete-orphan"
    )


class Post(Base):
    """A blog article shown on the public site."""

    __tablename__ = "posts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(512), nullable=False)
    author: Mapped[str] = mapped_column(String(255), default="")
    image: Mapped[str] = mapped_column(String(1024), default="")
    excerpt: Mapped[str] = mapped_column(Text, default="")
    body: Mapped[str] = mapped_column(Text, default="")
    views: Mapped[int] = mapped_column(Integer, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)


class Plan(Base):
    """A purchasable growth plan priced monthly in USD."""

    __tablename__ = "plans"
    __table_args__ = (CheckConstraint("price_usd >= 0", name="ck_plans_price_non_negative"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    price_usd: Mapped[float] = mapped_column(Numeric(10, 2), default=0)
    features: Mapped[list[str]] = mapped_column(JSON, default=list)

    orders: Mapped[List["Order"]] = relationship(back_populates="plan")


class Order(Base):
    """A plan purchase. ``user_id`` may outlive the account under the retain policy."""

    __tablename__ = "orders"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int | None] = mapped_column(ForeignKey("users.id"), nullable=True)
    plan_id: Mapped[int] = mapped_column(ForeignKey("plans.id"))
    ig_username: Mapped[str] = mapped_column(String(255), default="")
    notes: Mapped[str] = mapped_column(Text, default="")
    status: Mapped[OrderStatus] = mapped_column(Enum(OrderStatus), default=OrderStatus.PENDING)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    plan: Mapped[Plan] = relationship(back_populates="orders")


class Review(Base):
    """A customer testimonial."""

    __tablename__ = "reviews"
    __table_args__ = (CheckConstraint("stars BETWEEN 1 AND 5", name="ck_reviews_stars_range"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255))
    stars: Mapped[int] = mapped_column(Integer, default=5)
    content: Mapped[str] = mapped_column(Text, default="")
    avatar: Mapped[str] = mapped_column(String(1024), default="")
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)


class Ticket(Base):
    """A support request; anonymous contact-form tickets have no ``user_id``."""

    __tablename__ = "tickets"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int | None] = mapped_column(ForeignKey("users.id"), nullable=True)
    email: Mapped[str] = mapped_column(String(255), default="")
    instagram: Mapped[str] = mapped_column(String(255), default="")
    subject: Mapped[str] = mapped_column(String(512), default="")
    message: Mapped[str] = mapped_column(Text, default="")
    status: Mapped[TicketStatus] = mapped_column(Enum(TicketStatus), default=TicketStatus.OPEN)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)


class Metric(Base):
    """Append-only likes/follows snapshot for a user."""

    __tablename__ = "metrics"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"))
    likes: Mapped[int] = mapped_column(Integer, default=0)
    follows: Mapped[int] = mapped_column(Integer, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    user: Mapped[User] = relationship(back_populates="metrics")


class Targets(Base):
    """Audience targeting preferences, one row per user."""

    __tablename__ = "targets"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), unique=True)
    niche: Mapped[str] = mapped_column(String(255), default="")
    competitors: Mapped[str] = mapped_column(Text, default="")
    hashtags: Mapped[str] = mapped_column(Text, default="")
    geo: Mapped[str] = mapped_column(String(255), default="")
    notes: Mapped[str] = mapped_column(Text, default="")
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    user: Mapped[User] = relationship(back_populates="targets")


class Status(Base):
    """Growth automation toggles and complaint notes, one row per user."""

    __tablename__ = "statuses"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), unique=True)
    following_status: Mapped[str] = mapped_column(String(255), default="Select status")
    like_enabled: Mapped[bool] = mapped_column(Boolean, default=False)
    follow_enabled: Mapped[bool] = mapped_column(Boolean, default=True)
    comment_enabled: Mapped[bool] = mapped_column(Boolean, default=False)
    dm_enabled: Mapped[bool] = mapped_column(Boolean, default=False)
    hashtags: Mapped[str] = mapped_column(Text, default="")
    team_complaint: Mapped[str] = mapped_column(Text, default="")
    client_complaint: Mapped[str] = mapped_column(Text, default="")
    complaint_explanation: Mapped[str] = mapped_column(Text, default="")

    user: Mapped[User] = relationship(back_populates="status")


class Subscriber(Base):
    """Newsletter signup. Duplicate emails are allowed."""

    __tablename__ = "subscribers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(String(255))
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
