"""smm_matrix.schemas
=====================
Mini-README: Defines Pydantic models used for JSON responses. Schemas mirror ORM
models while constraining the fields exposed to clients; the performance series is
the payload the chart script consumes.
"""

from decimal import Decimal
from typing import List

from pydantic import BaseModel, Field

from .models import UserRole


class UserRead(BaseModel):
    """Representation of an account returned to staff tooling."""

    id: int
    email: str
    name: str
    role: UserRole
    instagram: str
    unsubscribed: bool

    class Config:
        from_attributes = True


class PlanRead(BaseModel):
    """Public representation of a plan."""

    id: int
    name: str
    price_usd: Decimal = Field(ge=0)
    features: List[str]

    class Config:
        from_attributes = True


class PerformanceSeries(BaseModel):
    """Chart data: parallel arrays labelled ``P1..Pn`` in snapshot order."""

    user_id: int
    email: str
    labels: List[str]
    likes: List[int]
    follows: List[int]

    @classmethod
    def from_metrics(cls, user_id: int, email: str, metrics) -> "PerformanceSeries":
        return cls(
            user_id=user_id,
            email=email,
            labels=[f"P{index + 1}" for index in range(len(metrics))],
            likes=[metric.likes for metric in metrics],
            follows=[metric.follows for metric in metrics],
        )


class DashboardStatsRead(BaseModel):
    users: int
    pending_orders: int
    declined_orders: int
    subscribers: int
    total_accounting: Decimal

    class Config:
        from_attributes = True
