"""smm_matrix.services.metrics_service
=====================================
Mini-README: Growth metric snapshots. Metrics are append-only: staff updates insert
a new row rather than editing the latest one. The performance view seeds a short
synthetic history for users that have none so the chart always has a shape.
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..logger import get_logger
from ..models import Metric

LOGGER = get_logger(__name__)

SYNTHETIC_POINTS = 6


def parse_count(raw: str | int | None) -> int:
    """Coerce a form value to a non-negative integer, treating junk as zero."""

    try:
        value = int(str(raw).strip()) if raw not in (None, "") else 0
    except ValueError:
        return 0
    return max(0, value)


async def list_metrics(session: AsyncSession, user_id: int) -> list[Metric]:
    """Snapshots for ``user_id`` in insertion order."""

    result = await session.execute(select(Metric).where(Metric.user_id == user_id).order_by(Metric.id))
    return list(result.scalars().all())


async def latest_metric(session: AsyncSession, user_id: int) -> Metric | None:
    stmt = select(Metric).where(Metric.user_id == user_id).order_by(Metric.id.desc()).limit(1)
    return (await session.execute(stmt)).scalar_one_or_none()


async def append_snapshot(session: AsyncSession, user_id: int, likes: int, follows: int) -> Metric:
    metric = Metric(user_id=user_id, likes=max(0, likes), follows=max(0, follows))
    session.add(metric)
    await session.commit()
    LOGGER.info("Recorded metrics for user id=%s likes=%s follows=%s", user_id, metric.likes, metric.follows)
    return metric


async def ensure_history(session: AsyncSession, user_id: int) -> list[Metric]:
    """Return the user's history, seeding synthetic points if there is none."""

    metrics = await list_metrics(session, user_id)
    if metrics:
        return metrics

    session.add_all(
        Metric(user_id=user_id, likes=10 + index * 5, follows=8 + index * 3) for index in range(SYNTHETIC_POINTS)
    )
    await session.commit()
    LOGGER.info("Seeded %d synthetic metric points for user id=%s", SYNTHETIC_POINTS, user_id)
    return await list_metrics(session, user_id)
