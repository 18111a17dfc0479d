"""smm_matrix.services.content_service
=====================================
Mini-README: Read and write helpers for marketing content: blog posts, plans, and
reviews. Viewing a post bumps its view counter with a single UPDATE so concurrent
views never lose increments.
"""

from __future__ import annotations

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ..logger import get_logger
from ..models import Plan, Post, Review

LOGGER = get_logger(__name__)


async def list_posts(session: AsyncSession, *, limit: int | None = None) -> list[Post]:
    """Return posts newest first, optionally capped at ``limit``."""

    stmt = select(Post).order_by(Post.created_at.desc(), Post.id.desc())
    if limit is not None:
        stmt = stmt.limit(limit)
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def view_post(session: AsyncSession, post_id: int) -> Post | None:
    """Increment the view counter of a post and return it."""

    await session.execute(update(Post).where(Post.id == post_id).values(views=Post.views + 1))
    await session.commit()

    post = await session.get(Post, post_id, populate_existing=True)
    LOGGER.debug("Viewed post_id=%s found=%s", post_id, bool(post))
    return post


async def create_post(
    session: AsyncSession,
    *,
    title: str,
    author: str,
    image: str = "",
    excerpt: str = "",
    body: str = "",
) -> Post:
    post = Post(title=title.strip(), author=author, image=image.strip(), excerpt=excerpt.strip(), body=body)
    session.add(post)
    await session.commit()
    await session.refresh(post)
    LOGGER.info("Created post %r (id=%s) by %s", post.title, post.id, author)
    return post


async def list_plans(session: AsyncSession) -> list[Plan]:
    result = await session.execute(select(Plan).order_by(Plan.id))
    return list(result.scalars().all())


async def fetch_plan(session: AsyncSession, plan_id: int | None) -> Plan | None:
    if plan_id is None:
        return None
    return await session.get(Plan, plan_id)


async def list_reviews(session: AsyncSession) -> list[Review]:
    result = await session.execute(select(Review).order_by(Review.created_at.desc(), Review.id.desc()))
    return list(result.scalars().all())
