"""smm_matrix.services.seed_service
==================================
Mini-README: Idempotent demo data for fresh databases: three accounts (one per role),
the plan catalogue, launch blog posts, and testimonials. Each collection is only
seeded when its table is empty, and accounts are only created when their email is
free, so running it on every startup is safe.
"""

from __future__ import annotations

import random

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..logger import get_logger
from ..models import Metric, Plan, Post, Review, Status, Targets, User, UserRole
from .account_service import create_account, fetch_user_by_email

LOGGER = get_logger(__name__)

DEMO_ACCOUNTS = [
    ("admin@smm.local", "admin123", "Admin", UserRole.ADMIN, "@admin"),
    ("staff@smm.local", "staff123", "Team Member", UserRole.STAFF, "@staff"),
    ("user@smm.local", "user123", "Demo User", UserRole.USER, "@demouser"),
]

DEFAULT_PLANS = [
    (
        "Kickoff",
        49,
        [
            "600-800+ real followers",
            "Growth pods network",
            "Guaranteed results",
            "Real-time analytics",
            "24/7 Live support",
            "Hashtag optimization",
        ],
    ),
    (
        "Growth",
        89,
        [
            "800-1,200+ real followers",
            "Hashtag & account targeting",
            "Targeted AI growth",
            "Real-time analytics",
            "Priority support",
            "Content strategy",
        ],
    ),
    (
        "Advanced",
        149,
        [
            "1,200-1,600+ real followers",
            "10x engagement tools",
            "Turn followers into conversions",
            "Real-time analytics",
            "Priority support",
            "Personal account manager",
            "Advanced targeting",
        ],
    ),
]

DEFAULT_POSTS = [
    (
        "AI-Powered Instagram Growth: The Future is Now",
        "Sarah Chen",
        "https://images.unsplash.com/photo-1677442136019-21780ecad995?w=1200",
        "Discover how AI is revolutionizing Instagram marketing with predictive analytics and automated optimization.",
        "The AI Revolution\n\nAI optimizes hashtags, posting time and audience segments.",
    ),
    (
        "From 1K to 100K: Real Growth Stories",
        "Marcus Rodriguez",
        "https://images.unsplash.com/photo-1611224923853-80b023f02d71?w=1200",
        "Real case studies of accounts that achieved massive organic growth using our strategies.",
        "Case Studies\n\nFashion brand scaled from 1.2k to 95k followers.",
    ),
    (
        "Instagram Algorithm Mastery Guide 2024",
        "Emma Johnson",
        "https://images.unsplash.com/photo-1542744173-8e7e53415bb0?w=1200",
        "Inside look at Instagram's algorithm and how to make it work for your growth.",
        "Algorithm Guide\n\nEngagement, consistency and reels are the pillars.",
    ),
    (
        "Turning Followers into Customers: Conversion Strategies",
        "David Park",
        "https://images.unsplash.com/photo-1556761175-b413da4baf72?w=1200",
        "Learn how to transform your Instagram following into a profitable customer base.",
        "Conversion Strategies\n\nStory CTAs, product tags and landing pages.",
    ),
    (
        "Influencer Marketing: Partnership Strategies",
        "Lisa Thompson",
        "https://images.unsplash.com/photo-1556742049-0cfed4f6a45d?w=1200",
        "Building authentic partnerships that drive real results.",
        "Partnerships\n\nMicro-influencers often outperform macros on ROI.",
    ),
    (
        "Reels That Go Viral: Creative Playbook",
        "Hannah Lee",
        "https://images.unsplash.com/photo-1504593811423-6dd665756598?w=1200",
        "Structure, sound, and hooks that make Reels perform.",
        "Reels Playbook\n\nHook, visual, CTA: a repeatable pattern for virality.",
    ),
]

DEFAULT_REVIEWS = [
    ("Alexandra Johnson", 5, "SMM Matrix transformed our Instagram presence: 2K to 15K followers in 3 months.", 11),
    ("Michael Chen", 5, "Great hashtag strategy and timing. Reach up 400% in month 1.", 12),
    ("Sarah Williams", 5, "Professional service with real results and responsive support.", 13),
    ("David Rodriguez", 4, "Good communication and steady organic growth.", 14),
    ("Emily Davis", 5, "My travel blog blew up with 25K followers in 4 months!", 15),
    ("Robert Kim", 5, "Dedicated manager and tailored strategy. Highly recommended.", 16),
]

DEMO_TARGETS = {
    "niche": "Fitness & Wellness",
    "competitors": "@nike @adidas",
    "hashtags": "#fitness #workout",
    "geo": "United States",
    "notes": "Target: 18-35 health conscious",
}


async def _table_is_empty(session: AsyncSession, model) -> bool:
    return (await session.execute(select(func.count(model.id)))).scalar_one() == 0


async def seed_catalogue(session: AsyncSession) -> None:
    """Seed plans, posts, and reviews into empty tables."""

    if await _table_is_empty(session, Plan):
        session.add_all(Plan(name=name, price_usd=price, features=features) for name, price, features in DEFAULT_PLANS)
    if await _table_is_empty(session, Post):
        session.add_all(
            Post(title=title, author=author, image=image, excerpt=excerpt, body=body)
            for title, author, image, excerpt, body in DEFAULT_POSTS
        )
    if await _table_is_empty(session, Review):
        session.add_all(
            Review(name=name, stars=rating, content=content, avatar=f"https://i.pravatar.cc/150?img={avatar}")
            for name, rating, content, avatar in DEFAULT_REVIEWS
        )
    await session.commit()


async def seed_demo_accounts(session: AsyncSession) -> None:
    """Create the demo admin, staff, and user accounts when missing."""

    for email, password, name, role, instagram in DEMO_ACCOUNTS:
        if await fetch_user_by_email(session, email) is not None:
            continue
        user = await create_account(
            session,
            email=email,
            password=password,
            name=name,
            instagram=instagram,
            role=role,
            initial_likes=random.randint(50, 249),
            initial_follows=random.randint(20, 119),
        )
        targets = (await session.execute(select(Targets).where(Targets.user_id == user.id))).scalar_one()
        for field, value in DEMO_TARGETS.items():
            setattr(targets, field, value)
        await session.commit()


async def backfill_user_rows(session: AsyncSession) -> None:
    """Give every user lacking them a Status, Targets, and first Metric row."""

    user_ids = (await session.execute(select(User.id))).scalars().all()
    with_status = set((await session.execute(select(Status.user_id))).scalars().all())
    with_targets = set((await session.execute(select(Targets.user_id))).scalars().all())
    with_metrics = set((await session.execute(select(Metric.user_id))).scalars().all())

    for user_id in user_ids:
        if user_id not in with_status:
            session.add(Status(user_id=user_id))
        if user_id not in with_targets:
            session.add(Targets(user_id=user_id))
        if user_id not in with_metrics:
            session.add(Metric(user_id=user_id, likes=0, follows=0))
    await session.commit()


async def seed_demo_data(session: AsyncSession) -> None:
    await seed_catalogue(session)
    await seed_demo_accounts(session)
    await backfill_user_rows(session)
    LOGGER.info("Demo data ensured")
