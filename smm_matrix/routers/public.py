"""smm_matrix.routers.public
===========================
Mini-README: Public marketing routes: home, blog listing and detail, pricing,
reviews, the contact form, authenticated support tickets, newsletter signup, and the
static informational pages. Viewing a blog post increments its view counter.
"""

from fastapi import APIRouter, Depends, Form, HTTPException, Request, status
from fastapi.responses import RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import get_db_session
from ..logger import get_logger
from ..models import User
from ..schemas import PlanRead
from ..security import ANY_ROLE, get_optional_user, require_role
from ..services import (
    create_ticket,
    list_plans,
    list_posts,
    list_reviews,
    subscribe_email,
    view_post,
)
from ..templating import TEMPLATES

LOGGER = get_logger(__name__)

router = APIRouter(tags=["Public"])

STATIC_PAGES = {
    "about": {
        "title": "About",
        "heading": "SMM Matrix: Redefining Social Media Excellence",
        "paragraphs": [
            "At SMM Matrix, we're not just a social media marketing agency. We're your partners in digital success.",
            "Founded by marketing experts with real-world results. We focus on data-driven strategies and authentic engagement.",
        ],
    },
    "services": {
        "title": "Services",
        "heading": "Our Services",
        "items": [
            ("Instagram Growth", "organic followers, algorithm-optimized posting."),
            ("Content Strategy", "calendars, reels playbook, creatives."),
            ("Influencer Partnerships", "micro to macro matching and campaign management."),
            ("Analytics & Reporting", "dashboards, conversion tracking, custom reports."),
        ],
    },
    "team": {
        "title": "Team",
        "paragraphs": [
            "Distributed team of growth strategists, creatives, data scientists and account managers.",
        ],
    },
    "terms": {"title": "Terms", "paragraphs": ["Terms placeholder. Replace before production."]},
    "privacy": {"title": "Privacy Policy", "paragraphs": ["Privacy placeholder. Replace before production."]},
    "refunds": {"title": "Refunds", "paragraphs": ["Refund policy placeholder."]},
}

FAQ_ENTRIES = [
    (
        "Are followers real?",
        "Yes. We target real users using niche targeting, competitor analysis and hashtag matching. "
        "We do not use bot farms.",
    ),
    (
        "How do you measure success?",
        "We track profile visits, follows, engagement rate, and conversions. Regular reports are sent to clients.",
    ),
    (
        "Do you provide guarantees?",
        "We provide steady growth guarantees per plan terms. Details are included on plan pages.",
    ),
    (
        "How do I cancel?",
        "Cancel anytime from your dashboard. Payments & refunds depend on payment processor policy.",
    ),
]


def _back_to_referer(request: Request) -> RedirectResponse:
    return RedirectResponse(url=request.headers.get("referer") or "/", status_code=status.HTTP_303_SEE_OTHER)


@router.get("/")
async def home_page(
    request: Request,
    user: User | None = Depends(get_optional_user),
    session: AsyncSession = Depends(get_db_session),
):
    context = {
        "user": user,
        "plans": await list_plans(session),
        "reviews": await list_reviews(session),
        "posts": await list_posts(session),
        "title": "Home",
    }
    return TEMPLATES.TemplateResponse(request, "home.html", context)


@router.get("/blogs")
async def blog_listing(
    request: Request,
    user: User | None = Depends(get_optional_user),
    session: AsyncSession = Depends(get_db_session),
):
    posts = await list_posts(session)
    return TEMPLATES.TemplateResponse(request, "blogs.html", {"user": user, "posts": posts, "title": "Blogs"})


@router.get("/blog/{post_id}")
async def blog_detail(
    post_id: int,
    request: Request,
    user: User | None = Depends(get_optional_user),
    session: AsyncSession = Depends(get_db_session),
):
    """Render a post, counting the view."""

    post = await view_post(session, post_id)
    if post is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not found")
    return TEMPLATES.TemplateResponse(request, "blog_detail.html", {"user": user, "post": post, "title": post.title})


@router.get("/pricing")
async def pricing_page(
    request: Request,
    user: User | None = Depends(get_optional_user),
    session: AsyncSession = Depends(get_db_session),
):
    plans = await list_plans(session)
    return TEMPLATES.TemplateResponse(request, "pricing.html", {"user": user, "plans": plans, "title": "Pricing"})


@router.get("/api/plans", response_model=list[PlanRead])
async def plan_catalogue(session: AsyncSession = Depends(get_db_session)):
    return await list_plans(session)


@router.get("/reviews")
async def reviews_page(
    request: Request,
    user: User | None = Depends(get_optional_user),
    session: AsyncSession = Depends(get_db_session),
):
    reviews = await list_reviews(session)
    return TEMPLATES.TemplateResponse(request, "reviews.html", {"user": user, "reviews": reviews, "title": "Reviews"})


@router.get("/faq")
async def faq_page(request: Request, user: User | None = Depends(get_optional_user)):
    return TEMPLATES.TemplateResponse(
        request, "faq.html", {"user": user, "entries": FAQ_ENTRIES, "title": "FAQ"}
    )


@router.get("/contact")
async def contact_page(request: Request, user: User | None = Depends(get_optional_user)):
    return TEMPLATES.TemplateResponse(request, "contact.html", {"user": user, "title": "Contact"})


@router.post("/contact_submit")
async def contact_submit(
    name: str = Form(""),
    email: str = Form(""),
    instagram: str = Form(""),
    message: str = Form(""),
    session: AsyncSession = Depends(get_db_session),
):
    """Turn a contact form submission into an anonymous ticket."""

    await create_ticket(
        session,
        user_id=None,
        email=email.strip(),
        instagram=instagram.strip(),
        subject=f"Contact: {name.strip() or 'Guest'}",
        message=message,
    )
    return RedirectResponse(url="/contact", status_code=status.HTTP_303_SEE_OTHER)


@router.post("/ticket")
async def submit_ticket(
    request: Request,
    subject: str = Form(""),
    message: str = Form(""),
    user: User = Depends(require_role(ANY_ROLE)),
    session: AsyncSession = Depends(get_db_session),
):
    """Open a support ticket on behalf of the signed-in user."""

    await create_ticket(
        session,
        user_id=user.id,
        email=user.email,
        instagram=user.instagram,
        subject=subject,
        message=message,
    )
    return _back_to_referer(request)


@router.post("/subscribe")
async def subscribe(
    request: Request,
    email: str = Form(""),
    session: AsyncSession = Depends(get_db_session),
):
    await subscribe_email(session, email)
    return _back_to_referer(request)


def _register_static_page(slug: str, page: dict) -> None:
    async def static_page(request: Request, user: User | None = Depends(get_optional_user)):
        return TEMPLATES.TemplateResponse(request, "page.html", {"user": user, "page": page, "title": page["title"]})

    router.add_api_route(f"/{slug}", static_page, methods=["GET"], name=f"static_{slug}")


for _slug, _page in STATIC_PAGES.items():
    _register_static_page(_slug, _page)
