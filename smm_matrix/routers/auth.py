"""smm_matrix.routers.auth
=========================
Mini-README: Defines authentication routes: login with a per-session lockout after
repeated failures, signup with automatic sign-in, and logout. A locked session is
refused before any database lookup. Successful logins redirect by role: admins to
the dashboard, staff to the control panel, everyone else home.
"""

from datetime import timedelta

from fastapi import APIRouter, Depends, Form, Request, status
from fastapi.responses import RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import get_settings
from ..database import get_db_session
from ..logger import get_logger
from ..models import User, UserRole
from ..security import (
    PASSWORD_MAX_LENGTH,
    SessionState,
    clear_session,
    get_optional_user,
    get_session_state,
    utcnow,
    write_session,
)
from ..services import EmailAlreadyRegisteredError, authenticate, create_account
from ..templating import TEMPLATES

LOGGER = get_logger(__name__)

router = APIRouter(tags=["Authentication"])

ROLE_LANDING_PAGES = {
    UserRole.ADMIN: "/dashboard",
    UserRole.STAFF: "/staff",
    UserRole.USER: "/",
}

SIGNUP_INITIAL_LIKES = 10
SIGNUP_INITIAL_FOLLOWS = 8


def landing_page_for(user: User) -> str:
    return ROLE_LANDING_PAGES.get(user.role, "/")


def _login_error(request: Request, user: User | None, error: str, state: SessionState, status_code: int):
    response = TEMPLATES.TemplateResponse(
        request,
        "login.html",
        {"user": user, "error": error, "title": "Login"},
        status_code=status_code,
    )
    return write_session(response, state)


@router.get("/login")
async def login_form(request: Request, user: User | None = Depends(get_optional_user)):
    """Render the login page."""

    return TEMPLATES.TemplateResponse(request, "login.html", {"user": user, "title": "Login"})


@router.post("/login")
async def login_user(
    request: Request,
    email: str = Form(""),
    password: str = Form(""),
    state: SessionState = Depends(get_session_state),
    session: AsyncSession = Depends(get_db_session),
):
    """Check credentials, counting failures towards the lockout.

    A locked session is answered without touching the database; the signed-in
    viewer is looked up only on the failure path.
    """

    settings = get_settings()
    now = utcnow()
    if state.is_locked(now):
        wait_seconds = state.seconds_remaining(now)
        LOGGER.warning("Login attempt during lockout (%ss remaining)", wait_seconds)
        return _login_error(
            request,
            None,
            f"Too many attempts. Try again in {wait_seconds} seconds.",
            state,
            status.HTTP_429_TOO_MANY_REQUESTS,
        )

    account = None
    if len(password) <= PASSWORD_MAX_LENGTH:
        account = await authenticate(session, email, password)

    if account is None:
        state = state.register_failure(
            now,
            threshold=settings.login_max_attempts,
            window=timedelta(minutes=settings.login_lockout_minutes),
        )
        LOGGER.warning("Failed login for %s (attempt %s)", email, state.failed_logins)
        viewer = await session.get(User, state.user_id) if state.user_id else None
        return _login_error(request, viewer, "Invalid credentials", state, status.HTTP_401_UNAUTHORIZED)

    LOGGER.info("User %s signed in", account.email)
    redirect = RedirectResponse(url=landing_page_for(account), status_code=status.HTTP_303_SEE_OTHER)
    return write_session(redirect, SessionState.signed_in(account.id))


@router.get("/logout")
async def logout_user():
    """Drop the whole session and go home."""

    response = RedirectResponse(url="/", status_code=status.HTTP_302_FOUND)
    return clear_session(response)


@router.get("/signup")
async def signup_form(request: Request, user: User | None = Depends(get_optional_user)):
    return TEMPLATES.TemplateResponse(request, "signup.html", {"user": user, "title": "Sign Up"})


@router.post("/signup")
async def signup_user(
    request: Request,
    name: str = Form(""),
    email: str = Form(""),
    instagram: str = Form(""),
    password: str = Form(""),
    state: SessionState = Depends(get_session_state),
    user: User | None = Depends(get_optional_user),
    session: AsyncSession = Depends(get_db_session),
):
    """Create a user account and sign it in."""

    form_values = {"name": name, "email": email, "instagram": instagram}
    error = None
    if not email.strip() or not password:
        error = "Email & password required"
    elif len(password) > PASSWORD_MAX_LENGTH:
        error = f"Password must be at most {PASSWORD_MAX_LENGTH} characters."

    if error is None:
        try:
            account = await create_account(
                session,
                email=email,
                password=password,
                name=name,
                instagram=instagram,
                role=UserRole.USER,
                initial_likes=SIGNUP_INITIAL_LIKES,
                initial_follows=SIGNUP_INITIAL_FOLLOWS,
            )
        except EmailAlreadyRegisteredError as exc:
            error = str(exc)
        else:
            redirect = RedirectResponse(url="/", status_code=status.HTTP_303_SEE_OTHER)
            return write_session(redirect, SessionState.signed_in(account.id))

    return TEMPLATES.TemplateResponse(
        request,
        "signup.html",
        {"user": user, "error": error, "form_values": form_values, "title": "Sign Up"},
        status_code=status.HTTP_400_BAD_REQUEST,
    )
