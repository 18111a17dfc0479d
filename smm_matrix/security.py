"""smm_matrix.security
=====================
Mini-README: Houses authentication utilities including password hashing, the signed
session cookie, and the role gate. The session is an explicit ``SessionState`` value
decoded from the cookie on every request and written back by the handlers that change
it; it carries the signed-in user id and the failed-login lockout counters. Relies on
passlib and python-jose for cryptographic operations.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from datetime import datetime, timedelta, timezone
from typing import Annotated, Any, Iterable, Optional

from fastapi import Depends, Request, Response
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.ext.asyncio import AsyncSession

from .config import get_settings
from .database import get_db_session
from .logger import get_logger
from .models import User, UserRole

LOGGER = get_logger(__name__)

# ``bcrypt_sha256`` pre-hashes with SHA256 so passphrases longer than bcrypt's 72 byte
# limit are still fully significant.
pwd_context = CryptContext(
    schemes=["bcrypt_sha256"],
    deprecated="auto",
    bcrypt_sha256__rounds=get_settings().password_hash_rounds,
)

PASSWORD_MAX_LENGTH = 128
SESSION_ALGORITHM = "HS256"


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Validate a plain password against a hashed value."""

    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Hash a password using salted bcrypt."""

    return pwd_context.hash(password)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class SessionState:
    """Per-browser session carried in the signed cookie."""

    user_id: Optional[int] = None
    failed_logins: int = 0
    locked_until: Optional[datetime] = None

    def is_locked(self, now: datetime) -> bool:
        return self.locked_until is not None and now < self.locked_until

    def seconds_remaining(self, now: datetime) -> int:
        """Whole seconds left in the lockout window, rounded up."""

        if not self.is_locked(now):
            return 0
        return math.ceil((self.locked_until - now).total_seconds())

    def register_failure(self, now: datetime, *, threshold: int, window: timedelta) -> "SessionState":
        """Count a failed login and start the lockout window once ``threshold`` is hit."""

        failed = self.failed_logins + 1
        locked_until = self.locked_until
        if failed >= threshold:
            locked_until = now + window
        return replace(self, failed_logins=failed, locked_until=locked_until)

    @classmethod
    def signed_in(cls, user_id: int) -> "SessionState":
        """Fresh state for ``user_id``; prior failures and lockout are dropped."""

        return cls(user_id=user_id)

    def to_claims(self) -> dict[str, Any]:
        return {
            "uid": self.user_id,
            "failed": self.failed_logins,
            "locked_until": self.locked_until.timestamp() if self.locked_until else None,
        }

    @classmethod
    def from_claims(cls, claims: dict[str, Any]) -> "SessionState":
        locked_until = claims.get("locked_until")
        return cls(
            user_id=claims.get("uid"),
            failed_logins=int(claims.get("failed") or 0),
            locked_until=datetime.fromtimestamp(locked_until, tz=timezone.utc) if locked_until else None,
        )


def encode_session(state: SessionState) -> str:
    """Sign a session state into a compact token for the cookie."""

    settings = get_settings()
    claims = state.to_claims()
    claims["exp"] = utcnow() + timedelta(seconds=settings.session_max_age_seconds)
    return jwt.encode(claims, settings.secret_key, algorithm=SESSION_ALGORITHM)


def decode_session(token: str | None) -> SessionState:
    """Return the state stored in ``token`` or a fresh anonymous state."""

    if not token:
        return SessionState()

    settings = get_settings()
    try:
        claims = jwt.decode(token, settings.secret_key, algorithms=[SESSION_ALGORITHM])
    except JWTError as exc:
        LOGGER.warning("Discarding invalid session cookie: %s", exc)
        return SessionState()
    return SessionState.from_claims(claims)


def write_session(response: Response, state: SessionState) -> Response:
    """Persist ``state`` on the outgoing response."""

    settings = get_settings()
    response.set_cookie(
        key=settings.session_cookie_name,
        value=encode_session(state),
        httponly=True,
        secure=False,
        samesite="lax",
        max_age=settings.session_max_age_seconds,
    )
    return response


def clear_session(response: Response) -> Response:
    response.delete_cookie(get_settings().session_cookie_name)
    return response


async def get_session_state(request: Request) -> SessionState:
    """Resolve the session value for the current request."""

    return decode_session(request.cookies.get(get_settings().session_cookie_name))


async def get_optional_user(
    state: Annotated[SessionState, Depends(get_session_state)],
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> User | None:
    """Return the signed-in user, or ``None`` for anonymous visitors."""

    if state.user_id is None:
        return None

    user = await session.get(User, state.user_id)
    if user is None:
        LOGGER.debug("Session references missing user id=%s", state.user_id)
    return user


class AccessDenied(Exception):
    """Raised by the role gate; rendered as a login redirect or a 403."""

    def __init__(self, wants_html: bool) -> None:
        super().__init__("Access denied")
        self.wants_html = wants_html


def require_role(allowed_roles: Iterable[UserRole]):
    """Dependency factory enforcing role membership for protected routes."""

    allowed = frozenset(allowed_roles)

    async def role_checker(
        request: Request,
        user: Annotated[User | None, Depends(get_optional_user)],
    ) -> User:
        if user is None or user.role not in allowed:
            LOGGER.warning(
                "Rejected %s %s for %s (allowed=%s)",
                request.method,
                request.url.path,
                user.email if user else "anonymous",
                sorted(role.value for role in allowed),
            )
            raise AccessDenied(wants_html="text/html" in request.headers.get("accept", ""))
        return user

    return role_checker


STAFF_ROLES = (UserRole.STAFF, UserRole.ADMIN)
ADMIN_ROLES = (UserRole.ADMIN,)
ANY_ROLE = tuple(UserRole)
