"""Tests for signup, login, lockout and logout routes."""

from unittest.mock import AsyncMock

import pytest
from sqlalchemy import func, select

from smm_matrix.database import AsyncSessionMaker
from smm_matrix.models import Metric, Status, Targets, User, UserRole


async def _count(model, **filters) -> int:
    async with AsyncSessionMaker() as session:
        stmt = select(func.count()).select_from(model)
        for field, value in filters.items():
            stmt = stmt.where(getattr(model, field) == value)
        return (await session.execute(stmt)).scalar_one()


class TestSignup:
    """Tests for POST /signup."""

    async def test_signup_then_login_scenario(self, client) -> None:
        """Signup, log in again, then a duplicate signup is refused."""
        response = await client.post("/signup", data={"email": "a@b.com", "password": "pw1"})
        assert response.status_code == 303
        assert response.headers["location"] == "/"

        await client.get("/logout")
        response = await client.post("/login", data={"email": "a@b.com", "password": "pw1"})
        assert response.status_code == 303
        assert response.headers["location"] == "/"
        assert "smm_sess" in client.cookies

        response = await client.post("/signup", data={"email": "a@b.com", "password": "other"})
        assert response.status_code == 400
        assert "already exists" in response.text
        assert await _count(User, email="a@b.com") == 1

    async def test_signup_creates_dependent_rows(self, client) -> None:
        await client.post(
            "/signup",
            data={"name": "Bea", "email": "Bea@Example.com ", "instagram": "@bea", "password": "pw"},
        )
        async with AsyncSessionMaker() as session:
            user = (await session.execute(select(User).where(User.email == "bea@example.com"))).scalar_one()
        assert user.role == UserRole.USER
        assert user.instagram == "@bea"
        assert await _count(Status, user_id=user.id) == 1
        assert await _count(Targets, user_id=user.id) == 1
        assert await _count(Metric, user_id=user.id) == 1

    async def test_signup_signs_the_user_in(self, client) -> None:
        await client.post("/signup", data={"email": "auto@example.com", "password": "pw"})
        response = await client.post("/ticket", data={"subject": "Hi", "message": "Help"})
        assert response.status_code == 303

    @pytest.mark.parametrize("data", [{"email": "", "password": "pw"}, {"email": "x@example.com", "password": ""}])
    async def test_missing_fields_rerender_form(self, client, data) -> None:
        response = await client.post("/signup", data=data)
        assert response.status_code == 400
        assert "Email &amp; password required" in response.text
        assert await _count(User) == 0

    async def test_overlong_password_is_rejected(self, client) -> None:
        response = await client.post("/signup", data={"email": "long@example.com", "password": "x" * 129})
        assert response.status_code == 400
        assert "at most 128 characters" in response.text
        assert await _count(User) == 0


class TestLogin:
    """Tests for POST /login."""

    @pytest.mark.parametrize(
        ("role", "landing"),
        [(UserRole.ADMIN, "/dashboard"), (UserRole.STAFF, "/staff"), (UserRole.USER, "/")],
    )
    async def test_redirects_by_role(self, client, make_user, login, role, landing) -> None:
        await make_user("member@example.com", role=role)
        response = await login("member@example.com")
        assert response.status_code == 303
        assert response.headers["location"] == landing

    async def test_email_is_case_insensitive(self, client, make_user, login) -> None:
        await make_user("casey@example.com")
        response = await login("  CASEY@example.com")
        assert response.status_code == 303

    async def test_wrong_password_is_rejected(self, client, make_user, login) -> None:
        await make_user("wrong@example.com")
        response = await login("wrong@example.com", "nope")
        assert response.status_code == 401
        assert "Invalid credentials" in response.text

    async def test_lockout_after_six_failures(self, client, make_user, login) -> None:
        await make_user("locked@example.com")
        for _ in range(6):
            response = await login("locked@example.com", "bad")
            assert response.status_code == 401

        response = await login("locked@example.com")
        assert response.status_code == 429
        assert "Too many attempts" in response.text

    async def test_locked_session_skips_credential_lookup(self, client, make_user, login, monkeypatch) -> None:
        await make_user("spy@example.com")
        for _ in range(6):
            await login("spy@example.com", "bad")

        spy = AsyncMock()
        monkeypatch.setattr("smm_matrix.routers.auth.authenticate", spy)
        response = await login("spy@example.com")
        assert response.status_code == 429
        spy.assert_not_awaited()

    async def test_locked_signed_in_session_makes_no_queries(self, client, make_user, login, monkeypatch) -> None:
        await make_user("known@example.com")
        assert (await login("known@example.com")).status_code == 303
        for _ in range(6):
            await login("known@example.com", "bad")

        calls = []

        async def record_get(self, *args, **kwargs):
            calls.append(("get", args))

        async def record_execute(self, *args, **kwargs):
            calls.append(("execute", args))

        monkeypatch.setattr("sqlalchemy.ext.asyncio.AsyncSession.get", record_get)
        monkeypatch.setattr("sqlalchemy.ext.asyncio.AsyncSession.execute", record_execute)
        response = await login("known@example.com")
        assert response.status_code == 429
        assert calls == []

    async def test_success_resets_failure_counter(self, client, make_user, login) -> None:
        await make_user("reset@example.com")
        for _ in range(5):
            await login("reset@example.com", "bad")
        assert (await login("reset@example.com")).status_code == 303
        for _ in range(5):
            await login("reset@example.com", "bad")
        assert (await login("reset@example.com")).status_code == 303

    async def test_lockout_is_per_session(self, client, make_user, login) -> None:
        await make_user("fresh@example.com")
        for _ in range(6):
            await login("fresh@example.com", "bad")
        client.cookies.clear()
        assert (await login("fresh@example.com")).status_code == 303


class TestLogout:
    async def test_logout_clears_session(self, client, make_user, login) -> None:
        await make_user("bye@example.com", role=UserRole.STAFF)
        await login("bye@example.com")
        assert (await client.get("/staff")).status_code == 200

        response = await client.get("/logout")
        assert response.status_code == 302
        assert response.headers["location"] == "/"
        assert (await client.get("/staff")).status_code == 403
