"""Tests for the performance charts and their JSON feed."""

from sqlalchemy import delete, func, select

from smm_matrix.database import AsyncSessionMaker
from smm_matrix.models import Metric, UserRole


async def _clear_metrics(user_id: int) -> None:
    async with AsyncSessionMaker() as session:
        await session.execute(delete(Metric).where(Metric.user_id == user_id))
        await session.commit()


async def _metric_count(user_id: int) -> int:
    async with AsyncSessionMaker() as session:
        stmt = select(func.count(Metric.id)).where(Metric.user_id == user_id)
        return (await session.execute(stmt)).scalar_one()


class TestSyntheticHistory:
    """Users without snapshots get a seeded history."""

    async def test_six_points_are_seeded_once(self, staff_client, make_user) -> None:
        member = await make_user("empty@example.com")
        await _clear_metrics(member.id)

        response = await staff_client.get(f"/api/performance/{member.id}")
        assert response.status_code == 200
        series = response.json()
        assert series["labels"] == ["P1", "P2", "P3", "P4", "P5", "P6"]
        assert series["likes"] == [10, 15, 20, 25, 30, 35]
        assert series["follows"] == [8, 11, 14, 17, 20, 23]

        await staff_client.get(f"/performance/{member.id}")
        assert await _metric_count(member.id) == 6

    async def test_existing_history_is_left_alone(self, staff_client, make_user) -> None:
        member = await make_user("real@example.com", initial_likes=7, initial_follows=3)
        await staff_client.post("/staff/metrics", data={"user_id": member.id, "add_likes": "9", "add_follows": "4"})

        series = (await staff_client.get(f"/api/performance/{member.id}")).json()
        assert series["labels"] == ["P1", "P2"]
        assert series["likes"] == [7, 9]
        assert series["follows"] == [3, 4]
        assert series["email"] == "real@example.com"


class TestPages:
    async def test_own_page_charts_signed_in_member(self, staff_client) -> None:
        response = await staff_client.get("/performance")
        assert response.status_code == 200
        assert "staff@example.com" in response.text
        assert "chart.js" in response.text.lower()

    async def test_missing_user_is_404_without_seeding(self, staff_client) -> None:
        response = await staff_client.get("/performance/999")
        assert response.status_code == 404
        assert await _metric_count(999) == 0

    async def test_plain_user_is_refused(self, client, make_user, login) -> None:
        member = await make_user("curious@example.com", role=UserRole.USER)
        await login("curious@example.com")
        assert (await client.get(f"/performance/{member.id}")).status_code == 403
        assert (await client.get(f"/api/performance/{member.id}")).status_code == 403
