"""API tests for the IFS endpoints backed by an in-memory repository."""

from collections.abc import AsyncGenerator
from datetime import timedelta

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from structlog.testing import capture_logs

from src.api.routes.ifs import get_repository
from src.main import app
from tests.conftest import BASE_DAY, InMemoryScoreRepository, consecutive_records, make_record

pytestmark = pytest.mark.integration

BASE_URL = "http://test"


@pytest_asyncio.fixture
async def client(memory_repo: InMemoryScoreRepository) -> AsyncGenerator[AsyncClient, None]:
    app.dependency_overrides[get_repository] = lambda: memory_repo
    try:
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url=BASE_URL) as ac:
            yield ac
    finally:
        app.dependency_overrides.clear()


def _submission(internal=80, external=70, high_stakes=90, **extra) -> dict:
    return {
        "owner_id": "client-1",
        "date": BASE_DAY.isoformat(),
        "internal_fortitude": internal,
        "external_accountability": external,
        "high_stakes_integrity": high_stakes,
        **extra,
    }


async def _seed(repo: InMemoryScoreRepository, scores: list[int], owner_id="client-1") -> None:
    for record in consecutive_records(BASE_DAY, scores, owner_id=owner_id):
        await repo.upsert(record)


class TestSubmitScore:
    @pytest.mark.asyncio
    async def test_submit_stores_composite(self, client, memory_repo):
        response = await client.post("/api/v1/ifs/scores", json=_submission(note="ok"))
        assert response.status_code == 200
        data = response.json()
        assert data["record"]["composite_score"] == 78
        assert data["record"]["note"] == "ok"
        assert data["band"] == "compliance"
        assert ("client-1", BASE_DAY) in memory_repo.records

    @pytest.mark.asyncio
    async def test_out_of_range_rejected(self, client, memory_repo):
        response = await client.post("/api/v1/ifs/scores", json=_submission(internal=101))
        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "validation_error"
        assert "internal_fortitude" in body["message"]
        assert memory_repo.records == {}

    @pytest.mark.asyncio
    async def test_clamp_requested_explicitly(self, client):
        response = await client.post(
            "/api/v1/ifs/scores?clamp=true", json=_submission(120, -5, 50)
        )
        assert response.status_code == 200
        record = response.json()["record"]
        assert record["composite_score"] == 50
        assert record["sub_scores"]["internal_fortitude"] == 100

    @pytest.mark.asyncio
    async def test_non_numeric_rejected_by_schema(self, client):
        response = await client.post("/api/v1/ifs/scores", json=_submission(internal="lots"))
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_amending_same_day_replaces_record(self, client, memory_repo):
        await client.post("/api/v1/ifs/scores", json=_submission(40, 40, 40))
        await client.post("/api/v1/ifs/scores", json=_submission(95, 95, 95))
        assert len(memory_repo.records) == 1
        assert memory_repo.records[("client-1", BASE_DAY)].composite_score == 95

    @pytest.mark.asyncio
    async def test_date_defaults_to_today(self, client, memory_repo):
        payload = _submission()
        del payload["date"]
        response = await client.post("/api/v1/ifs/scores", json=payload)
        assert response.status_code == 200
        assert response.json()["record"]["date"]


class TestCompositePreview:
    @pytest.mark.asyncio
    async def test_preview(self, client, memory_repo):
        response = await client.post(
            "/api/v1/ifs/composite",
            json={
                "internal_fortitude": 100,
                "external_accountability": 100,
                "high_stakes_integrity": 100,
            },
        )
        assert response.status_code == 200
        assert response.json() == {"composite_score": 100, "band": "graduation_track"}
        assert memory_repo.records == {}

    @pytest.mark.asyncio
    async def test_preview_validates(self, client):
        response = await client.post(
            "/api/v1/ifs/composite",
            json={
                "internal_fortitude": -1,
                "external_accountability": 50,
                "high_stakes_integrity": 50,
            },
        )
        assert response.status_code == 400


class TestTriggers:
    @pytest.mark.asyncio
    async def test_sanction_warning(self, client, memory_repo):
        await _seed(memory_repo, [60, 60, 60])
        evaluation_date = (BASE_DAY + timedelta(days=2)).isoformat()
        response = await client.get(
            f"/api/v1/ifs/client-1/triggers?evaluation_date={evaluation_date}"
        )
        assert response.status_code == 200
        data = response.json()
        assert data["owner_id"] == "client-1"
        assert data["latest_score"] == 60
        assert data["consecutive_sanction_warning_days"] == 3
        assert data["sanction_warning_triggered"] is True
        assert data["review_mandate_triggered"] is False

    @pytest.mark.asyncio
    async def test_unknown_owner_gets_empty_report(self, client):
        response = await client.get(
            f"/api/v1/ifs/nobody/triggers?evaluation_date={BASE_DAY.isoformat()}"
        )
        assert response.status_code == 200
        data = response.json()
        assert data["latest_score"] is None
        assert data["records_evaluated"] == 0

    @pytest.mark.asyncio
    async def test_owners_are_isolated(self, client, memory_repo):
        await _seed(memory_repo, [40, 40, 40, 40, 40], owner_id="client-2")
        await _seed(memory_repo, [95, 95])
        evaluation_date = (BASE_DAY + timedelta(days=4)).isoformat()
        response = await client.get(
            f"/api/v1/ifs/client-1/triggers?evaluation_date={evaluation_date}"
        )
        data = response.json()
        assert data["review_mandate_day_count"] == 0
        assert data["consecutive_graduation_days"] == 2


class TestTriggerRoster:
    @pytest.mark.asyncio
    async def test_one_report_per_owner(self, client, memory_repo):
        await _seed(memory_repo, [60, 60, 60], owner_id="client-b")
        await _seed(memory_repo, [95, 95, 95], owner_id="client-a")
        evaluation_date = (BASE_DAY + timedelta(days=2)).isoformat()
        response = await client.get(f"/api/v1/ifs/triggers?evaluation_date={evaluation_date}")
        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 2
        assert [item["owner_id"] for item in data["items"]] == ["client-a", "client-b"]
        assert data["items"][0]["consecutive_graduation_days"] == 3
        assert data["items"][1]["sanction_warning_triggered"] is True

    @pytest.mark.asyncio
    async def test_empty_roster(self, client):
        response = await client.get("/api/v1/ifs/triggers")
        assert response.json() == {"items": [], "total": 0}


class TestSummaryAndHistory:
    @pytest.mark.asyncio
    async def test_summary(self, client, memory_repo):
        await _seed(memory_repo, [40, 45, 30, 20, 35, 80])
        evaluation_date = (BASE_DAY + timedelta(days=5)).isoformat()
        response = await client.get(
            f"/api/v1/ifs/client-1/summary?evaluation_date={evaluation_date}"
        )
        assert response.status_code == 200
        data = response.json()
        assert data["triggers"]["review_mandate_day_count"] == 5
        assert data["triggers"]["review_mandate_triggered"] is True
        assert data["window"]["total_days"] == 6
        assert data["window"]["compliance_days"] == 1
        assert data["window"]["average_score"] == 42  # 250 / 6 = 41.67

    @pytest.mark.asyncio
    async def test_history_is_recent_first_with_bands(self, client, memory_repo):
        await _seed(memory_repo, [95, 80, 60, 30])
        response = await client.get("/api/v1/ifs/client-1/history?limit=3")
        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 3
        assert [item["band"] for item in data["items"]] == [
            "review_failure",
            "sanction_warning",
            "compliance",
        ]

    @pytest.mark.asyncio
    async def test_history_limit_validated(self, client):
        response = await client.get("/api/v1/ifs/client-1/history?limit=0")
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_list_owners(self, client, memory_repo):
        await _seed(memory_repo, [50], owner_id="b")
        await _seed(memory_repo, [50], owner_id="a")
        response = await client.get("/api/v1/ifs/owners")
        assert response.json() == {"items": ["a", "b"], "total": 2}


class TestCheckins:
    @pytest.mark.asyncio
    async def test_checkin_round_trip(self, client):
        response = await client.post(
            "/api/v1/ifs/client-1/checkins",
            json={
                "date": BASE_DAY.isoformat(),
                "truth": True,
                "fidelity": True,
                "courage": True,
            },
        )
        assert response.status_code == 200

        fetched = await client.get(f"/api/v1/ifs/client-1/checkins/{BASE_DAY.isoformat()}")
        assert fetched.status_code == 200
        assert fetched.json()["courage"] is True

    @pytest.mark.asyncio
    async def test_incomplete_checkin_rejected(self, client, memory_repo):
        response = await client.post(
            "/api/v1/ifs/client-1/checkins",
            json={"date": BASE_DAY.isoformat(), "truth": True, "fidelity": False},
        )
        assert response.status_code == 400
        assert "fidelity" in response.json()["message"]
        assert memory_repo.checkins == {}

    @pytest.mark.asyncio
    async def test_missing_checkin_is_404(self, client):
        response = await client.get(f"/api/v1/ifs/client-1/checkins/{BASE_DAY.isoformat()}")
        assert response.status_code == 404


class _DuplicateDayRepository(InMemoryScoreRepository):
    """Returns an extra same-day row, as a legacy import might."""

    async def list_for_owner(self, owner_id: str):
        records = await super().list_for_owner(owner_id)
        return records + [make_record(BASE_DAY, 10, owner_id=owner_id)]


class TestSummaryDuplicates:
    @pytest.mark.asyncio
    async def test_duplicate_day_warned_once_per_request(self):
        repo = _DuplicateDayRepository()
        await _seed(repo, [40])
        app.dependency_overrides[get_repository] = lambda: repo
        try:
            transport = ASGITransport(app=app)
            async with AsyncClient(transport=transport, base_url=BASE_URL) as ac:
                with capture_logs() as logs:
                    response = await ac.get(
                        f"/api/v1/ifs/client-1/summary?evaluation_date={BASE_DAY.isoformat()}"
                    )
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 200
        data = response.json()
        assert data["triggers"]["latest_score"] == 40
        assert data["window"]["total_days"] == 1
        warnings = [e for e in logs if e["event"] == "data_integrity_warning"]
        assert len(warnings) == 1
