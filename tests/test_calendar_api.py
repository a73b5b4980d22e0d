from datetime import date, time

import pytest
from fastapi.testclient import TestClient

import fieldplan.api.v1.health as health_module
from fieldplan.api.v1.planning import get_directory, get_planning_store
from fieldplan.core.planning.schemas import PlanningItemOut, PlanningStatus
from fieldplan.core.planning.store import InMemoryPlanningStore
from fieldplan.main import app

client = TestClient(app)


def stored(item_id: str, day: date, start: int, end: int, resource: str = "r1") -> PlanningItemOut:
    return PlanningItemOut(
        id=item_id, title=item_id, date=day, start_time=time(start), end_time=time(end),
        assigned_resource_id=resource, project_id="p1", status=PlanningStatus.SCHEDULED,
    )


@pytest.fixture(autouse=True)
def seeded_store(directory):
    items = [
        stored("mon", date(2025, 6, 2), 9, 11),
        stored("mon-overlap", date(2025, 6, 2), 10, 12),
        stored("wed", date(2025, 6, 4), 14, 15, resource="r2"),
        stored("next-week", date(2025, 6, 9), 9, 10),
    ] + [stored(f"busy{h}", date(2025, 6, 20), h, h + 1) for h in range(8, 13)]
    app.dependency_overrides[get_planning_store] = lambda: InMemoryPlanningStore(items)
    app.dependency_overrides[get_directory] = lambda: directory
    yield
    app.dependency_overrides.clear()


def test_week_layout():
    response = client.get("/v1/calendar/week", params={"anchor": "2025-06-04"})
    assert response.status_code == 200
    data = response.json()
    assert data["week_start"] == "2025-06-02"
    assert len(data["days"]) == 7
    monday = data["days"][0]
    assert monday["key"] == "2025-06-02"
    first, second = monday["events"]
    assert (first["top"], first["height"]) == (60, 120)
    assert (first["column"], second["column"], second["columns"]) == (0, 1, 2)
    assert first["event"]["category"] == "appointment"
    assert all(e["event"]["id"] != "next-week" for day in data["days"] for e in day["events"])


def test_week_hour_height_and_resource_filter():
    data = client.get(
        "/v1/calendar/week", params={"anchor": "2025-06-04", "hour_height": 30, "resource_id": "r2"}
    ).json()
    events = [e for day in data["days"] for e in day["events"]]
    assert [e["event"]["id"] for e in events] == ["wed"]
    assert events[0]["top"] == 180
    assert data["total_height"] == 14 * 30


def test_month_grid_with_overflow():
    response = client.get("/v1/calendar/month", params={"anchor": "2025-06-15"})
    assert response.status_code == 200
    data = response.json()
    assert data["month_start"] == "2025-06-01"
    cells = [cell for week in data["weeks"] for cell in week]
    busy = next(cell for cell in cells if cell["key"] == "2025-06-20")
    assert len(busy["events"]) == 3
    assert busy["overflow"] == 2
    assert cells[0]["in_month"] is False


def test_healthz(monkeypatch):
    class FakeRedis:
        @classmethod
        def from_url(cls, url, **kwargs):
            return cls()

        async def ping(self):
            return True

        async def aclose(self):
            pass

    monkeypatch.setattr(health_module, "Redis", FakeRedis)
    response = client.get("/healthz")
    assert response.status_code == 200
    assert response.json()["db"] == "ok"
    assert response.json()["cache"] == "ok"
