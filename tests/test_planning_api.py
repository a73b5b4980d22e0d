import pytest
from fastapi.testclient import TestClient

from fieldplan.api.v1.planning import get_directory, get_planning_store
from fieldplan.main import app

client = TestClient(app)


@pytest.fixture(autouse=True)
def override_collaborators(store, directory):
    app.dependency_overrides[get_planning_store] = lambda: store
    app.dependency_overrides[get_directory] = lambda: directory
    yield
    app.dependency_overrides.clear()


def test_quick_create_from_slot():
    response = client.post(
        "/v1/planning/quick",
        json={"date": "2025-06-04", "start_hour": 9, "assigned_resource_id": "r1", "project_id": "p1"},
    )
    assert response.status_code == 201
    data = response.json()
    assert data["start_time"] == "09:00:00"
    assert data["end_time"] == "10:00:00"
    assert data["status"] == "scheduled"
    assert data["title"] == "Quick planning"


def test_quick_create_from_range():
    response = client.post(
        "/v1/planning/quick",
        json={"date": "2025-06-04", "start_hour": 9, "end_hour": 12, "assigned_resource_id": "r1", "project_id": "p1"},
    )
    assert response.status_code == 201
    assert response.json()["end_time"] == "12:00:00"


def test_quick_create_without_resource_is_422(store):
    response = client.post("/v1/planning/quick", json={"date": "2025-06-04", "start_hour": 9, "project_id": "p1"})
    assert response.status_code == 422
    assert response.json()["detail"]["message"] == "select a resource"


def test_single_create_and_list(store):
    created = client.post(
        "/v1/planning",
        json={"date": "2025-06-05", "assigned_resource_id": "r2", "project_id": "p2", "description": "Boiler"},
    )
    assert created.status_code == 201
    assert created.json()["start_time"] == "09:00:00"

    listed = client.get("/v1/planning", params={"assigned_resource_id": "r2"})
    assert listed.status_code == 200
    assert [item["title"] for item in listed.json()] == ["Boiler"]
    assert client.get("/v1/planning", params={"assigned_resource_id": "r1"}).json() == []


def test_recurring_create():
    response = client.post(
        "/v1/planning/recurring",
        json={
            "start_date": "2025-06-02",
            "end_date": "2025-06-15",
            "start_time": "08:00",
            "end_time": "12:00",
            "weekdays": [1, 3],
            "assigned_resource_id": "r1",
            "project_id": "p1",
            "location": "Depot",
        },
    )
    assert response.status_code == 201
    data = response.json()
    assert data["count"] == 4
    assert data["message"] == "4 planning items created"
    assert [item["date"] for item in data["items"]] == ["2025-06-02", "2025-06-04", "2025-06-09", "2025-06-11"]


def test_recurring_without_weekdays_is_422(store):
    response = client.post(
        "/v1/planning/recurring",
        json={"start_date": "2025-06-02", "end_date": "2025-06-15", "start_time": "08:00", "weekdays": []},
    )
    assert response.status_code == 422
    assert response.json()["detail"]["message"] == "select at least one weekday"


def test_store_failure_is_502(store):
    store.fail_next = RuntimeError("db down")
    response = client.post("/v1/planning", json={"date": "2025-06-05", "assigned_resource_id": "r1", "project_id": "p1"})
    assert response.status_code == 502


def test_conflict_is_409_when_blocking(monkeypatch):
    from fieldplan.config import settings

    monkeypatch.setattr(settings, "PLANNING_BLOCK_CONFLICTS", True)
    body = {"date": "2025-06-05", "assigned_resource_id": "r1", "project_id": "p1", "start_time": "09:00", "end_time": "11:00"}
    assert client.post("/v1/planning", json=body).status_code == 201
    response = client.post("/v1/planning", json={**body, "start_time": "10:30", "end_time": "12:00"})
    assert response.status_code == 409
    assert response.json()["detail"]["conflicts"][0]["severity"] == "low"


def test_choices_and_locations():
    choices = client.get("/v1/planning/choices").json()
    assert [r["id"] for r in choices["resources"]] == ["r1", "r2"]
    assert choices["projects"][1]["label"] == "Roof repair - Mueller GmbH"

    locations = client.get("/v1/planning/locations", params={"q": "Hauptstr"})
    assert locations.status_code == 200
    assert locations.json() == {"query": "Hauptstr", "suggestions": []}
