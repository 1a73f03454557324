"""
Tests for the dashboard HTTP API.
"""

import json

import pytest
from fastapi.testclient import TestClient

from activity_timeline.storage import MemoryStorage
from activity_timeline.webapp import create_app


@pytest.fixture
def client(clock):
    app = create_app(storage=MemoryStorage(), clock=clock)
    with TestClient(app) as client:
        yield client


def test_status_after_startup(client):
    assert client.get("/api/status").json() == {
        "initialized": True,
        "activities": 0,
        "launch_points": 4,
    }


def test_create_activity_and_view_today(client):
    response = client.post(
        "/api/activities",
        json={"date": "2024-01-01", "start_time": "09:00", "duration": 30, "launch_point_id": 1},
    )
    assert response.status_code == 201
    created = response.json()
    assert created["endTime"].startswith("2024-01-01T09:30:00")
    assert created["launchPoint"]["label"] == "Spontaneous"

    (day,) = client.get("/api/days").json()["days"]
    assert day["date"] == "2024-01-01"
    (block,) = day["blocks"]
    assert block["left"] == pytest.approx(37.5)
    assert block["width"] == pytest.approx(2.0833333)
    assert len(day["marks"]) == 8


def test_previous_days(client):
    days = client.get("/api/days", params={"previous": True}).json()["days"]
    assert [day["date"] for day in days] == ["2024-01-01", "2023-12-31", "2023-12-30"]


def test_invalid_activity_is_rejected(client):
    response = client.post("/api/activities", json={"start_time": "09:00"})
    assert response.status_code == 400
    assert "at least two" in response.json()["detail"]
    assert client.get("/api/activities").json() == {"activities": []}


def test_filter_activities_by_date(client):
    client.post("/api/activities", json={"date": "2024-01-01", "start_time": "09:00", "end_time": "10:00"})
    client.post("/api/activities", json={"date": "2024-01-02", "start_time": "09:00", "end_time": "10:00"})

    selected = client.get("/api/activities", params={"date": "2024-01-02"}).json()
    assert [activity["date"] for activity in selected["activities"]] == ["2024-01-02"]
    assert client.get("/api/activities", params={"date": "tomorrow"}).status_code == 400


def test_launch_point_crud(client):
    assert client.post("/api/launch-points", json={"icon": "", "label": "x"}).status_code == 400
    created = client.post("/api/launch-points", json={"icon": "*", "label": "Errand", "id": 9})
    assert created.json() == {"id": 9, "icon": "*", "label": "Errand"}

    assert client.delete("/api/launch-points/1").status_code == 204
    ids = [point["id"] for point in client.get("/api/launch-points").json()["launch_points"]]
    assert ids == [2, 3, 4, 9]


def test_export_and_import(client):
    client.post("/api/activities", json={"date": "2024-01-01", "start_time": "09:00", "duration": 15})
    exported = client.get("/api/export")
    assert exported.headers["content-disposition"] == (
        'attachment; filename="timeline-data-2024-01-01.json"'
    )

    document = exported.json()
    document["launchPoints"] = document["launchPoints"][:1]
    response = client.post("/api/import", content=json.dumps(document))
    assert response.json() == {"activities": 1, "launch_points": 1}

    assert client.post("/api/import", content="{not json").status_code == 400
    assert client.get("/api/status").json()["launch_points"] == 1


def test_empty_date_filter_is_rejected(client):
    client.post("/api/activities", json={"date": "2024-01-01", "start_time": "09:00", "duration": 15})
    response = client.get("/api/activities", params={"date": ""})
    assert response.status_code == 400
    assert client.get("/api/activities", params={"date": "  "}).status_code == 400


def test_import_rejects_unreadable_bodies(client):
    assert client.post("/api/import", content=b"\xff\xfe").status_code == 400
    assert client.post("/api/import", content="[" * 200000 + "]" * 200000).status_code == 400
    assert client.get("/api/status").json()["launch_points"] == 4
