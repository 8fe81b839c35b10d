"""
Tests for the HTTP API: /health, POST /analyze, /leads routes.
"""

import pytest
from fastapi.testclient import TestClient

from fakes import FakeLookup, place
from backend.main import app
from backend.services import analysis_service

ACE = place(
    "Ace Pest Control", 4.6, 18, place_id="ace1",
    address="123 Main St, Waco, TX 76701, USA", lat=31.55, lng=-97.14,
)


@pytest.fixture
def lookup(monkeypatch):
    fake = FakeLookup(
        find={"Ace Pest Control, Waco, TX": [ACE]},
        text={"pest control Waco TX": [
            ACE,
            place("Orkin Pest Control", 4.8, 120, place_id="ork"),
            place("Bugs Away", 4.2, 40, place_id="ba"),
        ]},
    )
    monkeypatch.setattr(analysis_service, "get_lookup", lambda: fake)
    return fake


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_analyze_validates_payload(client, lookup):
    assert client.post("/analyze", json={}).status_code == 422
    assert client.post("/analyze", json={"leads": ["  "]}).status_code == 422
    assert client.post("/analyze", json={"leads": [f"Biz {i}" for i in range(11)]}).status_code == 422
    assert client.post("/analyze", json={"leads": ["Ace"], "max_workers": 0}).status_code == 422
    assert client.post(
        "/analyze",
        json={"manual_business_data": [{"name": "Bob's Plumbing", "rating": 7, "review_count": 3}]},
    ).status_code == 422
    assert lookup.calls == []


def test_analyze_batch_limit_from_settings(client, lookup, monkeypatch):
    from prospector.config import get_settings

    monkeypatch.setenv("PROSPECTOR_MAX_BATCH", "1")
    get_settings.cache_clear()
    response = client.post("/analyze", json={"leads": ["Ace Pest Control, Waco, TX", "Other Biz"]})
    assert response.status_code == 400


def test_analyze_then_read_back(client, lookup):
    response = client.post("/analyze", json={"leads": ["Ace Pest Control, Waco, TX", "Nowhere Widgets"]})
    assert response.status_code == 200
    body = response.json()

    assert body["not_found"] == ["Nowhere Widgets"]
    assert len(body["leads"]) == 1
    lead = body["leads"][0]
    assert lead["tier"] == "A"
    assert lead["scoring"]["urgency"] == "High"
    assert [c["name"] for c in body["competitors"][lead["id"]]] == ["Orkin Pest Control", "Bugs Away"]

    listed = client.get("/leads").json()
    assert listed["run_id"] == body["run_id"]
    assert [l["id"] for l in listed["leads"]] == [lead["id"]]

    by_run = client.get("/leads", params={"run_id": body["run_id"]})
    assert by_run.status_code == 200

    single = client.get(f"/leads/{lead['id']}").json()
    assert single["name"] == "Ace Pest Control"
    assert single["run_id"] == body["run_id"]

    competitors = client.get(f"/leads/{lead['id']}/competitors").json()
    assert [c["place_id"] for c in competitors] == ["ork", "ba"]


def test_manual_entry_only(client, lookup):
    response = client.post(
        "/analyze",
        json={"manual_business_data": [{"name": "Bob's Plumbing", "rating": 4.7, "review_count": 12}]},
    )
    assert response.status_code == 200
    lead = response.json()["leads"][0]
    assert lead["source"] == "manual"
    assert lead["address"] == "Manual Entry"
    assert lookup.calls == []


def test_leads_empty_before_any_run(client):
    assert client.get("/leads").json() == {"run_id": None, "leads": []}


def test_not_found_routes(client):
    assert client.get("/leads", params={"run_id": "missing"}).status_code == 404
    assert client.get("/leads/missing").status_code == 404
    assert client.get("/leads/missing/competitors").status_code == 404
