"""
HTTP surface for resolver sessions.
"""

import pytest
from fastapi.testclient import TestClient

import main
from services.fetch_coordinator import FetchCoordinator
from services.result_cache import ResultCache
from tests.fakes import FakeGeoClient


@pytest.fixture
def api(monkeypatch):
    fake = FakeGeoClient()
    monkeypatch.setattr(main, "geo_client", fake)
    monkeypatch.setattr(main, "result_cache", ResultCache())
    monkeypatch.setattr(main, "fetch_coordinator", FetchCoordinator(main.result_cache))
    monkeypatch.setattr(main, "sessions", {})
    with TestClient(main.app) as client:
        yield client, fake


class TestSessionApi:

    def test_health(self, api):
        client, _ = api
        assert client.get("/").json()["status"] == "running"
        assert client.get("/health").json()["open_sessions"] == 0

    def test_full_selection(self, api):
        client, _ = api

        view = client.post("/sessions", json={"origin_city": "Paarl"}).json()
        session_id = view["session_id"]
        assert view["step"] == "country"
        assert view["options"] == ["Kenya", "Namibia", "South Africa"]

        view = client.post(f"/sessions/{session_id}/select", json={"choice": "South Africa"}).json()
        assert view["step"] == "province"
        assert view["selected_country"] == "South Africa"

        view = client.post(f"/sessions/{session_id}/select", json={"choice": "Western Cape"}).json()
        assert view["step"] == "city"
        assert "Paarl" not in view["options"]

        view = client.post(f"/sessions/{session_id}/search", json={"query": "ca"}).json()
        assert view["options"] == ["Cape Town"]

        view = client.post(f"/sessions/{session_id}/select", json={"choice": "Cape Town"}).json()
        assert view["step"] == "selected"
        assert view["result"] == {"city": "Cape Town", "country": "South Africa", "province": "Western Cape"}

        # a resolved session is dropped from the registry
        assert client.get("/health").json()["open_sessions"] == 0
        assert client.get(f"/sessions/{session_id}").status_code == 404

    def test_select_on_closed_session_conflicts(self, api):
        client, _ = api
        session_id = client.post("/sessions", json={}).json()["session_id"]
        main.sessions[session_id].close()

        response = client.post(f"/sessions/{session_id}/select", json={"choice": "Kenya"})
        assert response.status_code == 409
        assert client.post(f"/sessions/{session_id}/back").status_code == 409
        assert client.post(f"/sessions/{session_id}/retry").status_code == 409

    def test_back_and_fallback(self, api):
        client, fake = api
        fake.failing.add("provinces")

        session_id = client.post("/sessions", json={}).json()["session_id"]
        view = client.post(f"/sessions/{session_id}/select", json={"choice": "kenya"}).json()
        assert view["step"] == "province"
        assert view["options"] == ["Nairobi", "Mombasa", "Kisumu", "Nakuru", "Eldoret"]
        assert "limited set" in view["last_error"]

        view = client.post(f"/sessions/{session_id}/back").json()
        assert view["step"] == "country"
        assert view["last_error"] is None

    def test_retry(self, api):
        client, fake = api
        fake.failing.add("countries")

        view = client.post("/sessions", json={}).json()
        assert view["last_error"] == "Unable to load countries right now."

        fake.failing.clear()
        view = client.post(f"/sessions/{view['session_id']}/retry").json()
        assert view["last_error"] is None
        assert len(view["options"]) == 3

    def test_unknown_choice(self, api):
        client, _ = api
        session_id = client.post("/sessions", json={}).json()["session_id"]

        response = client.post(f"/sessions/{session_id}/select", json={"choice": "Atlantis"})
        assert response.status_code == 422

    def test_unknown_session(self, api):
        client, _ = api
        assert client.get("/sessions/nope").status_code == 404
        assert client.delete("/sessions/nope").status_code == 404

    def test_close(self, api):
        client, _ = api
        session_id = client.post("/sessions", json={}).json()["session_id"]

        assert client.delete(f"/sessions/{session_id}").json()["closed"] is True
        assert client.get(f"/sessions/{session_id}").status_code == 404
