"""
Tests for FastAPI endpoints.

Uses TestClient to test API endpoints without running a server.
"""

import pytest
from fastapi.testclient import TestClient

from brickcalc.api.server import app


@pytest.fixture
def client():
    """Create test client."""
    return TestClient(app)


class TestHealthEndpoint:
    """Tests for /health endpoint."""

    def test_health_returns_ok(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert "version" in data


class TestGearsEndpoint:
    """Tests for /gears endpoint."""

    def test_catalog(self, client):
        response = client.get("/gears")

        assert response.status_code == 200
        data = response.json()
        assert [g["id"] for g in data[:3]] == ["1(1L)", "1(2L)", 8]
        assert len(data) == 10
        assert data[0]["is_worm"] is True
        assert next(g for g in data if g["id"] == 40)["default_selected"] is False


class TestLiftarmsEndpoint:
    """Tests for /liftarms endpoint."""

    def test_liftarms(self, client):
        response = client.post("/liftarms", json={"max_a": 3, "max_b": 3})

        assert response.status_code == 200
        data = response.json()
        assert len(data["positions"]) > 0
        assert data["raw_count"] >= len(data["positions"])

    def test_preset(self, client):
        response = client.post("/liftarms?preset=right-angle", json={"max_a": 4, "max_b": 4})

        assert response.status_code == 200
        assert all(p["angle_ab"] == 90 for p in response.json()["positions"])

    def test_invalid_inputs(self, client):
        response = client.post("/liftarms", json={"max_a": 20})

        assert response.status_code == 422


class TestGearCouplingsEndpoint:
    """Tests for /gear-couplings endpoint."""

    def test_couplings(self, client):
        response = client.post("/gear-couplings", json={"gears": [16, "1(1L)"]})

        assert response.status_code == 200
        rows = response.json()["rows"]
        assert [(r["gear_a"], r["gear_b"]) for r in rows] == [("1(1L)", 16), (16, 16)]

    def test_unknown_gear(self, client):
        response = client.post("/gear-couplings", json={"gears": ["huge"]})

        assert response.status_code == 422


class TestDistancesEndpoint:
    """Tests for /distances endpoint."""

    def test_grid(self, client):
        response = client.post("/distances", json={"x": 2, "y": 1})

        assert response.status_code == 200
        data = response.json()
        assert len(data["cells"]) == 11
        assert data["center_x"] == 2


class TestGearboxEndpoints:
    """Tests for /gearbox endpoints."""

    def test_example(self, client):
        response = client.get("/gearbox/example")

        assert response.status_code == 200
        assert response.json()["name"] == "Two-speed box"

    def test_compute_example(self, client):
        example = client.get("/gearbox/example").json()

        response = client.post("/gearbox/compute", json=example)

        assert response.status_code == 200
        data = response.json()
        modes = data["result"]["modes"]
        assert len(modes) == 2
        assert modes[1]["axles"]["4"]["speed"] == pytest.approx(-1.0)
        assert modes[0]["statuses"]["tool_3"]["state"] == "ok"
        assert data["gearbox"]["tools"][0]["id"] == "source"

    def test_conflict_is_reported_not_raised(self, client):
        doc = {
            "mode_count": 1,
            "axles": [{"id": 1, "name": "Axle 1"}, {"id": 2, "name": "Axle 2"}],
            "tools": [
                {"id": "tool_1", "kind": "coupling", "connections": {"Gear A": 1, "Gear B": 2}},
                {"id": "tool_2", "kind": "coupling", "connections": {"Gear A": 1, "Gear B": 2}},
            ],
        }

        response = client.post("/gearbox/compute", json=doc)

        assert response.status_code == 200
        status = response.json()["result"]["modes"][0]["statuses"]["tool_2"]
        assert status["state"] == "error"

    def test_string_boolean_param_rejected(self, client):
        """A quoted "false" must not silently invert the coupling."""
        example = client.get("/gearbox/example").json()
        example["tools"][1]["params"]["invert_direction"] = "false"

        response = client.post("/gearbox/compute", json=example)

        assert response.status_code == 400
        assert "invert_direction" in response.json()["detail"]

    def test_unknown_axle(self, client):
        doc = {"tools": [{"id": "tool_1", "kind": "coupling", "connections": {"Gear A": 9}}]}

        response = client.post("/gearbox/compute", json=doc)

        assert response.status_code == 400
        assert "unknown axle" in response.json()["detail"]
