"""Tests for the forecast endpoints."""
from fastapi.testclient import TestClient

from forecaster.main import app

client = TestClient(app)

CONFIG = {"iterations": 200, "seed": 1, "start_date": "2024-01-08"}


def _three_point(wp_id, *deps, o=1, l=1, p=1):
    return {
        "id": wp_id,
        "estimate": {"kind": "three_point", "optimistic": o, "likely": l, "pessimistic": p},
        "dependencies": list(deps),
    }


class TestProjectForecast:
    def test_chain_forecast(self):
        body = {
            "project": {
                "name": "demo",
                "work_packages": [_three_point("A"), _three_point("B", "A"), _three_point("C", "B")],
            },
            "config": CONFIG,
        }
        response = client.post("/api/forecasts/project", json=body)
        assert response.status_code == 200
        data = response.json()
        assert data["mode"] == "dependency_graph"
        assert data["data_source"] == "demo"
        assert data["iterations"] == 200
        p50 = next(p for p in data["percentiles"] if p["rank"] == 50)
        assert p50["date"] == "2024-01-11"
        assert [wp["id"] for wp in data["work_packages"]] == ["A", "B", "C"]

    def test_flat_mode_uses_done_history(self):
        body = {
            "project": {
                "name": "demo",
                "work_packages": [
                    {"id": "A", "status": "done", "done_date": "2024-01-02"},
                    {"id": "B", "status": "done", "done_date": "2024-01-03"},
                    _three_point("C"),
                    _three_point("D"),
                ],
            },
            "config": {**CONFIG, "mode": "flat_throughput"},
        }
        response = client.post("/api/forecasts/project", json=body)
        assert response.status_code == 200
        data = response.json()
        assert data["mode"] == "flat_throughput"
        assert data["unit"] == "working_days"
        assert data["simulated_items"] == 2
        assert data["velocity"] == 1.0
        assert all(s == 2.0 for s in data["samples"])

    def test_cycle_returns_422(self):
        body = {
            "project": {"name": "demo", "work_packages": [_three_point("A", "B"), _three_point("B", "A")]},
            "config": CONFIG,
        }
        response = client.post("/api/forecasts/project", json=body)
        assert response.status_code == 422
        assert "cycle" in response.json()["detail"]

    def test_invalid_estimate_returns_422(self):
        body = {
            "project": {"name": "demo", "work_packages": [_three_point("A", o=5, l=2, p=8)]},
            "config": CONFIG,
        }
        response = client.post("/api/forecasts/project", json=body)
        assert response.status_code == 422
        assert "A" in response.json()["detail"]

    def test_empirical_history_supplied_inline(self):
        body = {
            "project": {
                "name": "demo",
                "work_packages": [
                    {"id": "A", "estimate": {"kind": "empirical_throughput", "history": "team", "items": 2}},
                ],
            },
            "config": CONFIG,
            "histories": {"team": [1]},
        }
        response = client.post("/api/forecasts/project", json=body)
        assert response.status_code == 200
        assert response.json()["percentiles"][0]["date"] == "2024-01-10"


class TestThroughputForecast:
    def test_backlog_forecast(self):
        body = {
            "backlog_size": 6,
            "history": [
                {"date": "2024-01-01", "completed_issues": 3},
                {"date": "2024-01-02", "completed_issues": 3},
            ],
            "config": CONFIG,
        }
        response = client.post("/api/forecasts/throughput", json=body)
        assert response.status_code == 200
        data = response.json()
        assert data["velocity"] == 3.0
        assert data["percentiles"][-1]["days"] == 2.0
        assert data["percentiles"][-1]["date"] == "2024-01-09"

    def test_zero_backlog_returns_422(self):
        body = {
            "backlog_size": 0,
            "history": [{"date": "2024-01-01", "completed_issues": 3}],
            "config": CONFIG,
        }
        response = client.post("/api/forecasts/throughput", json=body)
        assert response.status_code == 422

    def test_negative_iterations_rejected(self):
        body = {
            "backlog_size": 5,
            "history": [{"date": "2024-01-01", "completed_issues": 3}],
            "config": {**CONFIG, "iterations": -1},
        }
        response = client.post("/api/forecasts/throughput", json=body)
        assert response.status_code == 422
