"""Tests for the estimation and benchmark HTTP routes."""

from __future__ import annotations

from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from campaign_planner.api import EstimateRequest, router
from campaign_planner.benchmarks.table import BenchmarkTable
from campaign_planner.estimation.config import DEFAULT_ESTIMATION_CONFIG

WORKED_EXAMPLE: dict[str, Any] = {
    "countries": ["AE"],
    "total_budget": "10000",
    "duration": 30,
    "platforms": [
        {"platform_id": "meta", "budget_percent": 100, "campaign_types": {"awareness": 100}},
    ],
    "content": ["reel"],
}


def _make_app(benchmarks: BenchmarkTable | None) -> FastAPI:
    app = FastAPI()
    app.state.benchmarks = benchmarks
    app.state.estimation_config = DEFAULT_ESTIMATION_CONFIG
    app.include_router(router)
    return app


@pytest.fixture
def client(flat_table: BenchmarkTable) -> TestClient:
    return TestClient(_make_app(flat_table))


@pytest.fixture
def gcc_client(gcc_table: BenchmarkTable) -> TestClient:
    return TestClient(_make_app(gcc_table))


class TestEstimateRequest:
    def test_to_setup(self) -> None:
        setup = EstimateRequest.model_validate(WORKED_EXAMPLE).to_setup()
        assert setup.countries == ("AE",)
        assert setup.platform_ids == ["meta"]
        assert setup.content_count == 1
        assert setup.is_complete()

    def test_duplicate_content_collapses(self) -> None:
        body = {**WORKED_EXAMPLE, "content": ["reel", "reel", "story"]}
        assert EstimateRequest.model_validate(body).to_setup().content_count == 2


class TestPostEstimates:
    def test_worked_example(self, client: TestClient) -> None:
        response = client.post("/estimates", json=WORKED_EXAMPLE)

        assert response.status_code == 200
        body = response.json()
        assert body["estimated_impressions"] == 2_000_000
        assert body["estimated_clicks"] == 40_000
        assert body["estimated_conversions"] == 40
        assert body["cost_per_click"] == "0.25"
        assert body["cost_per_conversion"] == "250.00"
        assert body["confidence"] == "medium"

    def test_breakdown_and_markets_in_body(self, gcc_client: TestClient) -> None:
        body = {
            **WORKED_EXAMPLE,
            "countries": ["Saudi Arabia"],
            "platforms": [
                {"platform_id": "google", "budget_percent": 100, "campaign_types": {"app_installs": 100}},
                {"platform_id": "linkedin", "budget_percent": 0},
            ],
        }
        response = gcc_client.post("/estimates", json=body)

        assert response.status_code == 200
        result = response.json()
        assert result["markets"] == ["SA"]
        assert [(p["platform"], p["market"], p["tier"]) for p in result["breakdown"]] == [
            ("google", "SA", "exact"),
        ]
        assert result["breakdown"][0]["spend"] == "10000.00"
        assert "Google campaigns in Saudi Arabia show excellent intent-driven performance" in result["insights"]
        assert "Focus on app install campaigns for Google in Saudi Arabia" in result["recommendations"]
        assert "GCC markets typically show higher engagement and conversion rates" in result["insights"]

    def test_incomplete_setup_still_estimates(self, client: TestClient) -> None:
        response = client.post("/estimates", json={"countries": ["AE"]})

        assert response.status_code == 200
        assert response.json()["estimated_impressions"] == 0
        assert response.json()["confidence"] == "low"

    def test_duplicate_platforms_are_422(self, client: TestClient) -> None:
        body = {
            **WORKED_EXAMPLE,
            "platforms": [{"platform_id": "meta"}, {"platform_id": "meta"}],
        }
        assert client.post("/estimates", json=body).status_code == 422

    def test_malformed_body_is_422(self, client: TestClient) -> None:
        assert client.post("/estimates", json={"total_budget": "lots"}).status_code == 422

    def test_unavailable_without_table(self) -> None:
        client = TestClient(_make_app(None))

        response = client.post("/estimates", json=WORKED_EXAMPLE)

        assert response.status_code == 503
        assert response.json() == {"detail": "estimates unavailable"}


class TestBenchmarkRoutes:
    def test_list_all(self, gcc_client: TestClient) -> None:
        response = gcc_client.get("/benchmarks")
        assert response.status_code == 200
        assert len(response.json()) == 17

    def test_filter_by_platform_alias_and_country(self, gcc_client: TestClient) -> None:
        response = gcc_client.get("/benchmarks", params={"platform": "instagram", "country": "AE"})

        rows = response.json()
        assert len(rows) == 1
        assert rows[0]["platform"] == "meta"
        assert rows[0]["cpm"] == "2.79"

    def test_platforms(self, gcc_client: TestClient) -> None:
        response = gcc_client.get("/benchmarks/platforms")
        assert response.json() == {"platforms": ["google", "linkedin", "meta", "twitter"]}

    def test_countries(self, gcc_client: TestClient) -> None:
        response = gcc_client.get("/benchmarks/countries")
        assert response.json() == {"countries": ["AE", "BH", "KW", "OM", "QA", "SA"]}

    @pytest.mark.parametrize(
        "path",
        ["/benchmarks", "/benchmarks/platforms", "/benchmarks/countries"],
        ids=["rows", "platforms", "countries"],
    )
    def test_unavailable_without_table(self, path: str) -> None:
        response = TestClient(_make_app(None)).get(path)
        assert response.status_code == 503
