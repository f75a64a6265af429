"""API contract tests for the risk scoring endpoints."""

import pytest
from httpx import ASGITransport, AsyncClient

from src.main import app

pytestmark = pytest.mark.integration

BASE_URL = "http://test"

HIGH_RISK_DIABETES = {
    "hba1c": 7.0,
    "bmi": 30,
    "stepsDaily": 4000,
    "sleepEfficiency": 80,
    "familyHistoryDiabetes": "close",
}


def _client() -> AsyncClient:
    return AsyncClient(transport=ASGITransport(app=app), base_url=BASE_URL)


class TestConditionEndpoints:
    @pytest.mark.asyncio
    async def test_list_conditions(self):
        async with _client() as client:
            response = await client.get("/api/v1/risk/conditions")
        assert response.status_code == 200
        data = response.json()
        assert len(data) == 6
        by_condition = {item["condition"]: item for item in data}
        assert by_condition["heart-disease"]["baseline"] == 5
        assert "hba1c" in by_condition["diabetes"]["drivers"]

    @pytest.mark.asyncio
    async def test_rubric_detail(self):
        async with _client() as client:
            response = await client.get("/api/v1/risk/conditions/Diabetes/rubric")
        assert response.status_code == 200
        data = response.json()
        assert data["condition"] == "diabetes"
        hba1c = next(d for d in data["drivers"] if d["name"] == "hba1c")
        assert hba1c["fallback"] == "avgGlucoseMgDl"
        assert hba1c["missing_penalty"] == 15
        assert hba1c["table"]

    @pytest.mark.asyncio
    async def test_rubric_with_open_ended_bp_stages(self):
        async with _client() as client:
            response = await client.get("/api/v1/risk/conditions/hypertension/rubric")
        assert response.status_code == 200
        bp = next(d for d in response.json()["drivers"] if d["name"] == "bloodPressure")
        severe = bp["table"][0]
        assert severe["systolic"] == [160, None]
        normal = next(row for row in bp["table"] if row.get("category") == "normal")
        assert normal["diastolic"] == [None, 80]

    @pytest.mark.asyncio
    async def test_score_extreme_bp_reading(self):
        async with _client() as client:
            response = await client.post(
                "/api/v1/risk/hypertension/score",
                json={"metrics": {"bpSystolic": 400, "bpDiastolic": 70}},
            )
        assert response.status_code == 200
        assert response.json()["score"] >= 75

    @pytest.mark.asyncio
    async def test_rubric_unknown_condition(self):
        async with _client() as client:
            response = await client.get("/api/v1/risk/conditions/cancer/rubric")
        assert response.status_code == 404


class TestScoreEndpoint:
    @pytest.mark.asyncio
    async def test_score_diabetes(self):
        async with _client() as client:
            response = await client.post(
                "/api/v1/risk/diabetes/score", json={"metrics": HIGH_RISK_DIABETES, "seed": 3}
            )
        assert response.status_code == 200
        data = response.json()
        assert data["score"] == 84
        assert data["risk_level"] == "very_high"
        assert data["recognized"] is True
        assert len(data["trajectory"]) == 6
        assert data["trajectory"][0] == 84
        assert data["rationale"]

    @pytest.mark.asyncio
    async def test_score_without_trajectory(self):
        async with _client() as client:
            response = await client.post(
                "/api/v1/risk/diabetes/score",
                json={"metrics": HIGH_RISK_DIABETES, "include_trajectory": False},
            )
        assert response.status_code == 200
        assert response.json()["trajectory"] == []

    @pytest.mark.asyncio
    async def test_unknown_condition_returns_default(self):
        async with _client() as client:
            response = await client.post("/api/v1/risk/cancer/score", json={"metrics": {}})
        assert response.status_code == 200
        data = response.json()
        assert data["score"] == 25
        assert data["recognized"] is False
        assert data["contributions"] == []

    @pytest.mark.asyncio
    async def test_no_body_scores_empty_record(self):
        async with _client() as client:
            response = await client.post("/api/v1/risk/hypertension/score")
        assert response.status_code == 200
        assert response.json()["score"] == 30

    @pytest.mark.asyncio
    async def test_malformed_metrics_are_tolerated(self):
        async with _client() as client:
            response = await client.post(
                "/api/v1/risk/hypertension/score",
                json={"metrics": {"bpSystolic": "high", "bpDiastolic": None}},
            )
        assert response.status_code == 200
        assert response.json()["score"] == 30

    @pytest.mark.asyncio
    async def test_metrics_must_be_object(self):
        async with _client() as client:
            response = await client.post(
                "/api/v1/risk/diabetes/score", json={"metrics": [1, 2, 3]}
            )
        assert response.status_code == 422


class TestAssessEndpoint:
    @pytest.mark.asyncio
    async def test_assess_many(self):
        async with _client() as client:
            response = await client.post(
                "/api/v1/risk/assess",
                json={
                    "conditions": ["diabetes", "hypertension", "cancer"],
                    "metrics": HIGH_RISK_DIABETES,
                    "metrics_by_condition": {
                        "hypertension": {"bpSystolic": 150, "bpDiastolic": 95}
                    },
                    "seed": 1,
                },
            )
        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 3
        scores = {item["condition"]: item["score"] for item in data["items"]}
        assert scores["diabetes"] == 84
        assert scores["hypertension"] == 58
        assert scores["cancer"] == 25

    @pytest.mark.asyncio
    async def test_assess_requires_conditions(self):
        async with _client() as client:
            response = await client.post("/api/v1/risk/assess", json={"conditions": []})
        assert response.status_code == 422


class TestTrajectoryEndpoint:
    @pytest.mark.asyncio
    async def test_project(self):
        async with _client() as client:
            response = await client.post(
                "/api/v1/risk/trajectory",
                json={"base_score": 50, "weeks": 8, "volatility": 5, "seed": 9},
            )
        assert response.status_code == 200
        data = response.json()
        assert len(data["trajectory"]) == 8
        assert data["trajectory"][0] == 50
        assert data["peak_score"] == max(data["trajectory"])
        assert data["trajectory"][data["peak_week"]] == data["peak_score"]

    @pytest.mark.asyncio
    async def test_base_score_out_of_range(self):
        async with _client() as client:
            response = await client.post("/api/v1/risk/trajectory", json={"base_score": 150})
        assert response.status_code == 422
