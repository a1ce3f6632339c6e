"""HTTP tests for /api/recommendations."""

import pytest

from conftest import FakeRecordStore, ScriptedGenerator, auth_headers
from wealth_api.api.deps import get_record_store
from wealth_api.core.fallback import get_fallback_recommendations
from wealth_api.core.inference import InferenceError
from wealth_api.core.record_store import RecordStoreError
from wealth_api.main import app


def _seed(client, token):
    headers = auth_headers(token)
    client.post("/api/assets/", json={"description": "Savings account", "category": "Cash", "amount": 1000}, headers=headers)
    client.post("/api/incomes/", json={"description": "Salary", "category": "Employment", "amount": 500}, headers=headers)
    client.post(
        "/api/liabilities/",
        json={"description": "Car loan", "category": "Loan", "amount": 200, "interest_rate": 5},
        headers=headers,
    )


def test_recommendations_from_model(client, alice, numbered_generator):
    _seed(client, alice["token"])

    response = client.get("/api/recommendations")

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    data = body["data"]
    assert data["recommendations"] == ["Save more", "Invest", "Insure"]
    assert data["financialSummary"]["netWorth"] == 800
    assert data["financialSummary"]["debtToAssetRatio"] == 20.0
    assert data["financialSummary"]["savingsRate"] == 60.0
    assert data["breakdown"]["assets"]["categories"] == {"Cash": {"total": 1000.0, "count": 1}}
    assert data["breakdown"]["liabilities"]["averageInterestRate"] == 5.0
    assert "timestamp" in data
    assert len(numbered_generator.calls) == 1


@pytest.mark.parametrize("generator", [ScriptedGenerator(error=InferenceError("timed out"))])
def test_recommendations_fall_back_when_model_is_down(client, alice, generator):
    _seed(client, alice["token"])

    response = client.get("/api/recommendations")

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["recommendations"] == get_fallback_recommendations()
    assert data["financialSummary"]["netWorth"] == 800


def test_recommendations_aggregate_across_users(client, alice, bob):
    _seed(client, alice["token"])
    _seed(client, bob["token"])

    data = client.get("/api/recommendations").json()["data"]

    assert data["financialSummary"]["totalAssets"] == 2000
    assert data["breakdown"]["assets"]["categories"]["Cash"]["count"] == 2


def test_recommendations_store_failure_is_500(client):
    app.dependency_overrides[get_record_store] = lambda: FakeRecordStore(
        error=RecordStoreError("Failed to aggregate financial data")
    )

    response = client.get("/api/recommendations")

    assert response.status_code == 500
    assert response.json() == {
        "success": False,
        "message": "Failed to generate recommendations",
        "error": "Failed to aggregate financial data",
    }


def test_recommendations_with_empty_store(client):
    response = client.get("/api/recommendations")

    assert response.status_code == 200
    summary = response.json()["data"]["financialSummary"]
    assert summary["totalAssets"] == 0
    assert summary["debtToAssetRatio"] == 0


@pytest.mark.parametrize("generator", [ScriptedGenerator(reply="Connection successful")])
def test_connection_check_success(client, generator):
    response = client.get("/api/recommendations/test")

    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "message": "AWS Bedrock connection successful",
        "model": "test-model",
        "response": "Connection successful",
    }


@pytest.mark.parametrize("generator", [ScriptedGenerator(error=InferenceError("AccessDenied"))])
def test_connection_check_reports_failure(client, generator):
    response = client.get("/api/recommendations/test")

    assert response.status_code == 200
    assert response.json() == {
        "success": False,
        "message": "AWS Bedrock connection failed",
        "error": "AccessDenied",
    }


@pytest.mark.parametrize("generator", [ScriptedGenerator(error=RuntimeError("kaboom"))])
def test_connection_check_unexpected_error_is_500(client, generator):
    response = client.get("/api/recommendations/test")

    assert response.status_code == 500
    assert response.json()["success"] is False
    assert response.json()["error"] == "kaboom"


def test_health_descriptor(client):
    response = client.get("/api/recommendations/health")

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["status"] == "operational"
    assert body["model"] == "test-model"
    assert body["region"] == "us-test-1"
    assert body["provider"] == "AWS Bedrock"
    assert body["endpoints"]["test"] == "/api/recommendations/test"
    assert "timestamp" in body


def test_connection_check_is_documented_with_its_schema(client):
    schema = client.get("/openapi.json").json()

    operation = schema["paths"]["/api/recommendations/test"]["get"]
    ref = operation["responses"]["200"]["content"]["application/json"]["schema"]["$ref"]
    assert ref.endswith("/ConnectionTestResponse")
    assert set(schema["components"]["schemas"]["ConnectionTestResponse"]["properties"]) == {
        "success",
        "message",
        "model",
        "response",
        "error",
    }
