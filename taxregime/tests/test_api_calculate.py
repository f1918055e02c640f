"""
API tests for the tax engine routes.

Tests the full stack: HTTP request → profile validation → tax engine →
in-memory history → HTTP response, using httpx over ASGITransport (no live
server needed).

Tolerance: ±₹1 on monetary assertions (consistent with test_tax_engine.py).
"""
from __future__ import annotations

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from taxregime.main import app
from taxregime.tests.demo_profiles import DEMO_PROFILES


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest_asyncio.fixture
async def client():
    """Async httpx client using ASGI transport. History starts empty."""
    app.state.history.clear()
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
    app.state.history.clear()


# ---------------------------------------------------------------------------
# Test Group 1: health and calculate
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_health(client: AsyncClient) -> None:
    response = await client.get("/api/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


@pytest.mark.asyncio
async def test_calculate_new_regime(client: AsyncClient) -> None:
    response = await client.post(
        "/api/calculate",
        json={"annual_salary": 800_000, "age_group": "below60", "regime": "new"},
    )
    assert response.status_code == 200, response.text
    result = response.json()
    assert result["regime"] == "new"
    assert abs(result["taxable_income"] - 725_000) <= 1
    assert abs(result["cess"] - 1_100) <= 1
    assert abs(result["final_tax"] - 28_600) <= 1
    assert [e["rate"] for e in result["slab_breakdown"]] == [0, 5, 10]
    assert result["slab_breakdown"][1]["range"] == "3,00,000 - 6,00,000"


@pytest.mark.asyncio
async def test_calculate_caps_deductions_in_response(client: AsyncClient) -> None:
    response = await client.post(
        "/api/calculate",
        json={
            "annual_salary": 1_200_000, "age_group": "below60", "regime": "old",
            "deductions": {"section_80c": 999_999},
        },
    )
    assert response.status_code == 200
    assert response.json()["deductions"]["section_80c"] == 150_000


@pytest.mark.asyncio
async def test_calculate_does_not_touch_history(client: AsyncClient) -> None:
    await client.post(
        "/api/calculate",
        json={"annual_salary": 800_000, "age_group": "below60", "regime": "new"},
    )
    response = await client.get("/api/history")
    assert response.json() == []


# ---------------------------------------------------------------------------
# Test Group 2: InvalidInput → 422 INVALID_INPUT
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
@pytest.mark.parametrize("payload, field", [
    ({"annual_salary": 800_000, "age_group": "teen", "regime": "old"}, "age_group"),
    ({"annual_salary": 800_000, "age_group": "below60", "regime": "flat"}, "regime"),
    ({"annual_salary": -1, "age_group": "below60", "regime": "old"}, "annual_salary"),
    ({"annual_salary": 800_000, "age_group": "below60", "regime": "old",
      "deductions": {"section_80d": -10}}, "deductions.section_80d"),
])
async def test_calculate_invalid_input(client: AsyncClient, payload: dict, field: str) -> None:
    response = await client.post("/api/calculate", json=payload)
    assert response.status_code == 422
    error = response.json()["error"]
    assert error["code"] == "INVALID_INPUT"
    assert field in [d["field"] for d in error["details"]]


@pytest.mark.asyncio
@pytest.mark.parametrize("path", ["/api/calculate", "/api/compare"])
@pytest.mark.parametrize("salary", ["1e400", "Infinity", "NaN"])
async def test_non_finite_salary_is_invalid_input(client: AsyncClient, path: str, salary: str) -> None:
    # Python's JSON parser reads these as inf / nan
    body = '{"annual_salary": ' + salary + ', "age_group": "below60", "regime": "old"}'
    response = await client.post(path, content=body, headers={"Content-Type": "application/json"})
    assert response.status_code == 422, response.text
    error = response.json()["error"]
    assert error["code"] == "INVALID_INPUT"
    assert "annual_salary" in [d["field"] for d in error["details"]]
    assert (await client.get("/api/history")).json() == []


@pytest.mark.asyncio
async def test_calculate_non_object_body_is_validation_error(client: AsyncClient) -> None:
    response = await client.post("/api/calculate", json=[1, 2, 3])
    assert response.status_code == 422
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


# ---------------------------------------------------------------------------
# Test Group 3: compare + history
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
@pytest.mark.parametrize("name", list(DEMO_PROFILES))
async def test_compare_demo_profiles(client: AsyncClient, name: str) -> None:
    data = DEMO_PROFILES[name]
    expected = data["expected"]

    response = await client.post("/api/compare", json=data["profile"])
    assert response.status_code == 200, response.text
    result = response.json()

    assert result["recommended_regime"] == expected["expected_regime"]
    assert abs(result["old_regime"]["final_tax"] - expected["expected_old_tax"]) <= 1
    assert abs(result["new_regime"]["final_tax"] - expected["expected_new_tax"]) <= 1
    assert abs(result["savings_amount"] - expected["expected_savings"]) <= 1
    assert isinstance(result["suggestions"], list)


@pytest.mark.asyncio
async def test_compare_records_history_newest_first_capped_at_5(client: AsyncClient) -> None:
    for salary in range(1, 8):
        response = await client.post(
            "/api/compare",
            json={"annual_salary": salary * 100_000, "age_group": "below60", "regime": "old"},
        )
        assert response.status_code == 200

    response = await client.get("/api/history")
    assert response.status_code == 200
    entries = response.json()
    assert len(entries) == 5
    assert [e["profile"]["annual_salary"] for e in entries] == [
        700_000, 600_000, 500_000, 400_000, 300_000,
    ]
    assert entries[0]["old_result"]["regime"] == "old"
    assert entries[0]["new_result"]["regime"] == "new"
    assert "timestamp" in entries[0]


@pytest.mark.asyncio
async def test_clear_history(client: AsyncClient) -> None:
    await client.post(
        "/api/compare",
        json={"annual_salary": 800_000, "age_group": "below60", "regime": "old"},
    )
    response = await client.delete("/api/history")
    assert response.status_code == 204
    assert (await client.get("/api/history")).json() == []


@pytest.mark.asyncio
async def test_compare_invalid_input_not_recorded(client: AsyncClient) -> None:
    response = await client.post(
        "/api/compare",
        json={"annual_salary": 800_000, "age_group": "teen", "regime": "old"},
    )
    assert response.status_code == 422
    assert (await client.get("/api/history")).json() == []


# ---------------------------------------------------------------------------
# Test Group 4: suggestions and slabs
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_suggestions(client: AsyncClient) -> None:
    response = await client.post(
        "/api/suggestions",
        json={
            "deductions": {"section_80c": 100_000, "section_80d": 25_000, "home_loan_interest": 0},
            "annual_salary": 800_000,
        },
    )
    assert response.status_code == 200
    body = response.json()
    assert [s["category"] for s in body] == ["section80C", "homeLoan"]
    assert abs(body[0]["potential_savings"] - 15_000) <= 1


@pytest.mark.asyncio
async def test_slabs_super_senior_old(client: AsyncClient) -> None:
    response = await client.get("/api/slabs/above80/old")
    assert response.status_code == 200
    brackets = response.json()["brackets"]
    assert [b["rate"] for b in brackets] == [0, 20, 30]
    assert brackets[-1]["upper"] is None


@pytest.mark.asyncio
async def test_slabs_unknown_age_group(client: AsyncClient) -> None:
    response = await client.get("/api/slabs/teen/old")
    assert response.status_code == 422
    assert response.json()["error"]["code"] == "INVALID_INPUT"


@pytest.mark.asyncio
async def test_suggestions_accept_raw_claims_above_cap(client: AsyncClient) -> None:
    response = await client.post(
        "/api/suggestions",
        json={
            "deductions": {"section_80c": 999_999, "section_80d": 0, "home_loan_interest": 999_999},
            "annual_salary": 2_000_000,
        },
    )
    assert response.status_code == 200
    assert [s["category"] for s in response.json()] == ["section80D"]


@pytest.mark.asyncio
async def test_suggestions_reject_non_finite_claim(client: AsyncClient) -> None:
    body = '{"deductions": {"section_80c": 1e400}, "annual_salary": 800000}'
    response = await client.post(
        "/api/suggestions", content=body, headers={"Content-Type": "application/json"},
    )
    assert response.status_code == 422
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"
