"""
API tests for settlement and profit analysis.

End-to-end: orders are placed, NAVs published, settlement run over HTTP and
the resulting history replayed.
"""

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient


def _post_nav(client: TestClient, code: str, nav_date: str, nav: str) -> None:
    response = client.post(f"/funds/{code}/navs", json={"navs": [{"nav_date": nav_date, "nav": nav}]})
    assert response.status_code == 200


@pytest.fixture
def user_id(client: TestClient) -> str:
    return client.post("/users", json={"username": "alice"}).json()["user_id"]


class TestSettlementAPI:
    """Tests for POST /settlement/run."""

    def test_run_with_nothing_pending(self, client: TestClient):
        response = client.post("/settlement/run")

        assert response.status_code == 200
        assert response.json() == {
            "processed": 0,
            "skipped": 0,
            "failed": 0,
            "skipped_reasons": [],
        }

    def test_buy_then_sell_end_to_end(self, client: TestClient, user_id: str):
        """
        GIVEN buys of 1000 on 2024-06-03 (NAV 2.00) and 2024-06-04 (NAV 2.50)
        AND a sell of 300 shares on 2024-06-05 (NAV 2.10)
        WHEN settlement runs
        THEN 600 shares remain at an average cost of 2.2222
        """
        _post_nav(client, "X", "2024-06-03", "2.00")
        _post_nav(client, "X", "2024-06-04", "2.50")
        _post_nav(client, "X", "2024-06-05", "2.10")
        for order_date in ("2024-06-03", "2024-06-04"):
            client.post(f"/users/{user_id}/orders/buy", json={
                "fund_code": "X", "amount": "1000", "order_date": order_date,
            })

        first = client.post("/settlement/run").json()
        assert first["processed"] == 2

        client.post(f"/users/{user_id}/orders/sell", json={
            "fund_code": "X", "shares": "300", "order_date": "2024-06-05",
        })
        second = client.post("/settlement/run").json()
        assert second["processed"] == 1

        holding = client.get(f"/users/{user_id}/positions").json()["positions"][0]
        assert Decimal(holding["shares"]) == Decimal("600")
        assert abs(Decimal(holding["average_cost"]) - Decimal("2.2222")) < Decimal("0.0001")

    def test_missing_nav_reported_as_skipped(self, client: TestClient, user_id: str):
        client.post(f"/users/{user_id}/orders/buy", json={
            "fund_code": "X", "amount": "100", "order_date": "2024-06-03",
        })

        data = client.post("/settlement/run").json()

        assert data["skipped"] == 1
        assert "NAV" in data["skipped_reasons"][0]

    def test_oversell_marked_failed(self, client: TestClient, user_id: str):
        _post_nav(client, "X", "2024-06-03", "1.00")
        client.post(f"/users/{user_id}/orders/sell", json={
            "fund_code": "X", "shares": "5", "order_date": "2024-06-03",
        })

        data = client.post("/settlement/run").json()

        assert data["failed"] == 1
        [txn] = client.get(f"/users/{user_id}/orders", params={"status": "failed"}).json()["transactions"]
        assert "Insufficient position" in txn["note"]


class TestProfitAnalysisAPI:
    """Tests for GET /users/{user_id}/profit-analysis."""

    def test_empty_history(self, client: TestClient, user_id: str):
        response = client.get(f"/users/{user_id}/profit-analysis", params={"as_of": "2024-06-03"})

        assert response.status_code == 200
        data = response.json()
        assert data["history"] == []
        assert data["calendar"] == {}
        assert Decimal(data["summary"]["total_assets"]) == Decimal("0")

    def test_unknown_user_returns_404(self, client: TestClient):
        response = client.get("/users/nobody/profit-analysis")

        assert response.status_code == 404

    def test_settled_history_replayed(self, client: TestClient, user_id: str):
        """
        GIVEN a settled 1000 buy at 1.00 and NAVs 1.00, 1.10
        WHEN the analysis is requested as of the second day
        THEN the series has two points and day two shows a 100 profit
        """
        _post_nav(client, "X", "2024-06-03", "1.00")
        _post_nav(client, "X", "2024-06-04", "1.10")
        client.post(f"/users/{user_id}/orders/buy", json={
            "fund_code": "X", "amount": "1000", "order_date": "2024-06-03",
        })
        client.post("/settlement/run")

        response = client.get(f"/users/{user_id}/profit-analysis", params={"as_of": "2024-06-04"})

        assert response.status_code == 200
        data = response.json()
        assert [p["date"] for p in data["history"]] == ["2024-06-03", "2024-06-04"]
        day2 = data["history"][1]
        assert Decimal(day2["total_assets"]) == Decimal("1100")
        assert Decimal(day2["day_profit"]) == Decimal("100")
        assert Decimal(day2["day_profit_rate"]) == Decimal("10")
        assert Decimal(data["calendar"]["2024-06-04"]) == Decimal("100")
        assert Decimal(data["summary"]["yesterday_profit"]) == Decimal("0")

    def test_as_of_datetime_lands_on_market_day(self, client: TestClient, user_id: str):
        """
        GIVEN history starting 2024-06-03
        WHEN as_of is a UTC evening timestamp on 2024-06-04
        THEN the series ends on the next market-timezone day
        """
        _post_nav(client, "X", "2024-06-03", "1.00")
        client.post(f"/users/{user_id}/orders/buy", json={
            "fund_code": "X", "amount": "100", "order_date": "2024-06-03",
        })
        client.post("/settlement/run")

        response = client.get(
            f"/users/{user_id}/profit-analysis", params={"as_of": "2024-06-04T20:00:00+00:00"}
        )

        assert response.status_code == 200
        assert response.json()["history"][-1]["date"] == "2024-06-05"

    def test_unparseable_as_of_returns_400(self, client: TestClient, user_id: str):
        response = client.get(f"/users/{user_id}/profit-analysis", params={"as_of": "not a date"})

        assert response.status_code == 400
