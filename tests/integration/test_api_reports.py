"""Integration tests for statistics and CSV exports."""

import io

import pandas as pd
import pytest
from fastapi.testclient import TestClient

DAY = "2025-01-16"


@pytest.fixture
def recorded_day(api_client: TestClient, admin_headers):
    """Chocolate Chip sells 8 on site and 4 via Uber Eats; staff eat 2."""
    api_client.put(
        f"/api/v1/sales/products/1/days/{DAY}",
        json={"verkauft_location": 8, "verkauft_ubereats": 4, "mitarbeiter_verbrauch": 2, "new": 20, "trash": 2},
        headers=admin_headers,
    )


class TestStatisticsEndpoints:
    """Tests for dashboard and period statistics."""

    def test_dashboard(self, api_client: TestClient, admin_headers, recorded_day):
        response = api_client.get("/api/v1/reports/dashboard", headers=admin_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["totals"]["total_sold"] == 12
        assert data["top_sellers"][0]["name"] == "Chocolate Chip"
        assert "trend" in data

    def test_days(self, api_client: TestClient, admin_headers, recorded_day):
        response = api_client.get("/api/v1/reports/days", headers=admin_headers)

        days = response.json()["days"]
        assert len(days) == 1
        assert days[0]["date"] == DAY
        assert days[0]["sold"] == 12
        assert days[0]["waste_rate"] == 10.0

    def test_period_revenue_excludes_staff(self, api_client: TestClient, admin_headers, recorded_day):
        response = api_client.get(
            "/api/v1/reports/period",
            params={"start": DAY, "end": DAY, "product_ids": [1]},
            headers=admin_headers,
        )

        assert response.status_code == 200
        data = response.json()
        assert len(data["products"]) == 1
        assert data["revenue"] == pytest.approx(30.0)

    def test_channel_breakdown(self, api_client: TestClient, admin_headers, recorded_day):
        response = api_client.get("/api/v1/reports/channels", headers=admin_headers)

        sold = {c["channel"]: c["sold"] for c in response.json()["channels"]}
        assert sold["verkauft_location"] == 8
        assert sold["mitarbeiter_verbrauch"] == 2


class TestExportEndpoints:
    """Tests for CSV downloads."""

    def test_daily_export(self, api_client: TestClient, admin_headers, recorded_day):
        response = api_client.get("/api/v1/reports/export/daily", headers=admin_headers)

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        assert "attachment; filename=cookie_tagesbericht_" in response.headers["content-disposition"]

        df = pd.read_csv(io.StringIO(response.text))
        assert len(df) == 9

    @pytest.mark.parametrize("path", ["summary", "audits", "recipes", "plans", "shopping-list"])
    def test_exports_are_csv(self, api_client: TestClient, admin_headers, path):
        response = api_client.get(f"/api/v1/reports/export/{path}", headers=admin_headers)

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
