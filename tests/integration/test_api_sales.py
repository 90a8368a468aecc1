"""Integration tests for daily records and CSV sales import."""

from fastapi.testclient import TestClient

DAY = "2025-01-16"


class TestDailyRecords:
    """Tests for per-day channel tracking."""

    def test_channels_listed(self, api_client: TestClient):
        response = api_client.get("/api/v1/sales/channels")

        channels = {c["field"]: c for c in response.json()["channels"]}
        assert len(channels) == 6
        assert channels["mitarbeiter_verbrauch"]["revenue"] is False

    def test_update_day_recomputes_sold(self, api_client: TestClient, admin_headers):
        response = api_client.put(
            f"/api/v1/sales/products/1/days/{DAY}",
            json={"verkauft_location": 5, "verkauft_wolt": 2},
            headers=admin_headers,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["date"] == DAY
        assert data["sold"] == 7

    def test_empty_day_reads_as_zero(self, api_client: TestClient, admin_headers):
        response = api_client.get(f"/api/v1/sales/products/2/days/{DAY}", headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["sold"] == 0

    def test_adjust_channel(self, api_client: TestClient, admin_headers):
        url = "/api/v1/sales/products/7/channels/verkauft_wolt"
        api_client.post(url, json={"delta": 3, "day": DAY}, headers=admin_headers)
        response = api_client.post(url, json={"delta": -1, "day": DAY}, headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["verkauft_wolt"] == 2

    def test_unknown_channel_rejected(self, api_client: TestClient, admin_headers):
        response = api_client.post(
            "/api/v1/sales/products/7/channels/verkauft_bus",
            json={"delta": 3},
            headers=admin_headers,
        )

        assert response.status_code == 400

    def test_non_iso_day_rejected(self, api_client: TestClient, admin_headers):
        response = api_client.put(
            "/api/v1/sales/products/1/days/tomorrow-ish",
            json={"verkauft_location": 3},
            headers=admin_headers,
        )
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

        response = api_client.post(
            "/api/v1/sales/products/1/channels/verkauft_wolt",
            json={"delta": 3, "day": "16.01.2025"},
            headers=admin_headers,
        )
        assert response.status_code == 400

        report = api_client.get(
            "/api/v1/reports/period", params={"start": "2025-01-01"}, headers=admin_headers
        )
        assert report.status_code == 200
        assert report.json()["revenue"] == 0


class TestSalesImport:
    """Tests for the CSV import endpoints."""

    CSV = (
        "Datum,Cookie,Plattform,Anzahl\n"
        "2025-01-16,Chocolate Chip,ubereats,8\n"
        "2025-01-16,Brownie,wolt,2\n"
    )

    def test_import_with_guessed_mapping(self, api_client: TestClient, admin_headers):
        response = api_client.post("/api/v1/sales/import", json={"csv": self.CSV}, headers=admin_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["updated"] == 1
        assert data["skipped_products"] == ["Brownie"]

        day = api_client.get(f"/api/v1/sales/products/1/days/{DAY}", headers=admin_headers)
        assert day.json()["verkauft_ubereats"] == 8

    def test_suggest_mapping(self, api_client: TestClient, admin_headers):
        response = api_client.post(
            "/api/v1/sales/import/mapping", json={"csv": self.CSV}, headers=admin_headers
        )

        assert response.json() == {
            "date": "Datum",
            "product": "Cookie",
            "channel": "Plattform",
            "quantity": "Anzahl",
        }

    def test_template_download(self, api_client: TestClient):
        response = api_client.get("/api/v1/sales/import/template")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        assert response.text.startswith("Datum,Cookie,Plattform,Anzahl")
