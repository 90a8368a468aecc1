"""Integration tests for products, ingredients, recipes and settings."""

from fastapi.testclient import TestClient


class TestProductEndpoints:
    """Tests for the product catalog."""

    def test_list_products(self, api_client: TestClient, admin_headers):
        response = api_client.get("/api/v1/products", headers=admin_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 9
        first = data["products"][0]
        assert first["name"] == "Chocolate Chip"
        assert first["warn_level"] == 20
        assert "history" not in first

    def test_filter_by_category(self, api_client: TestClient, admin_headers):
        response = api_client.get(
            "/api/v1/products", params={"category": "Seasonal"}, headers=admin_headers
        )

        names = {p["name"] for p in response.json()["products"]}
        assert names == {"Snickerdoodle", "Lemon"}

    def test_create_and_delete_product(self, api_client: TestClient, admin_headers):
        created = api_client.post(
            "/api/v1/products", json={"name": "Matcha", "price": 3.1}, headers=admin_headers
        )
        assert created.status_code == 201
        product_id = created.json()["id"]
        assert product_id == 10

        deleted = api_client.delete(f"/api/v1/products/{product_id}", headers=admin_headers)
        assert deleted.status_code == 200

        missing = api_client.get(f"/api/v1/products/{product_id}", headers=admin_headers)
        assert missing.status_code == 404
        assert missing.json()["error"]["code"] == "NOT_FOUND"

    def test_duplicate_name_rejected(self, api_client: TestClient, admin_headers):
        response = api_client.post(
            "/api/v1/products", json={"name": "lemon"}, headers=admin_headers
        )

        assert response.status_code == 400

    def test_request_validation_uses_envelope(self, api_client: TestClient, admin_headers):
        response = api_client.post("/api/v1/products", json={}, headers=admin_headers)

        assert response.status_code == 400
        data = response.json()
        assert data["error"]["code"] == "VALIDATION_ERROR"
        assert data["error"]["details"]["errors"]

    def test_adjust_never_goes_negative(self, api_client: TestClient, admin_headers):
        response = api_client.post(
            "/api/v1/products/1/adjust", json={"stock_delta": -5}, headers=admin_headers
        )

        assert response.status_code == 200
        assert response.json()["stock"] == 0


class TestIngredientEndpoints:
    """Tests for ingredient stock and the shopping list."""

    def test_list_ingredients(self, api_client: TestClient, admin_headers):
        response = api_client.get("/api/v1/ingredients", headers=admin_headers)

        assert response.status_code == 200
        data = response.json()
        assert len(data["ingredients"]) == 10
        assert "overview" in data

    def test_low_stock_lands_on_shopping_list(self, api_client: TestClient, admin_headers):
        api_client.patch("/api/v1/ingredients/3", json={"amount": 2}, headers=admin_headers)

        response = api_client.get("/api/v1/ingredients/shopping-list", headers=admin_headers)

        assert response.status_code == 200
        names = [entry["name"] for entry in response.json()["entries"]]
        assert any(name.startswith("Butter") for name in names)


class TestRecipeEndpoints:
    """Tests for recipe editing and costing."""

    def test_set_ingredient_updates_cost(self, api_client: TestClient, admin_headers):
        response = api_client.put(
            "/api/v1/recipes/1/ingredients/3", json={"quantity": 1.0}, headers=admin_headers
        )

        assert response.status_code == 200
        data = response.json()
        assert data["batch_cost"] == 6.5
        assert data["cost_per_unit"] == 0.065
        assert data["lines"][0]["ingredient_id"] == 3

    def test_zero_yield_rejected(self, api_client: TestClient, admin_headers):
        response = api_client.put(
            "/api/v1/recipes/1/yield", json={"batch_yield": 0}, headers=admin_headers
        )

        assert response.status_code == 400


class TestSettingsEndpoints:
    """Tests for cost settings, branding and warn levels."""

    def test_website_settings_are_public(self, api_client: TestClient):
        response = api_client.get("/api/v1/settings/website")

        assert response.status_code == 200
        assert "company_name" in response.json()

    def test_null_website_field_is_ignored(self, api_client: TestClient, admin_headers):
        response = api_client.patch(
            "/api/v1/settings/website",
            json={"company_name": None, "text_color": "#000000"},
            headers=admin_headers,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["company_name"] == "Cookie Business"
        assert data["text_color"] == "#000000"

    def test_update_cost_settings(self, api_client: TestClient, admin_headers):
        response = api_client.patch(
            "/api/v1/settings/cost", json={"cost_per_hour": 45}, headers=admin_headers
        )

        assert response.status_code == 200
        assert response.json()["cost_per_hour"] == 45

    def test_set_warn_level_by_name(self, api_client: TestClient, admin_headers):
        response = api_client.put(
            "/api/v1/settings/warn-levels/lemon", json={"level": 3}, headers=admin_headers
        )

        assert response.status_code == 200
        assert response.json()["Lemon"] == 3
