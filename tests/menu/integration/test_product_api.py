"""Integration tests for Product API endpoints via TestClient."""


def _add_product(api, name="X-Burger", category="Snack", unit_price="14.95"):
    response = api.post("/product", json={"name": name, "category": category, "unit_price": unit_price})
    assert response.status_code == 201
    return response.json()["product_id"]


class TestProductApi:
    def test_add_and_get(self, api):
        product_id = _add_product(api)
        response = api.get(f"/product/{product_id}")
        assert response.status_code == 200
        body = response.json()
        assert body["name"] == "X-Burger"
        assert body["category"] == "Snack"
        assert body["unit_price"] == "14.95"

    def test_add_invalid_category(self, api):
        response = api.post("/product", json={"name": "Toast", "category": "Breakfast", "unit_price": "3.00"})
        assert response.status_code == 422

    def test_get_missing_product(self, api):
        response = api.get("/product/does-not-exist")
        assert response.status_code == 404
        assert response.json()["error"] == "ProductNotFound"

    def test_update(self, api):
        product_id = _add_product(api)
        response = api.put(f"/product/{product_id}", json={"unit_price": "15.90"})
        assert response.status_code == 200
        assert response.json()["unit_price"] == "15.90"

    def test_delete(self, api):
        product_id = _add_product(api)
        assert api.delete(f"/product/{product_id}").status_code == 200
        assert api.get(f"/product/{product_id}").status_code == 404

    def test_list_and_filter_by_category(self, api):
        _add_product(api, name="X-Burger")
        _add_product(api, name="Milkshake", category="Dessert", unit_price="12.00")

        assert len(api.get("/product").json()) == 2
        desserts = api.get("/product/category/dessert").json()
        assert [product["name"] for product in desserts] == ["Milkshake"]

    def test_filter_by_unknown_category(self, api):
        response = api.get("/product/category/breakfast")
        assert response.status_code == 422
