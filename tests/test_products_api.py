"""HTTP tests for catalog management under /products."""

import pytest

from inventory_api.models.products import Product, ProductStatus
from inventory_api.services import queries


def _payload(**overrides):
    payload = {
        "name": "Ethiopian Yirgacheffe",
        "description": "Light roast",
        "price": "18.90",
        "category": "coffee",
        "stock": 12,
        "minimum_stock": 4,
    }
    payload.update(overrides)
    return payload


class TestCreateProduct:
    def test_admin_creates_product(self, client, admin_headers):
        response = client.post("/products", json=_payload(), headers=admin_headers)

        assert response.status_code == 201
        body = response.json()
        assert body["name"] == "Ethiopian Yirgacheffe"
        assert body["stock"] == 12
        assert body["minimum_stock"] == 4
        assert body["status"] == "ACTIVE"

    def test_zero_opening_stock_is_out_of_stock(self, client, admin_headers):
        response = client.post("/products", json=_payload(stock=0), headers=admin_headers)

        assert response.status_code == 201
        assert response.json()["status"] == "OUT_OF_STOCK"

    def test_minimum_stock_defaults_to_five(self, client, admin_headers):
        payload = _payload()
        del payload["minimum_stock"]

        response = client.post("/products", json=payload, headers=admin_headers)

        assert response.json()["minimum_stock"] == 5

    def test_duplicate_name_conflicts(self, client, admin_headers):
        client.post("/products", json=_payload(), headers=admin_headers)

        response = client.post("/products", json=_payload(), headers=admin_headers)

        assert response.status_code == 409

    def test_negative_stock_is_rejected(self, client, admin_headers):
        response = client.post("/products", json=_payload(stock=-1), headers=admin_headers)

        assert response.status_code == 422

    def test_customer_cannot_create(self, client, customer_headers):
        response = client.post("/products", json=_payload(), headers=customer_headers)

        assert response.status_code == 403


class TestReadProducts:
    def test_public_listing_hides_inactive(self, client, make_product):
        visible = make_product(stock=4)
        make_product(stock=4, status=ProductStatus.INACTIVE)

        response = client.get("/products")

        assert response.status_code == 200
        assert [p["id"] for p in response.json()] == [visible.id]

    def test_get_single_product(self, client, make_product):
        product = make_product(stock=9, minimum_stock=2)

        response = client.get(f"/products/{product.id}")

        assert response.status_code == 200
        assert response.json()["stock"] == 9

    def test_get_missing_product(self, client):
        response = client.get("/products/5150")

        assert response.status_code == 404
        assert response.json()["code"] == "NOT_FOUND"


class TestUpdateProduct:
    def test_updates_catalog_fields_but_not_stock(self, client, db, make_product, admin_headers):
        product = make_product(stock=9, minimum_stock=2)

        response = client.patch(
            f"/products/{product.id}",
            json={"description": "Now organic", "minimum_stock": 10, "stock": 500},
            headers=admin_headers,
        )

        assert response.status_code == 200
        body = response.json()
        assert body["description"] == "Now organic"
        assert body["minimum_stock"] == 10
        assert body["stock"] == 9

    def test_rename_to_existing_name_conflicts(self, client, make_product, admin_headers):
        make_product(name="Taken")
        product = make_product(name="Free")

        response = client.patch(
            f"/products/{product.id}",
            json={"name": "Taken"},
            headers=admin_headers,
        )

        assert response.status_code == 409

    def test_null_description_leaves_it_unchanged(self, client, db, make_product, admin_headers):
        product = make_product()

        response = client.patch(
            f"/products/{product.id}",
            json={"description": None, "brand": None},
            headers=admin_headers,
        )

        assert response.status_code == 200
        assert response.json()["description"] == "Whole bean coffee"
        assert response.json()["brand"] is None


class TestDeleteProduct:
    def test_soft_delete(self, client, db, make_product, admin_headers):
        product = make_product(stock=3)

        response = client.delete(f"/products/{product.id}", headers=admin_headers)

        assert response.status_code == 204

        db.refresh(product)
        assert product.status == ProductStatus.INACTIVE
        assert product.stock == 3

    def test_stock_changes_keep_product_inactive(self, client, db, make_product, admin_headers):
        product = make_product(stock=3)
        client.delete(f"/products/{product.id}", headers=admin_headers)

        response = client.post(
            f"/inventory/{product.id}/stock",
            json={"quantity": 5},
            headers=admin_headers,
        )

        assert response.status_code == 200

        db.refresh(product)
        assert product.stock == 8
        assert product.status == ProductStatus.INACTIVE

    def test_delete_missing_product(self, client, admin_headers):
        response = client.delete("/products/808", headers=admin_headers)

        assert response.status_code == 404


class TestCatalogWriteRaces:
    @pytest.fixture
    def stock_write_after_read(self, monkeypatch, session_factory):
        """Commit a stock change from another session right after the route reads the product."""
        original = queries.get_product

        def get_product_then_race(db, product_id):
            product = original(db, product_id)

            other = session_factory()
            try:
                other.get(Product, product_id).stock += 1
                other.commit()
            finally:
                other.close()

            return product

        monkeypatch.setattr(queries, "get_product", get_product_then_race)

    def test_patch_conflict_is_409(self, client, db, make_product, admin_headers, stock_write_after_read):
        product = make_product(stock=3)

        response = client.patch(
            f"/products/{product.id}",
            json={"description": "Stale edit"},
            headers=admin_headers,
        )

        assert response.status_code == 409
        assert response.json()["code"] == "CONCURRENT_UPDATE"

        db.refresh(product)
        assert product.stock == 4
        assert product.description == "Whole bean coffee"

    def test_soft_delete_conflict_is_409(self, client, db, make_product, admin_headers, stock_write_after_read):
        product = make_product(stock=3)

        response = client.delete(f"/products/{product.id}", headers=admin_headers)

        assert response.status_code == 409

        db.refresh(product)
        assert product.status == ProductStatus.ACTIVE
        assert product.stock == 4
