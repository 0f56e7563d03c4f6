import pytest

from conftest import bearer

ADMIN = bearer("super-token")


@pytest.fixture
def category(client):
    return client.post("/api/v1/admin/categories", json={"title": "Mains"}, headers=ADMIN).json()


def product_body(category_id, **overrides):
    body = {"title": "Jollof Rice", "amount": 18.99, "category_id": category_id, "image": "products/jollof"}
    body.update(overrides)
    return body


def test_create_product_attaches_category(client, category):
    response = client.post("/api/v1/admin/products", json=product_body(category["id"]), headers=ADMIN)
    assert response.status_code == 201
    product = response.json()
    assert product["in_stock"] is True
    assert product["category"] == {"id": category["id"], "title": "Mains"}


def test_product_needs_existing_category(client):
    response = client.post("/api/v1/admin/products", json=product_body("missing"), headers=ADMIN)
    assert response.status_code == 400
    assert response.json() == {"error": "Category does not exist"}


def test_storefront_lists_only_in_stock_products(client, category):
    kept = client.post("/api/v1/admin/products", json=product_body(category["id"]), headers=ADMIN).json()
    sold_out = client.post(
        "/api/v1/admin/products", json=product_body(category["id"], title="Suya"), headers=ADMIN
    ).json()

    response = client.patch(f"/api/v1/admin/products/{sold_out['id']}/stock", json={"in_stock": False}, headers=ADMIN)
    assert response.status_code == 200
    assert response.json()["in_stock"] is False

    shop = client.get("/api/v1/shop/products").json()
    assert [p["id"] for p in shop] == [kept["id"]]
    assert len(client.get("/api/v1/admin/products", headers=ADMIN).json()) == 2


def test_update_and_delete_product(client, category):
    product = client.post("/api/v1/admin/products", json=product_body(category["id"]), headers=ADMIN).json()

    response = client.put(f"/api/v1/admin/products/{product['id']}", json={"amount": 19.5}, headers=ADMIN)
    assert response.json()["amount"] == 19.5
    assert response.json()["title"] == "Jollof Rice"

    assert client.delete(f"/api/v1/admin/products/{product['id']}", headers=ADMIN).json() == {"success": True}
    response = client.get(f"/api/v1/admin/products/{product['id']}", headers=ADMIN)
    assert response.status_code == 404
    assert response.json() == {"error": "Product not found"}


def test_missing_product_update(client):
    response = client.put("/api/v1/admin/products/nope", json={"title": "X"}, headers=ADMIN)
    assert response.status_code == 404


def test_category_in_use_cannot_be_deleted(client, category):
    product = client.post("/api/v1/admin/products", json=product_body(category["id"]), headers=ADMIN).json()

    response = client.delete(f"/api/v1/admin/categories/{category['id']}", headers=ADMIN)
    assert response.status_code == 400
    assert response.json() == {"error": "Category still has products"}

    client.delete(f"/api/v1/admin/products/{product['id']}", headers=ADMIN)
    assert client.delete(f"/api/v1/admin/categories/{category['id']}", headers=ADMIN).status_code == 200


def test_storefront_categories_sorted_by_title(client):
    for title in ("Sides", "Drinks", "Mains"):
        client.post("/api/v1/admin/categories", json={"title": title}, headers=ADMIN)
    titles = [c["title"] for c in client.get("/api/v1/shop/categories").json()]
    assert titles == ["Drinks", "Mains", "Sides"]


def test_rename_category(client, category):
    response = client.put(f"/api/v1/admin/categories/{category['id']}", json={"title": "Mains & Grills"}, headers=ADMIN)
    assert response.json()["title"] == "Mains & Grills"
    assert client.put("/api/v1/admin/categories/nope", json={"title": "X"}, headers=ADMIN).status_code == 404


def test_catalog_needs_matching_permission(client):
    assert client.get("/api/v1/admin/categories", headers=bearer("orders-token")).status_code == 403
    assert client.get("/api/v1/admin/categories").status_code == 401
