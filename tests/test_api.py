import json


def test_health(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    body = response.get_json()
    assert body["status"] == "OK"
    assert body["timestamp"].endswith("Z")


def test_list_products(client):
    response = client.get("/api/products")
    assert response.status_code == 200
    assert [p["id"] for p in response.get_json()] == [1, 2, "farm-milk", 4]


def test_list_products_filters(client):
    assert [p["id"] for p in client.get("/api/products?category=dairy").get_json()] == [2]
    assert [p["id"] for p in client.get("/api/products?q=milk").get_json()] == ["farm-milk"]
    assert 4 not in [p["id"] for p in client.get("/api/products?available=1").get_json()]


def test_list_products_without_file(config):
    from storefront.app import create_app

    client = create_app(config).test_client()
    response = client.get("/api/products")
    assert response.status_code == 200
    assert response.get_json() == []


def test_list_products_corrupt_file_is_500(client, seeded):
    (seeded.data_dir / "products.json").write_text("oops", encoding="utf-8")
    response = client.get("/api/products")
    assert response.status_code == 500
    assert response.get_json() == {"error": "Internal server error"}


def test_get_product(client):
    response = client.get("/api/products/2")
    assert response.status_code == 200
    assert response.get_json()["minWeight"] == 100

    assert client.get("/api/products/farm-milk").get_json()["name"] == "Farm milk"


def test_get_missing_product(client):
    response = client.get("/api/products/999")
    assert response.status_code == 404
    assert response.get_json() == {"error": "Product not found"}


def test_create_product_assigns_next_id(client, seeded):
    response = client.post("/api/products", json={"name": "Pears", "price": 120})
    assert response.status_code == 201
    body = response.get_json()
    assert body["success"] is True
    assert body["product"]["id"] == 5
    assert body["product"]["unit"] == "count"

    stored = json.loads((seeded.data_dir / "products.json").read_text(encoding="utf-8"))
    assert stored[-1]["name"] == "Pears"


def test_create_product_validation(client):
    assert client.post("/api/products", json={"price": 10}).status_code == 400
    assert client.post("/api/products", json={"name": "X"}).status_code == 400
    assert client.post("/api/products", json={"name": "X", "price": -1}).status_code == 400
    assert client.post("/api/products", json={"name": "X", "price": 1, "unit": "lb"}).status_code == 400
    assert client.post("/api/products", json={"id": 1, "name": "Dup", "price": 1}).status_code == 400


def test_update_product(client):
    response = client.put("/api/products/1", json={"price": 110, "id": 77})
    assert response.status_code == 200
    product = response.get_json()["product"]
    assert product["price"] == 110
    assert product["id"] == 1
    assert client.get("/api/products/1").get_json()["price"] == 110


def test_update_missing_product(client):
    assert client.put("/api/products/999", json={"price": 1}).status_code == 404


def test_delete_product(client):
    assert client.delete("/api/products/1").get_json() == {"success": True}
    assert client.get("/api/products/1").status_code == 404
    assert client.delete("/api/products/1").status_code == 404


def test_categories(client):
    assert client.get("/api/categories").get_json() == []

    response = client.post("/api/categories", json={"name": "Dairy Products"})
    assert response.status_code == 201
    assert response.get_json()["category"] == {
        "id": 1,
        "name": "Dairy Products",
        "slug": "dairy-products",
        "description": None,
    }
    assert client.post("/api/categories", json={"name": "Dairy products"}).status_code == 400
    assert client.post("/api/categories", json={}).status_code == 400
    assert len(client.get("/api/categories").get_json()) == 1


def test_cart_quote(client):
    response = client.post(
        "/api/cart/quote",
        json={"lines": [{"productId": 1, "quantity": 3}, {"productId": 2, "weight": 130}]},
    )
    assert response.status_code == 200
    body = response.get_json()
    assert body["total"] == 330
    assert body["lines"][1]["weight"] == 150
    assert body["lines"][1]["lineTotal"] == 30
    assert body["lineCount"] == 2
    assert body["itemCount"] == 4


def test_cart_quote_errors(client):
    assert client.post("/api/cart/quote", json={}).status_code == 400
    assert client.post("/api/cart/quote", json={"lines": [{"productId": 99}]}).status_code == 404
    assert client.post("/api/cart/quote", json={"lines": [{"productId": 4, "quantity": 1}]}).status_code == 400


def test_create_and_fetch_order(client):
    payload = {
        "products": [{"id": 1, "name": "Apples", "price": 100, "quantity": 3}],
        "total": 300,
        "user": {"id": 42, "first_name": "Ann"},
    }
    response = client.post("/api/orders", json=payload)
    assert response.status_code == 200
    body = response.get_json()
    assert body["success"] is True
    assert body["message"] == "Order created successfully"
    assert body["orderId"].startswith("ORDER-")

    order = client.get(f"/api/orders/{body['orderId']}").get_json()
    assert order["status"] == "pending"
    assert order["total"] == 300
    assert order["user"]["id"] == 42
    assert order["createdAt"] == order["updatedAt"]

    assert [o["id"] for o in client.get("/api/orders").get_json()] == [body["orderId"]]


def test_create_order_rejects_bad_payloads(client):
    assert client.post("/api/orders", json={"products": [], "total": 10}).status_code == 400
    assert client.post("/api/orders", json={"products": [{"id": 1}], "total": 0}).status_code == 400
    response = client.post("/api/orders", json={"products": [{"id": 1}], "total": "ten"})
    assert response.status_code == 400
    assert response.get_json() == {"error": "Invalid total amount"}
    assert client.post("/api/orders", data="not json").status_code == 400


def test_create_order_storage_failure(client, seeded):
    (seeded.data_dir / "orders.json").write_text("{broken", encoding="utf-8")
    response = client.post("/api/orders", json={"products": [{"id": 1}], "total": 10})
    assert response.status_code == 500
    assert response.get_json() == {"error": "Failed to create order"}


def test_get_missing_order(client):
    assert client.get("/api/orders/ORDER-1").status_code == 404


def test_orders_paging(client):
    for total in (10, 20, 30):
        client.post("/api/orders", json={"products": [{"id": 1}], "total": total})
    body = client.get("/api/orders?page=1&per_page=2").get_json()
    assert body["total"] == 3
    assert body["total_pages"] == 2
    assert [o["total"] for o in body["orders"]] == [10, 20]


def test_unknown_route_is_json_404(client):
    response = client.get("/api/nope")
    assert response.status_code == 404
    assert response.get_json() == {"error": "Not found"}


def test_update_product_rejects_bad_price(client):
    assert client.put("/api/products/1", json={"price": -5}).status_code == 400
    assert client.put("/api/products/1", json={"price": "12"}).status_code == 400
    assert client.get("/api/products/1").get_json()["price"] == 100


def test_update_product_requires_real_bool_for_available(client):
    response = client.put("/api/products/1", json={"available": "false"})
    assert response.status_code == 400
    assert client.get("/api/products/1").get_json()["available"] is True

    response = client.put("/api/products/1", json={"available": False})
    assert response.status_code == 200
    assert response.get_json()["product"]["available"] is False


def test_non_ascii_digit_id_is_a_slug(client):
    response = client.get("/api/products/²")
    assert response.status_code == 404
    assert response.get_json() == {"error": "Product not found"}


def test_unreadable_stored_product_is_json_500(client, app, seeded):
    app.config["PROPAGATE_EXCEPTIONS"] = False
    (seeded.data_dir / "products.json").write_text(
        json.dumps([{"id": 1, "name": "Rock", "price": 1, "unit": "stone"}, "oops"]), encoding="utf-8"
    )
    response = client.get("/api/products")
    assert response.status_code == 500
    assert response.get_json() == {"error": "Internal server error"}


def test_cart_quote_summary_uses_configured_currency(client):
    response = client.post("/api/cart/quote", json={"lines": [{"productId": 2, "weight": 130}]})
    summary = response.get_json()["summary"]
    assert summary["totalLabel"] == "30.00 RUB"
    assert summary["rows"][0]["amountLabel"] == "150 g"
    assert summary["canCheckout"] is True
