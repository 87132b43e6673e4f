# tests/test_products_api.py
import re

ID_PATTERN = re.compile(r"^product:\d{13}-[a-z0-9]{9}$")


def test_health(client):
    r = client.get("/api/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}


def test_root_greeting(client):
    r = client.get("/")
    assert r.status_code == 200
    assert "Poultry Paradise" in r.text


def test_list_products_empty(client):
    r = client.get("/api/products")
    assert r.status_code == 200
    assert r.json() == {"products": []}


def test_create_json_product(client, store, chicken):
    r = client.post("/api/products", json=chicken)
    assert r.status_code == 200
    product = r.json()["product"]
    assert ID_PATTERN.match(product["id"])
    assert product["createdAt"]
    assert "updatedAt" not in product
    for key, value in chicken.items():
        assert product[key] == value
    assert store.get(product["id"]) == product

    listed = client.get("/api/products").json()["products"]
    assert [p["id"] for p in listed] == [product["id"]]


def test_create_json_defaults(client):
    r = client.post("/api/products", json={"name": "Quail Eggs", "price": 60, "stock": 10})
    assert r.status_code == 200
    product = r.json()["product"]
    assert product["image"] == ""
    assert product["unit"] == "kg"


def test_create_rejects_invalid_json_payload(client, store):
    r = client.post("/api/products", json={"name": "Bad", "price": -1, "stock": 3})
    assert r.status_code == 400
    assert "price" in r.json()["error"]

    r = client.post("/api/products", json={"name": "Bad", "price": 10, "stock": "lots"})
    assert r.status_code == 400
    assert "stock" in r.json()["error"]
    assert store.list_products() == []


def test_create_rejects_unknown_content_type(client):
    r = client.post("/api/products", content=b"name=x", headers={"content-type": "text/plain"})
    assert r.status_code == 400
    assert "Unsupported content type" in r.json()["error"]


def test_update_merges_patch(client, chicken):
    product = client.post("/api/products", json=chicken).json()["product"]

    r = client.put(f"/api/products/{product['id']}", json={"price": 480, "stock": 7, "id": "product:hijack"})
    assert r.status_code == 200
    updated = r.json()["product"]
    assert updated["id"] == product["id"]
    assert updated["price"] == 480
    assert updated["stock"] == 7
    assert updated["name"] == chicken["name"]
    assert updated["createdAt"] == product["createdAt"]
    assert updated["updatedAt"]


def test_update_unknown_product_is_404(client, store, chicken):
    client.post("/api/products", json=chicken)
    before = store.list_products()

    r = client.put("/api/products/product:0-missing", json={"stock": 1})
    assert r.status_code == 404
    assert r.json() == {"error": "Product not found"}
    assert store.list_products() == before


def test_delete_twice(client, store, chicken):
    product = client.post("/api/products", json=chicken).json()["product"]

    r = client.delete(f"/api/products/{product['id']}")
    assert r.status_code == 200
    assert r.json() == {"message": "Product deleted successfully"}
    assert store.get(product["id"]) is None

    r = client.delete(f"/api/products/{product['id']}")
    assert r.status_code == 404
    assert r.json()["error"] == "Product not found"


def test_init_products_is_idempotent(client):
    first = client.post("/api/init-products")
    assert first.status_code == 200
    body = first.json()
    assert body["count"] == len(body["products"]) > 0

    second = client.post("/api/init-products")
    assert second.status_code == 200
    assert second.json()["count"] == body["count"]
    assert "products" not in second.json()

    listed = client.get("/api/products").json()["products"]
    assert len(listed) == body["count"]
    assert len({p["id"] for p in listed}) == body["count"]


def test_init_products_noop_when_catalog_not_empty(client, chicken):
    client.post("/api/products", json=chicken)
    r = client.post("/api/init-products")
    assert r.json() == {"message": "Products already initialized", "count": 1}


def test_backend_failure_is_500(client, app):
    class BrokenStore:
        def list_products(self):
            raise RuntimeError("kv table unreachable")

    app.state.store = BrokenStore()
    r = client.get("/api/products")
    assert r.status_code == 500
    assert r.json() == {"error": "kv table unreachable"}
