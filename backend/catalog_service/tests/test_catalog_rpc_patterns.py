import pytest
from fastapi.testclient import TestClient

from catalog_service.main import create_app


@pytest.fixture
def client():
    return TestClient(create_app())


def rpc(client, pattern, data=None):
    return client.post(f"/rpc/{pattern}", json={"data": data or {}})


def test_create_and_find_product(client):
    created = rpc(client, "catalog.product.create", {"sku": "SKU-1", "name": "Lamp", "price": "19.90"})

    assert created.status_code == 200
    product = created.json()["data"]
    assert product["sku"] == "SKU-1"
    assert product["currency"] == "USD"

    found = rpc(client, "catalog.product.find_by_id", {"id": product["id"]}).json()["data"]
    assert found["name"] == "Lamp"
    assert found["price"] == "19.90"


def test_duplicate_sku(client):
    rpc(client, "catalog.product.create", {"sku": "SKU-1", "name": "Lamp", "price": "1"})

    response = rpc(client, "catalog.product.create", {"sku": "SKU-1", "name": "Other lamp", "price": "2"})

    assert response.status_code == 409
    assert response.json()["error"] == {
        "statusCode": 409,
        "errorCode": "CATALOG_SERVICE.0002",
        "errorDescription": "Product already exists",
        "metadata": {"sku": "SKU-1"},
    }


def test_product_not_found(client):
    response = rpc(client, "catalog.product.find_by_id", {"id": "nope"})

    assert response.status_code == 404
    assert response.json()["error"]["errorCode"] == "CATALOG_SERVICE.0001"


@pytest.mark.parametrize("price", ["cheap", "-1", "NaN", "Infinity"])
def test_invalid_price(client, price):
    response = rpc(client, "catalog.product.create", {"sku": "SKU-2", "name": "Lamp", "price": price})

    assert response.status_code == 400
    assert response.json()["error"] == {
        "statusCode": 400,
        "errorCode": "CATALOG_SERVICE.0003",
        "errorDescription": "Invalid product data",
        "metadata": {"price": price},
    }


def test_missing_sku_and_name(client):
    response = rpc(client, "catalog.product.create", {"price": "1"})

    assert response.status_code == 400
    assert response.json()["error"]["errorCode"] == "CATALOG_SERVICE.0003"
    assert response.json()["error"]["metadata"] == {"missing": ["sku", "name"]}
    assert rpc(client, "catalog.product.list").json()["data"]["total"] == 0


def test_list_products(client):
    rpc(client, "catalog.product.create", {"sku": "A", "name": "A", "price": "1"})
    rpc(client, "catalog.product.create", {"sku": "B", "name": "B", "price": "2"})

    data = rpc(client, "catalog.product.list").json()["data"]

    assert data["total"] == 2
    assert [p["sku"] for p in data["items"]] == ["A", "B"]
