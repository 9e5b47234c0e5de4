"""Testy klienta katalogu zdalnego i aplikacji product-service."""
from unittest.mock import Mock, patch

import pytest
import requests
from fastapi.testclient import TestClient

from app.data.database import get_db
from app.domain.errors import CatalogUnavailable, InsufficientStock, NotFound
from app.product_service.main import app as product_app
from app.services.product_client import ProductClient


def response(status_code, body=None):
    resp = Mock(status_code=status_code)
    resp.json.return_value = body or {}
    if status_code >= 400:
        resp.raise_for_status.side_effect = requests.HTTPError(f"{status_code}")
    return resp


@pytest.fixture
def product_client():
    return ProductClient(base_url="http://catalog.test/")


def test_get_product_builds_snapshot(product_client):
    body = {"id": 1, "name": "Keyboard", "price": 1000, "stock": 4, "is_active": True}

    with patch("app.services.product_client.requests.get", return_value=response(200, body)) as get:
        product = product_client.get_product(1)

    get.assert_called_once_with("http://catalog.test/products/1", timeout=2)
    assert product.name == "Keyboard"
    assert product.stock == 4


def test_get_missing_product_is_not_found(product_client):
    with patch("app.services.product_client.requests.get", return_value=response(404)):
        with pytest.raises(NotFound):
            product_client.get_product(1)


def test_decrement_conflict_is_insufficient_stock(product_client):
    body = {"detail": {"code": "insufficient_stock", "product_name": "Mouse", "available": 1}}

    with patch("app.services.product_client.requests.post", return_value=response(409, body)) as post:
        with pytest.raises(InsufficientStock) as exc:
            product_client.decrement_stock(2, 3)

    post.assert_called_once_with("http://catalog.test/products/2/decrement-stock", json={"quantity": 3}, timeout=2)
    assert exc.value.product_name == "Mouse"
    assert exc.value.to_detail()["available"] == 1


def test_decrement_retries_connection_errors(product_client):
    side_effect = [requests.ConnectionError("refused"), response(204)]

    with patch("app.services.product_client.requests.post", side_effect=side_effect) as post:
        product_client.decrement_stock(1, 1)

    assert post.call_count == 2


def test_decrement_does_not_retry_timeouts(product_client):
    with patch("app.services.product_client.requests.post", side_effect=requests.Timeout("slow")) as post:
        with pytest.raises(CatalogUnavailable):
            product_client.decrement_stock(1, 1)

    assert post.call_count == 1


def test_decrement_gives_up_after_retries(product_client):
    with patch(
        "app.services.product_client.requests.post",
        side_effect=requests.ConnectionError("refused"),
    ) as post:
        with pytest.raises(CatalogUnavailable) as exc:
            product_client.decrement_stock(1, 2)

    assert post.call_count == 3
    assert exc.value.to_detail()["product_id"] == 1


def test_get_product_server_error_is_catalog_unavailable(product_client):
    with patch("app.services.product_client.requests.get", return_value=response(500)) as get:
        with pytest.raises(CatalogUnavailable):
            product_client.get_product(1)

    assert get.call_count == 3


@pytest.fixture
def catalog_http(db, products):
    product_app.dependency_overrides[get_db] = lambda: db
    try:
        yield TestClient(product_app)
    finally:
        product_app.dependency_overrides.clear()


def test_product_service_endpoints(catalog_http):
    body = catalog_http.get("/products/2").json()
    assert body == {"id": 2, "name": "Mouse", "price": 500, "stock": 2, "is_active": True}

    assert catalog_http.get("/products/99").status_code == 404
    assert catalog_http.post("/products/2/decrement-stock", json={"quantity": 2}).status_code == 204

    response = catalog_http.post("/products/2/decrement-stock", json={"quantity": 1})
    assert response.status_code == 409
    assert response.json()["detail"]["product_name"] == "Mouse"
    assert response.json()["detail"]["available"] == 0
