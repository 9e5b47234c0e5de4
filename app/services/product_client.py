# app/services/product_client.py
import requests

from app.domain.errors import CatalogUnavailable, InsufficientStock, NotFound
from app.services.catalog import ProductSnapshot
from app.utils.retry import http_retry
from app.utils.settings import PRODUCT_SERVICE_URL
from app.utils.logging import get_logger

logger = get_logger(__name__)


class ProductClient:
    """
    Katalog zdalny (product-service), ten sam kontrakt co LocalCatalog.
    Bledy transportu po wyczerpaniu retry wychodza jako CatalogUnavailable.
    """

    def __init__(self, base_url: str | None = None, timeout: int = 2):
        self.base_url = (base_url or PRODUCT_SERVICE_URL).rstrip("/")
        self.timeout = timeout

    @http_retry()
    def fetch_product(self, product_id: int) -> dict:
        url = f"{self.base_url}/products/{product_id}"
        logger.info(f"ProductClient GET {url}")

        resp = requests.get(url, timeout=self.timeout)
        if resp.status_code == 404:
            raise NotFound(f"Product {product_id} not found", product_id=product_id)
        resp.raise_for_status()
        return resp.json()

    def get_product(self, product_id: int) -> ProductSnapshot:
        try:
            data = self.fetch_product(product_id)
        except requests.RequestException as e:
            logger.error(f"ProductClient GET product {product_id} failed: {e}")
            raise CatalogUnavailable("Product service unavailable", product_id=product_id) from e

        return ProductSnapshot(
            id=data["id"],
            name=data["name"],
            price=int(data["price"]),
            stock=int(data["stock"]),
            is_active=bool(data.get("is_active", True)),
        )

    def decrement_stock(self, product_id: int, quantity: int) -> None:
        try:
            self.post_decrement(product_id, quantity)
        except requests.RequestException as e:
            logger.error(f"ProductClient decrement of product {product_id} failed: {e}")
            raise CatalogUnavailable(
                "Product service unavailable",
                product_id=product_id,
                requested=quantity,
            ) from e

    # dekrement nie jest idempotentny - retry tylko gdy request nie doszedl
    @http_retry(requests.ConnectionError)
    def post_decrement(self, product_id: int, quantity: int) -> None:
        url = f"{self.base_url}/products/{product_id}/decrement-stock"
        logger.info(f"ProductClient POST {url} quantity={quantity}")

        resp = requests.post(url, json={"quantity": quantity}, timeout=self.timeout)
        if resp.status_code == 404:
            raise NotFound(f"Product {product_id} not found", product_id=product_id)
        if resp.status_code == 409:
            detail = resp.json().get("detail", {})
            raise InsufficientStock(
                product_id,
                detail.get("product_name"),
                available=detail.get("available"),
                requested=quantity,
            )
        resp.raise_for_status()
