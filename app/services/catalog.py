# app/services/catalog.py
from dataclasses import dataclass
from typing import Protocol

from sqlalchemy.orm import Session

from app.domain.errors import InsufficientStock, NotFound
from app.repos.product_repo import ProductRepo
from app.utils.settings import CATALOG_BACKEND
from app.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ProductSnapshot:
    id: int
    name: str
    price: int
    stock: int
    is_active: bool


class Catalog(Protocol):
    def get_product(self, product_id: int) -> ProductSnapshot: ...

    def decrement_stock(self, product_id: int, quantity: int) -> None: ...


class LocalCatalog:
    """
    Ledger stanow magazynowych na wspolnej bazie.
    Dekrement jest atomowy (warunkowy UPDATE), kazdy commitowany osobno.
    """

    def __init__(self, db: Session):
        self.repo = ProductRepo(db)

    def get_product(self, product_id: int) -> ProductSnapshot:
        product = self.repo.get_product(product_id)
        if not product:
            raise NotFound(f"Product {product_id} not found", product_id=product_id)
        return ProductSnapshot(
            id=product.id,
            name=product.name,
            price=product.price,
            stock=product.stock,
            is_active=product.is_active,
        )

    def decrement_stock(self, product_id: int, quantity: int) -> None:
        rowcount = self.repo.decrement_stock(product_id, quantity)
        if rowcount == 0:
            self.repo.rollback()
            product = self.repo.get_product(product_id)
            if not product:
                raise NotFound(f"Product {product_id} not found", product_id=product_id)
            raise InsufficientStock(
                product_id,
                product.name,
                available=product.stock,
                requested=quantity,
            )

        self.repo.commit()
        logger.info(f"Stock of product {product_id} decremented by {quantity}")


def get_catalog(db: Session) -> Catalog:
    if CATALOG_BACKEND == "http":
        # import lokalny - klient HTTP potrzebny tylko w trybie zdalnym
        from app.services.product_client import ProductClient

        return ProductClient()
    return LocalCatalog(db)
