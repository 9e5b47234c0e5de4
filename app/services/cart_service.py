from typing import Dict, Any, List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.data.models.cart import CartModel
from app.data.models.cart_item import CartItemModel
from app.domain.errors import (
    ConcurrencyConflict,
    InsufficientStock,
    InvalidQuantity,
    NotFound,
    ProductUnavailable,
)
from app.repos.cart_repo import CartRepo
from app.services.catalog import Catalog
from app.utils.retry import conflict_retry
from app.utils.logging import get_logger

logger = get_logger(__name__)


class CartService:
    """
    Cart Store - jeden koszyk na uzytkownika, tworzony leniwie.
    commands (merge, remove, set quantity, clear) modyfikuja stan i podbijaja version,
    query (get, summary) tylko odczyt.
    Ceny linii sa zamrozone w chwili dodania, total liczony z nich, nie z katalogu.
    """

    def __init__(self, db: Session, catalog: Catalog | None = None):
        self.repo = CartRepo(db)
        self.catalog = catalog

    #query - odczyt
    def get_or_create(self, user_id: int) -> CartModel:
        cart = self.repo.get_cart_by_user(user_id)
        if cart:
            return cart

        try:
            created = self.repo.create_cart(CartModel(user_id=user_id, version=1))
        except IntegrityError:
            # rownolegly request zdazyl utworzyc koszyk
            self.repo.rollback()
            return self.repo.get_cart_by_user(user_id)

        logger.info(f"Utworzono nowy koszyk {created.id} dla uzytkownika {user_id}")
        return created

    def get_lines(self, user_id: int) -> List[CartItemModel]:
        cart = self.get_or_create(user_id)
        return self.repo.get_cart_items(cart.id)

    def get_cart(self, user_id: int) -> Dict[str, Any]:
        cart = self.get_or_create(user_id)
        items = self.repo.get_cart_items(cart.id)

        #dict przyksztalcany w jsona
        return {
            "cart_id": cart.id,
            "user_id": cart.user_id,
            "version": cart.version,
            "items": [self._line(i) for i in items],
            "item_count": item_count(items),
            "total_price": total_price(items),
            "updated_at": cart.updated_at,
        }

    def summary(self, user_id: int) -> Dict[str, Any]:
        cart = self.get_cart(user_id)
        return {
            "item_count": cart["item_count"],
            "total_price": cart["total_price"],
            "items": cart["items"],
        }

    #commands
    @conflict_retry()
    def merge_line(self, user_id: int, product_id: int, quantity: int, unit_price: int) -> Dict[str, Any]:
        """
        Istniejaca linia: quantity += quantity, cena nadpisana.
        Brak linii: nowa linia na koncu. Duplikat to nie konflikt.
        """
        if quantity < 1:
            raise InvalidQuantity("Quantity must be at least 1")

        cart = self.get_or_create(user_id)
        existing = self.repo.get_cart_item(cart.id, product_id)

        if existing:
            logger.info(
                f"Produkt {product_id} juz jest w koszyku {cart.id}, zwiekszam ilosc "
                f"z {existing.quantity} do {existing.quantity + quantity}"
            )
            existing.quantity += quantity
            existing.price = unit_price
            self.repo.add_cart_item(existing)
        else:
            logger.info(f"Dodaje nowy produkt {product_id} do koszyka {cart.id}")
            self.repo.add_cart_item(
                CartItemModel(
                    cart_id=cart.id,
                    product_id=product_id,
                    quantity=quantity,
                    price=unit_price,
                )
            )

        self._bump_version(cart)
        return self.get_cart(user_id)

    @conflict_retry()
    def remove_line(self, user_id: int, product_id: int) -> Dict[str, Any]:
        cart = self.get_or_create(user_id)

        # brak linii to no-op, operacja idempotentna
        if self.repo.delete_cart_item(cart.id, product_id) == 0:
            self.repo.rollback()
            return self.get_cart(user_id)

        logger.info(f"Produkt {product_id} usuniety z koszyka {cart.id}")
        self._bump_version(cart)
        return self.get_cart(user_id)

    @conflict_retry()
    def set_quantity(self, user_id: int, product_id: int, quantity: int) -> Dict[str, Any]:
        if quantity < 1:
            raise InvalidQuantity("Quantity must be at least 1")

        cart = self.get_or_create(user_id)
        item = self.repo.get_cart_item(cart.id, product_id)
        if not item:
            raise NotFound("Item not found in cart", product_id=product_id)

        item.quantity = quantity
        self.repo.add_cart_item(item)
        self._bump_version(cart)
        return self.get_cart(user_id)

    @conflict_retry()
    def clear(self, user_id: int) -> Dict[str, Any]:
        # koszyk zostaje, znikaja tylko linie
        cart = self.get_or_create(user_id)
        removed = self.repo.delete_all_items(cart.id)
        self._bump_version(cart)
        logger.info(f"Koszyk {cart.id} wyczyszczony ({removed} linii)")
        return self.get_cart(user_id)

    def add_product(self, user_id: int, product_id: int, quantity: int = 1) -> Dict[str, Any]:
        """Zwykle dodanie z katalogu - aktualna cena katalogowa zostaje zamrozona w linii."""
        if quantity < 1:
            raise InvalidQuantity("Quantity must be at least 1")

        product = self._catalog().get_product(product_id)
        if not product.is_active:
            raise ProductUnavailable("Product is not available", product_id=product_id)
        if product.stock < quantity:
            raise InsufficientStock(product.id, product.name, available=product.stock, requested=quantity)

        return self.merge_line(user_id, product_id, quantity, product.price)

    def update_quantity(self, user_id: int, product_id: int, quantity: int) -> Dict[str, Any]:
        if quantity < 1:
            raise InvalidQuantity("Quantity must be at least 1")

        product = self._catalog().get_product(product_id)
        if product.stock < quantity:
            raise InsufficientStock(product.id, product.name, available=product.stock, requested=quantity)

        return self.set_quantity(user_id, product_id, quantity)

    def _bump_version(self, cart: CartModel) -> None:
        # Optimistic locking warunek na wersje
        # np w bazie update set version 2 where id 1 and version 1
        rowcount = self.repo.update_cart_version(cart.id, cart.version)
        if rowcount == 0:
            self.repo.rollback()
            raise ConcurrencyConflict(
                "Cart was modified by another operation",
                cart_id=cart.id,
            )
        self.repo.commit()

    def _catalog(self) -> Catalog:
        if self.catalog is None:
            raise RuntimeError("CartService created without a catalog")
        return self.catalog

    @staticmethod
    def _line(item: CartItemModel) -> Dict[str, Any]:
        return {
            "product_id": item.product_id,
            "quantity": item.quantity,
            "price": item.price,
            "line_total": item.price * item.quantity,
        }


def item_count(items: List[CartItemModel]) -> int:
    return sum(i.quantity for i in items)


def total_price(items: List[CartItemModel]) -> int:
    return sum(i.price * i.quantity for i in items)
