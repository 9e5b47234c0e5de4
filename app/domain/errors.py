# app/domain/errors.py
"""
Bledy domenowe checkoutu.

Kazdy blad niesie `code` (stabilny identyfikator dla UI) i `status_code`
(mapowanie na HTTP w routerach). UI rozroznia "already claimed" (miekki),
"expired/invalid" (twardy) i "insufficient stock" (twardy, z nazwa produktu).
"""
from typing import Any, Dict


class ShopError(Exception):
    code = "shop_error"
    status_code = 400

    def __init__(self, message: str, **extra: Any):
        super().__init__(message)
        self.message = message
        self.extra = extra

    def to_detail(self) -> Dict[str, Any]:
        return {"code": self.code, "message": self.message, **self.extra}


class NotFound(ShopError):
    code = "not_found"
    status_code = 404


class OfferInvalid(ShopError):
    code = "offer_invalid"
    status_code = 400


class AlreadyClaimed(ShopError):
    code = "already_claimed"
    status_code = 200


class EmptyCart(ShopError):
    code = "empty_cart"
    status_code = 400


class InsufficientStock(ShopError):
    code = "insufficient_stock"
    status_code = 409

    def __init__(self, product_id: int, name: str | None = None, available: int | None = None, requested: int | None = None):
        label = name or f"product {product_id}"
        super().__init__(
            f"Insufficient stock for {label}",
            product_id=product_id,
            product_name=name,
            available=available,
            requested=requested,
        )
        self.product_id = product_id
        self.product_name = name


class InvalidQuantity(ShopError):
    code = "invalid_quantity"
    status_code = 400


class ProductUnavailable(ShopError):
    code = "product_unavailable"
    status_code = 400


class PartialFailure(ShopError):
    """Claim zapisany, ale budowa zamowienia padla - koszyk trzyma rabat."""

    code = "partial_failure"
    status_code = 200

    def __init__(self, cause: ShopError):
        super().__init__(
            "Offer claimed, but the order could not be created. "
            "The discounted items are in your cart.",
            cause=cause.to_detail(),
        )
        self.cause = cause


class InvalidStatusTransition(ShopError):
    code = "invalid_status_transition"
    status_code = 409


class ConcurrencyConflict(ShopError):
    code = "concurrency_conflict"
    status_code = 409


class OrderNumberCollision(ShopError):
    code = "order_number_collision"
    status_code = 409


class CatalogUnavailable(ShopError):
    """product-service nie odpowiada (po retry)."""

    code = "catalog_unavailable"
    status_code = 503
