# app/services/checkout_service.py
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from app.domain.errors import AlreadyClaimed, EmptyCart, PartialFailure, ShopError
from app.services.cart_service import CartService
from app.services.catalog import Catalog, get_catalog
from app.services.offer_service import AddedProduct, OfferService
from app.services.order_service import BuildResult, OrderLine, OrderService
from app.utils.logging import get_logger

logger = get_logger(__name__)

CLAIMED = "claimed"
ALREADY_CLAIMED = "already_claimed"
PARTIAL_FAILURE = "partial_failure"


@dataclass
class ClaimOutcome:
    outcome: str
    message: str
    offer_id: int
    products: List[AddedProduct] = field(default_factory=list)
    build: Optional[BuildResult] = None
    error: Optional[Dict[str, Any]] = None


class CheckoutService:
    """
    Orchestrator: Claim Engine -> Cart Store -> Order Builder -> Stock Ledger
    -> Message Composer -> (cart clear).

    Dwa wejscia:
    - checkout_cart: zamowienie z calego koszyka, potem czyszczenie koszyka
    - claim_offer: claim, opcjonalnie od razu zamowienie z dodanych linii
      (bez czyszczenia koszyka). Blad po claimie nie cofa claimu.
    """

    def __init__(self, db: Session, catalog: Catalog | None = None, order_service: OrderService | None = None):
        self.catalog = catalog or get_catalog(db)
        self.cart_service = CartService(db, self.catalog)
        self.offer_service = OfferService(db, self.catalog, self.cart_service)
        self.order_service = order_service or OrderService(db, self.catalog)

    def checkout_cart(
        self,
        user_id: int,
        shipping_address: Dict[str, Any],
        payment_method: str,
        notes: Optional[str] = None,
    ) -> BuildResult:
        logger.info(f"Starting cart checkout for user {user_id}")

        items = self.cart_service.get_lines(user_id)
        if not items:
            raise EmptyCart("Cart is empty")

        lines = [OrderLine(product_id=i.product_id, quantity=i.quantity, price=i.price) for i in items]
        result = self.order_service.build_order(
            user_id,
            lines,
            shipping_address,
            payment_method,
            notes,
            source="cart",
        )

        # te same linie nie moga przejsc checkoutu drugi raz
        self.cart_service.clear(user_id)

        logger.info(f"Checkout completed: order {result.order.order_number}")
        return result

    def claim_offer(
        self,
        offer_id: int,
        user_id: int,
        create_order: bool = False,
        shipping_address: Optional[Dict[str, Any]] = None,
        payment_method: str = "cash_on_delivery",
        notes: Optional[str] = None,
    ) -> ClaimOutcome:
        if create_order and not shipping_address:
            raise ValueError("shipping_address is required when create_order is set")

        try:
            claim = self.offer_service.claim(offer_id, user_id)
        except AlreadyClaimed as e:
            # informacyjnie - przecenione produkty juz leza w koszyku
            logger.info(f"User {user_id} already claimed offer {offer_id}")
            return ClaimOutcome(outcome=ALREADY_CLAIMED, message=e.message, offer_id=offer_id)

        added = claim.added
        outcome = ClaimOutcome(
            outcome=CLAIMED,
            message=f"Offer claimed successfully, {len(added)} products added to cart",
            offer_id=offer_id,
            products=claim.products,
        )

        if not create_order or not added:
            return outcome

        lines = [OrderLine(product_id=p.product_id, quantity=1, price=p.price) for p in added]
        try:
            outcome.build = self.order_service.build_order(
                user_id,
                lines,
                shipping_address,
                payment_method,
                notes,
                source="claim",
            )
        except ShopError as e:
            # claim zostaje, koszyk trzyma rabat jako sciezke awaryjna
            failure = PartialFailure(e)
            logger.warning(f"Offer {offer_id} claimed by user {user_id}, order failed: {e.message}")
            outcome.outcome = PARTIAL_FAILURE
            outcome.message = failure.message
            outcome.error = failure.to_detail()

        return outcome
