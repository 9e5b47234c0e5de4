# app/services/offer_service.py
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal, ROUND_DOWN
from typing import List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.data.models.offer import OfferClaimModel, OfferModel
from app.domain.errors import AlreadyClaimed, NotFound, OfferInvalid, ProductUnavailable, ShopError
from app.repos.offer_repo import OfferRepo
from app.services.cart_service import CartService
from app.services.catalog import Catalog
from app.utils.logging import get_logger

logger = get_logger(__name__)


def discounted_price(price: int, discount_percent) -> int:
    """price * (1 - pct/100) w jednostkach minimalnych, obciete w dol."""
    pct = Decimal(str(discount_percent))
    value = Decimal(price) * (Decimal(100) - pct) / Decimal(100)
    return int(value.to_integral_value(rounding=ROUND_DOWN))


def _as_utc(value: datetime) -> datetime:
    # sqlite zwraca naive datetime, zapisujemy zawsze UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def is_within_window(offer: OfferModel, now: datetime) -> bool:
    return _as_utc(offer.valid_from) <= now <= _as_utc(offer.valid_until)


@dataclass
class AddedProduct:
    product_id: int
    added: bool
    name: str | None = None
    price: int | None = None
    reason: str | None = None


@dataclass
class ClaimResult:
    offer: OfferModel
    products: List[AddedProduct] = field(default_factory=list)

    @property
    def added(self) -> List[AddedProduct]:
        return [p for p in self.products if p.added]


class OfferService:
    """
    Offer Claim Engine.

    Przejscie (oferta, user): Unclaimed -> Claimed, bez odwrotu.
    Guardy w kolejnosci, pierwszy blad przerywa:
    1. oferta istnieje                    -> NotFound
    2. aktywna i now w [from, until]      -> OfferInvalid
    3. user nie ma jeszcze claimu         -> AlreadyClaimed
    4. limit uzyc nie wyczerpany          -> OfferInvalid

    Zapis claimu (ledger + used_count) to jedna transakcja, commit przed
    dodaniem produktow do koszyka.
    """

    def __init__(self, db: Session, catalog: Catalog, cart_service: CartService | None = None):
        self.repo = OfferRepo(db)
        self.catalog = catalog
        self.cart_service = cart_service or CartService(db, catalog)

    #query
    def list_offers(self, now: datetime | None = None) -> List[OfferModel]:
        return self.repo.list_active_offers(now or datetime.now(timezone.utc))

    def get_offer(self, offer_id: int) -> OfferModel:
        offer = self.repo.get_offer(offer_id)
        if not offer:
            raise NotFound("Offer not found", offer_id=offer_id)
        return offer

    #commands
    def claim(self, offer_id: int, user_id: int, now: datetime | None = None) -> ClaimResult:
        now = now or datetime.now(timezone.utc)
        offer = self.get_offer(offer_id)

        if not offer.is_active or not is_within_window(offer, now) or not offer.products:
            raise OfferInvalid("Offer is not valid or has expired", offer_id=offer_id)

        if self.repo.has_claimed(offer_id, user_id):
            raise AlreadyClaimed("You have already claimed this offer", offer_id=offer_id)

        if offer.max_uses is not None and offer.used_count >= offer.max_uses:
            raise OfferInvalid("Offer usage limit reached", offer_id=offer_id)

        self._commit_claim(offer_id, user_id, now)

        offer = self.get_offer(offer_id)
        result = ClaimResult(offer=offer)
        for product_id in offer.product_ids:
            result.products.append(self._add_discounted(offer, product_id, user_id))

        logger.info(
            f"Offer {offer_id} claimed by user {user_id}: "
            f"{len(result.added)}/{len(result.products)} products added to cart"
        )
        return result

    def _commit_claim(self, offer_id: int, user_id: int, now: datetime) -> None:
        # unique (offer_id, user_id) - atomowe "claim if absent"
        try:
            self.repo.add_claim(OfferClaimModel(offer_id=offer_id, user_id=user_id, claimed_at=now))
        except IntegrityError:
            self.repo.rollback()
            raise AlreadyClaimed("You have already claimed this offer", offer_id=offer_id)

        if self.repo.increment_used_count(offer_id) == 0:
            # limit wyczerpany przez rownolegly claim
            self.repo.rollback()
            raise OfferInvalid("Offer usage limit reached", offer_id=offer_id)

        self.repo.commit()

    def _add_discounted(self, offer: OfferModel, product_id: int, user_id: int) -> AddedProduct:
        # claim jest juz zapisany - blad jednego produktu nie przerywa petli
        try:
            product = self.catalog.get_product(product_id)
        except ShopError as e:
            logger.warning(f"Offer {offer.id}: product {product_id} skipped: {e.message}")
            return AddedProduct(product_id=product_id, added=False, reason=e.code)

        if not product.is_active:
            logger.info(f"Offer {offer.id}: product {product_id} inactive, skipping")
            return AddedProduct(product_id=product_id, added=False, name=product.name, reason=ProductUnavailable.code)

        price = discounted_price(product.price, offer.discount_percent)
        try:
            self.cart_service.merge_line(user_id, product_id, 1, price)
        except ShopError as e:
            logger.error(f"Offer {offer.id}: could not add product {product_id} to cart of user {user_id}: {e.message}")
            return AddedProduct(product_id=product_id, added=False, name=product.name, price=price, reason=e.code)

        return AddedProduct(product_id=product_id, added=True, name=product.name, price=price)
