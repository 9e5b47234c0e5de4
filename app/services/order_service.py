# app/services/order_service.py
import math
import random
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.data.models.order import OrderItemModel, OrderModel
from app.domain.errors import (
    EmptyCart,
    InsufficientStock,
    InvalidStatusTransition,
    NotFound,
    OrderNumberCollision,
    ShopError,
)
from app.domain.order_status import OrderStatus, ensure_transition
from app.repos.order_repo import OrderRepo
from app.repos.user_repo import UserRepo
from app.services import message_composer
from app.services.catalog import Catalog, ProductSnapshot
from app.services.notification_service import NotificationService
from app.utils.retry import conflict_retry
from app.utils.settings import ORDER_NUMBER_PREFIX
from app.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class OrderLine:
    """Linia wejsciowa builder'a - cena juz zamrozona (koszyk albo claim)."""

    product_id: int
    quantity: int
    price: int


@dataclass
class BuildResult:
    order: OrderModel
    stock_warnings: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def whatsapp_link(self) -> str:
        return message_composer.build_link(self.order.whatsapp_message)


def generate_order_number(now: datetime | None = None) -> str:
    """EA + yyyyMMdd + ostatnie 6 cyfr timestampu (ms) + 3 cyfry losowe."""
    now = now or datetime.now(timezone.utc)
    timestamp = str(int(now.timestamp() * 1000))[-6:]
    suffix = f"{random.randint(0, 999):03d}"
    return f"{ORDER_NUMBER_PREFIX}{now:%Y%m%d}{timestamp}{suffix}"


class OrderService:
    """
    Serwis odpowiedzialny za domenę zamówień.

    build_order realizuje kroki checkoutu w scislej kolejnosci:
    1. walidacja stanow (bez mutacji)
    2. totale z cen zapisanych na liniach
    3. numer zamowienia
    4. zapis ze statusem pending (+ cache wiadomosci WhatsApp)
    5. atomowy dekrement stanow, spozniony brak towaru flaguje zamowienie
    Czyszczenie koszyka robi orchestrator.
    """

    def __init__(self, db: Session, catalog: Catalog | None = None, notification_service: NotificationService | None = None):
        self.db = db
        self.repo = OrderRepo(db)
        self.user_repo = UserRepo(db)
        self.catalog = catalog
        self.notification_service = notification_service or NotificationService()

    # =====================================================
    # BUILDER
    # =====================================================
    def validate_stock(self, lines: List[OrderLine]) -> Dict[int, ProductSnapshot]:
        products = {}
        for line in lines:
            product = self.catalog.get_product(line.product_id)
            logger.info(
                f"Checking stock for {product.name}: {product.stock} available, {line.quantity} requested"
            )
            if product.stock < line.quantity:
                raise InsufficientStock(
                    product.id,
                    product.name,
                    available=product.stock,
                    requested=line.quantity,
                )
            products[product.id] = product
        return products

    def build_order(
        self,
        user_id: int,
        lines: List[OrderLine],
        shipping_address: Dict[str, Any],
        payment_method: str,
        notes: Optional[str] = None,
        source: str = "cart",
    ) -> BuildResult:
        if not lines:
            raise EmptyCart("Cart is empty")

        products = self.validate_stock(lines)

        order = self._persist_order(user_id, lines, products, shipping_address, payment_method, notes, source)
        logger.info(f"Order {order.order_number} created for user {user_id}, total {order.total_amount}")

        result = BuildResult(order=order)
        for line in lines:
            try:
                self.catalog.decrement_stock(line.product_id, line.quantity)
            except ShopError as e:
                # zamowienie juz zapisane - zostaje, reszta linii dalej dekrementowana
                logger.error(f"Order {order.order_number}: stock update failed for product {line.product_id}: {e.message}")
                result.stock_warnings.append({"product_id": line.product_id, **e.to_detail()})

        if result.stock_warnings:
            order.needs_reconciliation = True
            order.reconciliation_note = "; ".join(
                f"product {w['product_id']}: {w['message']}" for w in result.stock_warnings
            )
            self.repo.save(order)

        self._notify(order)
        return result

    @conflict_retry()
    def _persist_order(self, user_id, lines, products, shipping_address, payment_method, notes, source) -> OrderModel:
        user = self.user_repo.get_user(user_id)

        items = [
            OrderItemModel(
                product_id=line.product_id,
                name=products[line.product_id].name,
                price=line.price,
                quantity=line.quantity,
                line_total=line.price * line.quantity,
            )
            for line in lines
        ]

        order = OrderModel(
            order_number=generate_order_number(),
            user_id=user_id,
            customer_name=user.name if user else None,
            customer_email=user.email if user else None,
            status=OrderStatus.PENDING.value,
            source=source,
            total_amount=sum(i.line_total for i in items),
            shipping_address=dict(shipping_address),
            payment_method=payment_method,
            notes=notes,
            items=items,
        )
        order.whatsapp_message = message_composer.compose(order)

        try:
            return self.repo.create_order(order)
        except IntegrityError:
            self.repo.rollback()
            if self._order_number_taken(order.order_number):
                logger.warning(f"Order number collision on {order.order_number}, regenerating")
                raise OrderNumberCollision("Order number collision", order_number=order.order_number)
            raise

    def _order_number_taken(self, order_number: str) -> bool:
        return self.db.execute(
            select(OrderModel.id).where(OrderModel.order_number == order_number)
        ).first() is not None

    def _notify(self, order: OrderModel) -> None:
        try:
            self.notification_service.send_order_notification(order.user_id, order.id, order.order_number)
        except Exception as e:
            # powiadomienie nie moze zepsuc checkoutu
            logger.warning(f"Failed to enqueue notification for order {order.order_number}: {e}")

    # =====================================================
    # QUERY
    # =====================================================
    def get_order(self, order_id: int, user_id: int | None = None) -> OrderModel:
        order = self.repo.get_order(order_id)

        if not order:
            raise NotFound("Order not found", order_id=order_id)

        if user_id is not None and order.user_id != user_id:
            raise PermissionError("Not authorized to access this order")

        return order

    def list_user_orders(self, user_id: int, page: int = 1, limit: int = 10, status: str | None = None):
        orders, total = self.repo.list_user_orders(user_id, page, limit, status)
        pagination = {
            "current_page": page,
            "total_pages": math.ceil(total / limit) if limit else 0,
            "total_orders": total,
            "has_next_page": page * limit < total,
            "has_prev_page": page > 1,
        }
        return orders, pagination

    def stats(self) -> Dict[str, Any]:
        breakdown = self.repo.count_by_status()
        return {
            "total_orders": sum(breakdown.values()),
            "status_breakdown": breakdown,
            "total_revenue": self.repo.total_revenue(),
        }

    # =====================================================
    # ORDER MANAGEMENT
    # =====================================================
    def update_status(self, order_id: int, status: str) -> OrderModel:
        order = self.get_order(order_id)
        target = ensure_transition(order.status, status)
        self._apply_status(order, target)

        logger.info(f"Order {order.order_number} status -> {target.value}")
        return self.repo.save(order)

    def cancel_order(self, order_id: int, user_id: int, reason: str) -> OrderModel:
        order = self.get_order(order_id, user_id)

        # klient nie anuluje dostarczonego - zwrot po dostawie tylko przez admina
        if order.status == OrderStatus.DELIVERED.value:
            raise InvalidStatusTransition("Order cannot be cancelled", current=order.status)
        target = ensure_transition(order.status, OrderStatus.CANCELLED.value)

        self._apply_status(order, target)
        order.cancellation_reason = reason

        logger.info(f"Order {order.order_number} cancelled by user {user_id}")
        return self.repo.save(order)

    def mark_message_sent(self, order_id: int) -> OrderModel:
        order = self.get_order(order_id)
        order.whatsapp_sent = True
        order.whatsapp_sent_at = datetime.now(timezone.utc)
        return self.repo.save(order)

    def resend_message(self, order_id: int) -> Dict[str, str]:
        """Tekst z cache zamowienia, nowy jest tylko link (numer sklepu z configu)."""
        order = self.get_order(order_id)
        message = order.whatsapp_message

        if not message:
            message = message_composer.compose(order)
            order.whatsapp_message = message
            self.repo.save(order)

        return {
            "whatsapp_message": message,
            "whatsapp_link": message_composer.build_link(message),
        }

    @staticmethod
    def _apply_status(order: OrderModel, target: OrderStatus) -> None:
        order.status = target.value
        if target == OrderStatus.DELIVERED:
            order.delivered_at = datetime.now(timezone.utc)
        elif target == OrderStatus.CANCELLED:
            order.cancelled_at = datetime.now(timezone.utc)
