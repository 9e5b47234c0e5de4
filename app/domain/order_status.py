# app/domain/order_status.py
from enum import Enum
from typing import Dict, FrozenSet

from app.domain.errors import InvalidStatusTransition


class OrderStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


# delivered -> cancelled to jedyny wyjatek (zwrot po dostawie)
TRANSITIONS: Dict[OrderStatus, FrozenSet[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.CONFIRMED, OrderStatus.CANCELLED}),
    OrderStatus.CONFIRMED: frozenset({OrderStatus.PROCESSING, OrderStatus.CANCELLED}),
    OrderStatus.PROCESSING: frozenset({OrderStatus.SHIPPED, OrderStatus.CANCELLED}),
    OrderStatus.SHIPPED: frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELLED}),
    OrderStatus.DELIVERED: frozenset({OrderStatus.CANCELLED}),
    OrderStatus.CANCELLED: frozenset(),
}


def can_transition(current: OrderStatus, target: OrderStatus) -> bool:
    return target in TRANSITIONS[current]


def ensure_transition(current: str, target: str) -> OrderStatus:
    """Zwraca docelowy status albo rzuca InvalidStatusTransition."""
    cur = OrderStatus(current)
    try:
        tgt = OrderStatus(target)
    except ValueError:
        raise InvalidStatusTransition(f"Unknown order status '{target}'")

    if not can_transition(cur, tgt):
        raise InvalidStatusTransition(
            f"Cannot change order status from {cur.value} to {tgt.value}",
            current=cur.value,
            target=tgt.value,
        )
    return tgt
