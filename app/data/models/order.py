from sqlalchemy import Boolean, Column, Integer, ForeignKey, String, DateTime, JSON, Text
from sqlalchemy.orm import relationship
from datetime import datetime, timezone

from app.data.database import Base
from app.domain.order_status import OrderStatus

class OrderModel(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True)
    # unikalnosc wymuszona w bazie, kolizja -> nowy numer
    order_number = Column(String, nullable=False, unique=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)

    # snapshot danych klienta, wiadomosc nie zalezy od zmian w users
    customer_name = Column(String, nullable=True)
    customer_email = Column(String, nullable=True)

    status = Column(String, nullable=False, default=OrderStatus.PENDING.value)
    source = Column(String, nullable=False, default="cart")  # cart, claim
    total_amount = Column(Integer, nullable=False)

    shipping_address = Column(JSON, nullable=False, default=dict)
    payment_method = Column(String, nullable=False)
    notes = Column(Text, nullable=True)

    whatsapp_message = Column(Text, nullable=True)
    whatsapp_sent = Column(Boolean, nullable=False, default=False)
    whatsapp_sent_at = Column(DateTime(timezone=True), nullable=True)

    # spozniony InsufficientStock przy dekrementacji
    needs_reconciliation = Column(Boolean, nullable=False, default=False)
    reconciliation_note = Column(Text, nullable=True)

    delivered_at = Column(DateTime(timezone=True), nullable=True)
    cancelled_at = Column(DateTime(timezone=True), nullable=True)
    cancellation_reason = Column(String(200), nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    items = relationship(
        "OrderItemModel",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItemModel.id",
    )


class OrderItemModel(Base):
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False)
    # bez FK - produkt moze zniknac z katalogu, snapshot zostaje
    product_id = Column(Integer, nullable=False)

    name = Column(String, nullable=False)
    price = Column(Integer, nullable=False)
    quantity = Column(Integer, nullable=False)
    line_total = Column(Integer, nullable=False)

    order = relationship("OrderModel", back_populates="items")
