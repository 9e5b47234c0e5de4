# app/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict
from typing import List, Literal, Optional
from decimal import Decimal
from datetime import datetime


class ItemIn(BaseModel):
    """Schema dla dodawania produktu do koszyka."""

    product_id: int = Field(..., gt=0, description="ID produktu (musi być > 0)")
    quantity: int = Field(1, gt=0, description="Ilość produktu (musi być > 0)")


class QuantityIn(BaseModel):
    """Schema dla zmiany ilości w koszyku."""

    quantity: int = Field(..., description="Nowa ilość (min. 1)")


class CartItemOut(BaseModel):
    """Schema dla produktu w koszyku (response)."""

    product_id: int
    quantity: int
    price: int
    line_total: int


class CartOut(BaseModel):
    """Schema dla koszyka (response)."""

    cart_id: int
    user_id: int
    version: int
    items: List[CartItemOut]
    item_count: int
    total_price: int
    updated_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class CartSummaryOut(BaseModel):
    item_count: int
    total_price: int
    items: List[CartItemOut]


class UserCreate(BaseModel):
    """Schema dla tworzenia użytkownika."""

    id: int = Field(..., gt=0, description="ID użytkownika (musi być > 0)")
    name: str = Field(..., min_length=1, max_length=100, description="Imię użytkownika")
    email: Optional[str] = Field(None, max_length=200)
    phone: Optional[str] = Field(None, max_length=20)


class UserRead(BaseModel):
    """Schema dla użytkownika (response)."""

    id: int
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class ShippingAddress(BaseModel):
    street: str = Field(..., min_length=5, max_length=200)
    city: str = Field(..., min_length=2, max_length=50)
    state: Optional[str] = Field(None, max_length=50)
    zip_code: Optional[str] = Field(None, max_length=20)
    country: Optional[str] = Field(None, max_length=50)
    phone: str = Field(..., min_length=10, max_length=15)


class CheckoutIn(BaseModel):
    """Dane dostawy dla checkoutu koszyka."""

    shipping_address: ShippingAddress
    # etykieta, bez integracji z bramka platnosci
    payment_method: str = Field("cash_on_delivery", min_length=1, max_length=50)
    notes: Optional[str] = Field(None, max_length=500)


class ClaimIn(BaseModel):
    offer_id: int = Field(..., gt=0)
    create_order: bool = False
    shipping_address: Optional[ShippingAddress] = None
    payment_method: str = Field("cash_on_delivery", min_length=1, max_length=50)
    notes: Optional[str] = Field(None, max_length=500)


class OfferClaimOut(BaseModel):
    user_id: int
    claimed_at: datetime

    model_config = ConfigDict(from_attributes=True)


class OfferOut(BaseModel):
    id: int
    title: str
    description: str
    discount_percent: Decimal
    product_ids: List[int]
    valid_from: datetime
    valid_until: datetime
    is_active: bool
    max_uses: Optional[int] = None
    used_count: int

    model_config = ConfigDict(from_attributes=True)


class OfferDetailOut(OfferOut):
    claimed_by: List[OfferClaimOut] = []


class OrderItemOut(BaseModel):
    product_id: int
    name: str
    price: int
    quantity: int
    line_total: int

    model_config = ConfigDict(from_attributes=True)


class OrderOut(BaseModel):
    """Schema dla zamówienia (response)."""

    id: int
    order_number: str
    user_id: int
    status: str
    source: str
    items: List[OrderItemOut]
    total_amount: int
    shipping_address: dict
    payment_method: str
    notes: Optional[str] = None
    whatsapp_message: Optional[str] = None
    whatsapp_sent: bool
    whatsapp_sent_at: Optional[datetime] = None
    needs_reconciliation: bool
    reconciliation_note: Optional[str] = None
    delivered_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None
    cancellation_reason: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CheckoutOut(BaseModel):
    order: OrderOut
    whatsapp_link: str
    whatsapp_message: str
    stock_warnings: List[dict] = []


class AddedProductOut(BaseModel):
    product_id: int
    name: Optional[str] = None
    added: bool
    price: Optional[int] = None
    reason: Optional[str] = None


class ClaimOut(BaseModel):
    outcome: Literal["claimed", "already_claimed", "partial_failure"]
    message: str
    offer_id: int
    added_products: List[AddedProductOut] = []
    order: Optional[OrderOut] = None
    whatsapp_link: Optional[str] = None
    whatsapp_message: Optional[str] = None
    stock_warnings: List[dict] = []
    error: Optional[dict] = None


class StatusUpdateIn(BaseModel):
    status: Literal["pending", "confirmed", "processing", "shipped", "delivered", "cancelled"]


class CancelIn(BaseModel):
    reason: str = Field(..., min_length=5, max_length=200)


class Pagination(BaseModel):
    current_page: int
    total_pages: int
    total_orders: int
    has_next_page: bool
    has_prev_page: bool


class OrderListOut(BaseModel):
    orders: List[OrderOut]
    pagination: Pagination


class OrderStatsOut(BaseModel):
    total_orders: int
    status_breakdown: dict
    total_revenue: int


class MessageOut(BaseModel):
    whatsapp_link: str
    whatsapp_message: str
