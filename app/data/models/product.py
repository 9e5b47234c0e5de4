# app/data/models/product.py
from sqlalchemy import Boolean, CheckConstraint, Column, Integer, String

from app.data.database import Base


class ProductModel(Base):
    """Wlasnosc katalogu - tutaj tylko odczyt i zmniejszanie stanu."""

    __tablename__ = "products"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)

    # grosze / jednostki minimalne waluty
    price = Column(Integer, nullable=False)
    stock = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)

    __table_args__ = (
        CheckConstraint("stock >= 0", name="ck_product_stock_non_negative"),
        CheckConstraint("price >= 0", name="ck_product_price_non_negative"),
    )
