# app/data/models/offer.py
from datetime import datetime, timezone

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from app.data.database import Base


class OfferModel(Base):
    __tablename__ = "offers"

    id = Column(Integer, primary_key=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=False, default="")

    discount_percent = Column(Numeric(5, 2), nullable=False)

    valid_from = Column(DateTime(timezone=True), nullable=False)
    valid_until = Column(DateTime(timezone=True), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)

    # None = bez limitu
    max_uses = Column(Integer, nullable=True)
    used_count = Column(Integer, nullable=False, default=0)

    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    products = relationship(
        "OfferProductModel",
        cascade="all, delete-orphan",
        order_by="OfferProductModel.position",
    )
    claims = relationship(
        "OfferClaimModel",
        back_populates="offer",
        order_by="OfferClaimModel.id",
    )

    __table_args__ = (
        CheckConstraint("discount_percent >= 0 AND discount_percent <= 100", name="ck_offer_discount_range"),
        CheckConstraint("valid_from <= valid_until", name="ck_offer_validity_window"),
    )

    @property
    def product_ids(self) -> list[int]:
        return [p.product_id for p in self.products]


class OfferProductModel(Base):
    __tablename__ = "offer_products"

    id = Column(Integer, primary_key=True)
    offer_id = Column(Integer, ForeignKey("offers.id", ondelete="CASCADE"), nullable=False)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False)
    position = Column(Integer, nullable=False, default=0)

    __table_args__ = (UniqueConstraint("offer_id", "product_id", name="u_offer_product"),)


class OfferClaimModel(Base):
    """Ledger claimow - append only, maks. jeden wpis na (oferta, user)."""

    __tablename__ = "offer_claims"

    id = Column(Integer, primary_key=True)
    offer_id = Column(Integer, ForeignKey("offers.id"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    claimed_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    offer = relationship("OfferModel", back_populates="claims")

    # atomowe "claim if absent" - drugi insert konczy sie IntegrityError
    __table_args__ = (UniqueConstraint("offer_id", "user_id", name="u_offer_claim_user"),)
