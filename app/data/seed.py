# app/data/seed.py
from datetime import datetime, timezone, timedelta
from decimal import Decimal

from app.data import database
from app.data.models.offer import OfferModel, OfferProductModel
from app.data.models.product import ProductModel
from app.data.models.user import UserModel
from app.utils.logging import get_logger

logger = get_logger(__name__)

PRODUCTS = [
    {"id": 1, "name": "Arroz 5kg", "price": 450000, "stock": 50},
    {"id": 2, "name": "Óleo de Soja 1L", "price": 120000, "stock": 80},
    {"id": 3, "name": "Detergente em Pó 1kg", "price": 95000, "stock": 30},
    {"id": 4, "name": "Sumo de Manga 1L", "price": 60000, "stock": 0},
]


def seed(db=None) -> bool:
    """Seed tylko gdy baza jest pusta. Zwraca True jesli cos dodano."""
    own_session = db is None
    db = db or database.SessionLocal()
    try:
        # not forcing: only seed if empty
        if db.query(ProductModel).first():
            return False

        now = datetime.now(timezone.utc)
        db.add(UserModel(id=1, name="Cliente Demo", email="demo@example.com", phone="244900000000"))
        db.add_all(ProductModel(is_active=True, **p) for p in PRODUCTS)
        db.flush()

        offer = OfferModel(
            title="Cesta Semanal",
            description="20% off the weekly basket",
            discount_percent=Decimal("20"),
            valid_from=now - timedelta(days=1),
            valid_until=now + timedelta(days=7),
            is_active=True,
            max_uses=100,
            used_count=0,
            products=[
                OfferProductModel(product_id=1, position=0),
                OfferProductModel(product_id=2, position=1),
            ],
        )
        db.add(offer)
        db.commit()

        logger.info(f"Seeded {len(PRODUCTS)} products and 1 offer")
        return True
    finally:
        if own_session:
            db.close()


if __name__ == "__main__":
    database.init_db()
    seed()
