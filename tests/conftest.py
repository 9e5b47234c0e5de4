"""Pytest fixtures: SQLite w pamieci, Celery eager, katalog lokalny."""
import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["CELERY_TASK_ALWAYS_EAGER"] = "1"
os.environ["CELERY_BROKER_URL"] = "memory://"
os.environ["CELERY_RESULT_BACKEND"] = "cache+memory://"
os.environ["CATALOG_BACKEND"] = "local"

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from app.data.database import Base, SessionLocal, engine, get_db, init_db
from app.data.models.offer import OfferModel, OfferProductModel
from app.data.models.product import ProductModel
from app.data.models.user import UserModel
from app.main import app
from app.services.catalog import LocalCatalog


SHIPPING = {
    "street": "Rua da Missão 12",
    "city": "Luanda",
    "state": "Luanda",
    "zip_code": "1000",
    "country": "Angola",
    "phone": "244923000111",
}


@pytest.fixture
def db():
    init_db()
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    app.dependency_overrides[get_db] = lambda: db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def catalog(db) -> LocalCatalog:
    return LocalCatalog(db)


@pytest.fixture
def users(db):
    db.add_all([
        UserModel(id=1, name="Ana Silva", email="ana@example.com", phone="244923000111"),
        UserModel(id=2, name="João Costa", email="joao@example.com"),
    ])
    db.commit()


@pytest.fixture
def products(db, users):
    db.add_all([
        ProductModel(id=1, name="Keyboard", price=1000, stock=10, is_active=True),
        ProductModel(id=2, name="Mouse", price=500, stock=2, is_active=True),
        ProductModel(id=3, name="Old Monitor", price=3000, stock=5, is_active=False),
        ProductModel(id=4, name="Headset", price=2000, stock=0, is_active=True),
    ])
    db.commit()


@pytest.fixture
def make_offer(db, products):
    def _make(
        product_ids=(1,),
        discount=20,
        valid_from=None,
        valid_until=None,
        is_active=True,
        max_uses=10,
        used_count=0,
    ) -> OfferModel:
        now = datetime.now(timezone.utc)
        offer = OfferModel(
            title="Weekly deal",
            description="Discounted basket",
            discount_percent=Decimal(str(discount)),
            valid_from=valid_from or now - timedelta(days=1),
            valid_until=valid_until or now + timedelta(days=1),
            is_active=is_active,
            max_uses=max_uses,
            used_count=used_count,
            products=[OfferProductModel(product_id=pid, position=i) for i, pid in enumerate(product_ids)],
        )
        db.add(offer)
        db.commit()
        return offer

    return _make


def stock_of(db, product_id: int) -> int:
    db.expire_all()
    return db.get(ProductModel, product_id).stock
