from datetime import datetime, timedelta, timezone

from app.data.models.offer import OfferModel
from app.data.models.product import ProductModel
from app.data.seed import seed
from app.services.notification_service import NotificationService, send_order_notification_task
from app.tasks.expire import expire_offers_task


def test_expire_offers_deactivates_only_past_offers(db, make_offer):
    now = datetime.now(timezone.utc)
    live = make_offer()
    stale = make_offer(valid_from=now - timedelta(days=9), valid_until=now - timedelta(hours=1))

    assert expire_offers_task() == 1

    db.expire_all()
    assert db.get(OfferModel, live.id).is_active is True
    assert db.get(OfferModel, stale.id).is_active is False


def test_notification_task_returns_payload():
    result = send_order_notification_task(1, 10, "EA20260101000000001")

    assert result == {
        "user_id": 1,
        "order_id": 10,
        "order_number": "EA20260101000000001",
        "status": "logged",
    }


def test_notification_service_runs_task_eagerly():
    # CELERY_TASK_ALWAYS_EAGER=1 - bez brokera
    NotificationService.send_order_notification(1, 10, "EA20260101000000001")


def test_seed_only_fills_empty_database(db):
    assert seed(db) is True
    assert db.query(ProductModel).count() == 4

    assert seed(db) is False
    assert db.query(ProductModel).count() == 4
