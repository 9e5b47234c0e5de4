# app/tasks/expire.py
from datetime import datetime, timezone

from app.celery_worker import celery_app
from app.data import database
from app.repos.offer_repo import OfferRepo
from app.utils.logging import get_logger

logger = get_logger(__name__)


@celery_app.task(name="app.tasks.expire.expire_offers_task")
def expire_offers_task():
    """Soft-disable ofert po validUntil (is_active=False), bez kasowania."""
    logger.info("Expire offers task started")

    db = database.SessionLocal()
    try:
        repo = OfferRepo(db)
        expired = repo.deactivate_expired(datetime.now(timezone.utc))
        repo.commit()

        logger.info(f"Deactivated {expired} expired offers")
        return expired
    finally:
        db.close()
