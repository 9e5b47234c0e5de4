# app/repos/offer_repo.py
from datetime import datetime

from sqlalchemy import or_, select, update
from sqlalchemy.orm import Session, selectinload

from app.data.models.offer import OfferClaimModel, OfferModel


class OfferRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_offer(self, offer_id: int) -> OfferModel | None:
        return self.db.execute(
            select(OfferModel)
            .where(OfferModel.id == offer_id)
            .options(selectinload(OfferModel.products), selectinload(OfferModel.claims))
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()

    def list_active_offers(self, now: datetime) -> list[OfferModel]:
        return list(
            self.db.execute(
                select(OfferModel)
                .where(
                    OfferModel.is_active.is_(True),
                    OfferModel.valid_from <= now,
                    OfferModel.valid_until >= now,
                )
                .options(selectinload(OfferModel.products))
                .order_by(OfferModel.created_at.desc(), OfferModel.id.desc())
            ).scalars().all()
        )

    def has_claimed(self, offer_id: int, user_id: int) -> bool:
        return self.db.execute(
            select(OfferClaimModel.id).where(
                OfferClaimModel.offer_id == offer_id,
                OfferClaimModel.user_id == user_id,
            )
        ).first() is not None

    def add_claim(self, claim: OfferClaimModel) -> None:
        # flush -> IntegrityError od razu, nie dopiero przy commit
        self.db.add(claim)
        self.db.flush()

    def increment_used_count(self, offer_id: int) -> int:
        """Atomowy inkrement z limitem: 0 wierszy = limit wyczerpany."""
        result = self.db.execute(
            update(OfferModel)
            .where(
                OfferModel.id == offer_id,
                or_(
                    OfferModel.max_uses.is_(None),
                    OfferModel.used_count < OfferModel.max_uses,
                ),
            )
            .values(used_count=OfferModel.used_count + 1)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def deactivate_expired(self, now: datetime) -> int:
        result = self.db.execute(
            update(OfferModel)
            .where(OfferModel.is_active.is_(True), OfferModel.valid_until < now)
            .values(is_active=False)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
