# app/repos/order_repo.py
from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from app.data.models.order import OrderModel
from app.domain.order_status import OrderStatus


class OrderRepo:
    def __init__(self, db: Session):
        self.db = db

    def create_order(self, order: OrderModel) -> OrderModel:
        self.db.add(order)
        self.db.commit()
        self.db.refresh(order)
        return order

    def get_order(self, order_id: int) -> OrderModel | None:
        return self.db.execute(
            select(OrderModel)
            .where(OrderModel.id == order_id)
            .options(selectinload(OrderModel.items))
        ).scalar_one_or_none()

    def list_user_orders(
        self,
        user_id: int,
        page: int,
        limit: int,
        status: str | None = None,
    ) -> tuple[list[OrderModel], int]:
        query = select(OrderModel).where(OrderModel.user_id == user_id)
        count_query = select(func.count(OrderModel.id)).where(OrderModel.user_id == user_id)
        if status:
            query = query.where(OrderModel.status == status)
            count_query = count_query.where(OrderModel.status == status)

        orders = self.db.execute(
            query.options(selectinload(OrderModel.items))
            .order_by(OrderModel.created_at.desc(), OrderModel.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
        ).scalars().all()
        total = self.db.execute(count_query).scalar_one()
        return list(orders), total

    def count_by_status(self) -> dict[str, int]:
        rows = self.db.execute(
            select(OrderModel.status, func.count(OrderModel.id)).group_by(OrderModel.status)
        ).all()
        counts = {s.value: 0 for s in OrderStatus}
        counts.update({status: count for status, count in rows})
        return counts

    def total_revenue(self) -> int:
        return self.db.execute(
            select(func.coalesce(func.sum(OrderModel.total_amount), 0))
            .where(OrderModel.status != OrderStatus.CANCELLED.value)
        ).scalar_one()

    def rollback(self):
        self.db.rollback()

    def save(self, order: OrderModel) -> OrderModel:
        self.db.add(order)
        self.db.commit()
        self.db.refresh(order)
        return order
