from sqlalchemy import select, update
from sqlalchemy.orm import Session, selectinload

from app.data.models.order import OrderModel
from app.data.models.order_event import OrderEventModel


class OrderRepo:
    def __init__(self, db: Session):
        self.db = db

    def add_order(self, order: OrderModel) -> OrderModel:
        # caller owns the transaction
        self.db.add(order)
        self.db.flush()
        return order

    def get_order(self, order_id: int) -> OrderModel | None:
        return self.db.execute(
            select(OrderModel)
            .where(OrderModel.id == order_id)
            .options(selectinload(OrderModel.items), selectinload(OrderModel.events))
        ).scalar_one_or_none()

    def find_by_confirmation(self, confirmation_id: str):
        """Return (order_id, user_id) for a payment confirmation id, or None."""
        return self.db.execute(
            select(OrderModel.id, OrderModel.user_id)
            .where(OrderModel.payment_confirmation_id == confirmation_id)
        ).one_or_none()

    def list_orders_by_user(self, user_id: int) -> list[OrderModel]:
        return list(
            self.db.execute(
                select(OrderModel)
                .where(OrderModel.user_id == user_id)
                .options(selectinload(OrderModel.items), selectinload(OrderModel.events))
                .order_by(OrderModel.created_at.desc(), OrderModel.id.desc())
            ).scalars().all()
        )

    def list_all_orders(self) -> list[OrderModel]:
        return list(
            self.db.execute(
                select(OrderModel)
                .options(selectinload(OrderModel.items), selectinload(OrderModel.events))
                .order_by(OrderModel.created_at.desc(), OrderModel.id.desc())
            ).scalars().all()
        )

    def update_order_version(self, order_id: int, old_version: int, new_data: dict) -> int:
        # e.g. update orders set ... where id = 1 and version = 3
        res = self.db.execute(
            update(OrderModel)
            .where(OrderModel.id == order_id, OrderModel.version == old_version)
            .values(**new_data)
            .execution_options(synchronize_session=False)
        )
        return res.rowcount

    def add_event(self, event: OrderEventModel) -> None:
        self.db.add(event)
        self.db.flush()

    def delete_order(self, order: OrderModel) -> None:
        self.db.delete(order)
        self.db.commit()

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
