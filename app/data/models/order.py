from sqlalchemy import Column, Integer, ForeignKey, String, DateTime, Numeric
from sqlalchemy.orm import relationship
from datetime import datetime, timezone

from app.data.database import Base
from app.domain.order_status import OrderStatus


def _now():
    return datetime.now(timezone.utc)


class OrderModel(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    # pricing snapshot, computed once at checkout
    items_total = Column(Numeric(10, 2), nullable=False)
    tax_amount = Column(Numeric(10, 2), nullable=False, default=0)
    shipping_fee = Column(Numeric(10, 2), nullable=False, default=0)
    final_amount = Column(Numeric(10, 2), nullable=False)

    current_status = Column(String, nullable=False, default=OrderStatus.BOOKED.value, index=True)
    status_updated_at = Column(DateTime(timezone=True), nullable=False, default=_now)
    version = Column(Integer, nullable=False, default=1)

    payment_intent_id = Column(String, nullable=True, index=True)
    payment_confirmation_id = Column(String, nullable=True, unique=True)

    street = Column(String, nullable=False)
    city = Column(String, nullable=False)
    postal_code = Column(String, nullable=False)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_now, index=True)

    items = relationship(
        "OrderItemModel",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItemModel.id",
    )
    events = relationship(
        "OrderEventModel",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderEventModel.id",
    )
