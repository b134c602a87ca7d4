from sqlalchemy import Column, Integer, ForeignKey, String, DateTime
from sqlalchemy.orm import relationship
from datetime import datetime, timezone

from app.data.database import Base
from app.domain.order_status import EventActor


class OrderEventModel(Base):
    __tablename__ = "order_events"

    id = Column(Integer, primary_key=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)

    type = Column(String, nullable=False)  # ORDER_BOOKED, ORDER_CONFIRMED, ...
    message = Column(String, nullable=True)
    actor = Column(String, nullable=False, default=EventActor.SYSTEM.value)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    order = relationship("OrderModel", back_populates="events")
