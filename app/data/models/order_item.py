from sqlalchemy import Column, Integer, ForeignKey, String, Numeric
from sqlalchemy.orm import relationship

from app.data.database import Base


class OrderItemModel(Base):
    """Point-in-time copy of a cart line, decoupled from later catalog edits."""

    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(Integer, nullable=False)
    variant_id = Column(Integer, nullable=False)

    product_name = Column(String, nullable=False)
    color = Column(String, nullable=True)
    size = Column(String, nullable=True)
    unit_price = Column(Numeric(10, 2), nullable=False)
    market_price = Column(Numeric(10, 2), nullable=True)
    quantity = Column(Integer, nullable=False)
    subtotal = Column(Numeric(10, 2), nullable=False)

    order = relationship("OrderModel", back_populates="items")
