from sqlalchemy import Column, Integer, ForeignKey, Numeric, UniqueConstraint, CheckConstraint
from sqlalchemy.orm import relationship

from app.data.database import Base


class CartItemModel(Base):
    __tablename__ = "cart_items"

    id = Column(Integer, primary_key=True)
    cart_id = Column(Integer, ForeignKey("carts.id", ondelete="CASCADE"), nullable=False)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False)
    variant_id = Column(Integer, ForeignKey("variants.id"), nullable=False)

    quantity = Column(Integer, nullable=False)
    price_at_add_time = Column(Numeric(10, 2), nullable=False)

    cart = relationship("CartModel", back_populates="items")
    product = relationship("ProductModel")
    variant = relationship("VariantModel")

    __table_args__ = (
        UniqueConstraint("cart_id", "product_id", "variant_id", name="u_cart_product_variant"),
        CheckConstraint("quantity >= 1", name="ck_cart_item_quantity"),
    )
