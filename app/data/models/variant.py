from sqlalchemy import Column, Integer, ForeignKey, String, Numeric, CheckConstraint
from sqlalchemy.orm import relationship

from app.data.database import Base


class VariantModel(Base):
    __tablename__ = "variants"

    id = Column(Integer, primary_key=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False, index=True)

    color = Column(String, nullable=False)
    size = Column(String, nullable=False)
    selling_price = Column(Numeric(10, 2), nullable=False)
    market_price = Column(Numeric(10, 2), nullable=False)
    stock_qty = Column(Integer, nullable=False, default=0)
    sku = Column(String, nullable=True, unique=True)

    product = relationship("ProductModel", back_populates="variants")

    __table_args__ = (
        CheckConstraint("stock_qty >= 0", name="ck_variant_stock_non_negative"),
        CheckConstraint("selling_price >= 0", name="ck_variant_selling_price"),
        CheckConstraint("market_price >= 0", name="ck_variant_market_price"),
    )
