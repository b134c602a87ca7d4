from sqlalchemy import update
from sqlalchemy.orm import Session

from app.data.models.product import ProductModel
from app.data.models.variant import VariantModel


class CatalogRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_product(self, product_id: int) -> ProductModel | None:
        return self.db.get(ProductModel, product_id)

    def get_variant(self, variant_id: int) -> VariantModel | None:
        return self.db.get(VariantModel, variant_id)

    def decrement_stock_if_available(self, variant_id: int, quantity: int) -> bool:
        # conditional update: the check and the write are one statement
        res = self.db.execute(
            update(VariantModel)
            .where(
                VariantModel.id == variant_id,
                VariantModel.stock_qty >= quantity,
            )
            .values(stock_qty=VariantModel.stock_qty - quantity)
            .execution_options(synchronize_session=False)
        )
        return res.rowcount == 1
