from sqlalchemy import select, delete
from sqlalchemy.orm import Session, selectinload

from app.data.models.cart import CartModel
from app.data.models.cart_item import CartItemModel


class CartRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_cart_by_user(self, user_id: int) -> CartModel | None:
        return self.db.execute(
            select(CartModel)
            .where(CartModel.user_id == user_id)
            .options(
                selectinload(CartModel.items).selectinload(CartItemModel.product),
                selectinload(CartModel.items).selectinload(CartItemModel.variant),
            )
        ).scalar_one_or_none()

    def create_cart(self, cart: CartModel) -> CartModel:
        self.db.add(cart)
        self.db.commit()
        self.db.refresh(cart)
        return cart

    def get_cart_item(self, cart_id: int, product_id: int, variant_id: int) -> CartItemModel | None:
        return self.db.execute(
            select(CartItemModel).where(
                CartItemModel.cart_id == cart_id,
                CartItemModel.product_id == product_id,
                CartItemModel.variant_id == variant_id,
            )
        ).scalar_one_or_none()

    def add_cart_item(self, item: CartItemModel) -> None:
        self.db.add(item)
        self.db.flush()

    def delete_cart_item(self, cart_id: int, product_id: int, variant_id: int) -> int:
        res = self.db.execute(
            delete(CartItemModel).where(
                CartItemModel.cart_id == cart_id,
                CartItemModel.product_id == product_id,
                CartItemModel.variant_id == variant_id,
            )
        )
        return res.rowcount

    def clear_cart(self, cart_id: int) -> int:
        res = self.db.execute(delete(CartItemModel).where(CartItemModel.cart_id == cart_id))
        return res.rowcount

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
