# app/services/cart_service.py
from typing import Dict, Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.data.models.cart import CartModel
from app.data.models.cart_item import CartItemModel
from app.domain.errors import ConflictError, InvalidQuantityError, NotFoundError
from app.domain.pricing import items_total, money, unit_price
from app.repos.cart_repo import CartRepo
from app.repos.catalog_repo import CatalogRepo
from app.repos.user_repo import UserRepo
from app.utils.settings import CHECKOUT_PRICE_SOURCE
from app.utils.logging import get_logger

logger = get_logger(__name__)


def serialize_cart(cart: CartModel, price_source: str) -> Dict[str, Any]:
    return {
        "cart_id": cart.id,
        "user_id": cart.user_id,
        "items": [
            {
                "product_id": i.product_id,
                "variant_id": i.variant_id,
                "product_name": i.product.name,
                "color": i.variant.color,
                "size": i.variant.size,
                "quantity": i.quantity,
                "price_at_add_time": money(i.price_at_add_time),
                "current_price": money(i.variant.selling_price),
                "subtotal": unit_price(i, price_source) * i.quantity,
            }
            for i in cart.items
        ],
        "total": items_total(cart.items, price_source),
    }


class CartService:
    """
    Cart use cases. Commands (add, update, remove) change state,
    the query (get) only creates the cart lazily on first access.

    Stock is not checked or reserved here; that happens at checkout.
    """

    def __init__(self, db: Session, price_source: str = CHECKOUT_PRICE_SOURCE):
        self.repo = CartRepo(db)
        self.catalog = CatalogRepo(db)
        self.users = UserRepo(db)
        self.price_source = price_source

    def _get_or_create_cart(self, user_id: int) -> CartModel:
        cart = self.repo.get_cart_by_user(user_id)
        if cart:
            return cart

        if not self.users.get_user(user_id):
            raise NotFoundError("User not found")

        try:
            self.repo.create_cart(CartModel(user_id=user_id))
        except IntegrityError:
            # another request created it first
            self.repo.rollback()
        logger.info(f"Cart ready for user {user_id}")
        return self.repo.get_cart_by_user(user_id)

    # query
    def get_cart(self, user_id: int) -> Dict[str, Any]:
        cart = self._get_or_create_cart(user_id)
        return serialize_cart(cart, self.price_source)

    # commands
    def add_product(
        self,
        user_id: int,
        product_id: int,
        variant_id: int,
        quantity: int,
    ) -> Dict[str, Any]:
        if quantity < 1:
            raise InvalidQuantityError()

        product = self.catalog.get_product(product_id)
        variant = self.catalog.get_variant(variant_id)
        if not product or not variant or variant.product_id != product.id:
            raise NotFoundError("Product or Variant not found")

        cart = self._get_or_create_cart(user_id)
        existing_item = self.repo.get_cart_item(cart.id, product_id, variant_id)

        try:
            if existing_item:
                logger.info(
                    f"Variant {variant_id} already in cart {cart.id}, quantity "
                    f"{existing_item.quantity} -> {existing_item.quantity + quantity}"
                )
                existing_item.quantity += quantity
            else:
                logger.info(f"Adding variant {variant_id} of product {product_id} to cart {cart.id}")
                self.repo.add_cart_item(
                    CartItemModel(
                        cart_id=cart.id,
                        product_id=product_id,
                        variant_id=variant_id,
                        quantity=quantity,
                        price_at_add_time=variant.selling_price,
                    )
                )
            self.repo.commit()
        except IntegrityError:
            self.repo.rollback()
            raise ConflictError("Cart was modified by another operation, retry")

        return self.get_cart(user_id)

    def update_quantity(
        self,
        user_id: int,
        product_id: int,
        variant_id: int,
        quantity: int,
    ) -> Dict[str, Any]:
        if quantity < 1:
            raise InvalidQuantityError()

        cart = self._get_or_create_cart(user_id)
        item = self.repo.get_cart_item(cart.id, product_id, variant_id)
        if not item:
            raise NotFoundError("Item not in cart")

        item.quantity = quantity
        self.repo.commit()

        logger.info(f"Cart {cart.id}: variant {variant_id} quantity set to {quantity}")
        return self.get_cart(user_id)

    def remove_product(self, user_id: int, product_id: int, variant_id: int) -> Dict[str, Any]:
        cart = self._get_or_create_cart(user_id)

        removed = self.repo.delete_cart_item(cart.id, product_id, variant_id)
        self.repo.commit()

        if removed:
            logger.info(f"Removed variant {variant_id} of product {product_id} from cart {cart.id}")
        return self.get_cart(user_id)
