# import every model so SQLAlchemy registers it on Base.metadata

from app.data.models.user import UserModel
from app.data.models.product import ProductModel
from app.data.models.variant import VariantModel
from app.data.models.cart import CartModel
from app.data.models.cart_item import CartItemModel
from app.data.models.order import OrderModel
from app.data.models.order_item import OrderItemModel
from app.data.models.order_event import OrderEventModel
from app.data.models.contact_message import ContactMessageModel
from app.data.models.payment_intent import PaymentIntentModel

__all__ = [
    "UserModel",
    "ProductModel",
    "VariantModel",
    "CartModel",
    "CartItemModel",
    "OrderModel",
    "OrderItemModel",
    "OrderEventModel",
    "ContactMessageModel",
    "PaymentIntentModel",
]
