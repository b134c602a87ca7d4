# app/services/checkout_service.py
import uuid
from datetime import datetime, timezone
from decimal import Decimal
from typing import Dict, Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.data.models.order import OrderModel
from app.data.models.order_item import OrderItemModel
from app.data.models.order_event import OrderEventModel
from app.data.models.payment_intent import PaymentIntentModel
from app.domain.errors import (
    EmptyCartError,
    ForbiddenError,
    InsufficientStockError,
    PaymentVerificationError,
    ValidationError,
)
from app.domain.order_status import OrderStatus, EventActor
from app.domain.pricing import build_pricing, items_total, money, to_minor_units, unit_price
from app.repos.cart_repo import CartRepo
from app.repos.catalog_repo import CatalogRepo
from app.repos.order_repo import OrderRepo
from app.repos.payment_intent_repo import PaymentIntentRepo
from app.repos.user_repo import UserRepo
from app.services.lock_service import LockService
from app.services.notification_service import NotificationService
from app.services.payment_gateway import PaymentGatewayClient
from app.utils.settings import CHECKOUT_PRICE_SOURCE, PAYMENT_CURRENCY, SHIPPING_FEE
from app.utils.logging import get_logger

logger = get_logger(__name__)


class CheckoutService:
    """
    Cart -> payment intent -> verified payment -> order.

    verify_payment is all-or-nothing: stock decrements, the order insert
    and emptying the cart are committed in a single transaction, and each
    decrement is a conditional update so stock can never go negative even
    when two checkouts race for the same variant.
    """

    def __init__(
        self,
        db: Session,
        payment_gateway: PaymentGatewayClient,
        lock_service: LockService,
        notification_service: NotificationService | None = None,
        price_source: str = CHECKOUT_PRICE_SOURCE,
        shipping_fee: Decimal = SHIPPING_FEE,
        currency: str = PAYMENT_CURRENCY,
    ):
        self.carts = CartRepo(db)
        self.catalog = CatalogRepo(db)
        self.orders = OrderRepo(db)
        self.intents = PaymentIntentRepo(db)
        self.users = UserRepo(db)
        self.payment_gateway = payment_gateway
        self.lock_service = lock_service
        self.notification_service = notification_service or NotificationService()
        self.price_source = price_source
        self.shipping_fee = shipping_fee
        self.currency = currency

    def _non_empty_cart(self, user_id: int):
        cart = self.carts.get_cart_by_user(user_id)
        if not cart or not cart.items:
            raise EmptyCartError()
        return cart

    def _price_cart(self, cart) -> dict:
        return build_pricing(items_total(cart.items, self.price_source), self.shipping_fee)

    def create_payment_intent(self, user_id: int) -> Dict[str, Any]:
        """
        Price the cart, open a payment order on the gateway and record it
        so verification can check that the paid amount still covers the cart.
        """
        cart = self._non_empty_cart(user_id)
        pricing = self._price_cart(cart)

        amount_minor = to_minor_units(pricing["final_amount"])
        receipt = f"cart_{cart.id}_{uuid.uuid4().hex[:8]}"
        intent = self.payment_gateway.create_intent(amount_minor, self.currency, receipt)

        self.intents.add_intent(
            PaymentIntentModel(
                intent_id=intent["id"],
                user_id=user_id,
                cart_id=cart.id,
                amount_minor=amount_minor,
                currency=self.currency,
            )
        )
        logger.info(f"Payment intent {intent['id']} issued for cart {cart.id}: {amount_minor} {self.currency}")

        return {
            "intent_id": intent["id"],
            "amount": pricing["final_amount"],
            "amount_minor": amount_minor,
            "currency": self.currency,
            "key_id": self.payment_gateway.key_id,
        }

    def _resolve_address(self, user_id: int, delivery_address: dict | None) -> dict:
        if delivery_address:
            return delivery_address

        user = self.users.get_user(user_id)
        address = {
            "street": user.street if user else None,
            "city": user.city if user else None,
            "postal_code": user.postal_code if user else None,
        }
        if not all(address.values()):
            raise ValidationError("Delivery address is required")
        return address

    def _existing_order_id(self, user_id: int, confirmation_id: str) -> int | None:
        row = self.orders.find_by_confirmation(confirmation_id)
        if row is None:
            return None
        order_id, owner_id = row
        if owner_id != user_id:
            raise ForbiddenError("Payment belongs to another user")
        return order_id

    def _issued_intent(self, user_id: int, intent_id: str) -> PaymentIntentModel:
        intent = self.intents.get_intent(intent_id)
        if intent is None or intent.user_id != user_id:
            logger.warning(f"Intent {intent_id} was not issued to user {user_id}")
            raise PaymentVerificationError()
        if self.intents.is_consumed(intent_id):
            logger.warning(f"Intent {intent_id} already paid for an order")
            raise PaymentVerificationError("Payment intent already used")
        return intent

    def _check_amount(self, intent: PaymentIntentModel, cart) -> None:
        amount_minor = to_minor_units(self._price_cart(cart)["final_amount"])
        if amount_minor != intent.amount_minor or intent.currency != self.currency:
            logger.warning(
                f"Cart {cart.id} now costs {amount_minor} {self.currency}, "
                f"intent {intent.intent_id} was for {intent.amount_minor} {intent.currency}"
            )
            raise PaymentVerificationError("Cart changed after payment was initiated")

    def verify_payment(
        self,
        user_id: int,
        intent_id: str,
        confirmation_id: str,
        signature: str,
        delivery_address: dict | None = None,
    ) -> Dict[str, Any]:
        """
        Returns {"order_id", "created"}; ``created`` is False when this
        confirmation id was already turned into an order earlier.
        The intent must have been issued to this user by
        create_payment_intent and still match the cart total.

        Raises PaymentVerificationError, EmptyCartError,
        InsufficientStockError, ValidationError.
        """
        if not self.payment_gateway.verify_signature(intent_id, confirmation_id, signature):
            logger.warning(f"Signature mismatch for intent {intent_id} (user {user_id})")
            raise PaymentVerificationError()

        with self.lock_service.checkout_lock(confirmation_id):
            existing_id = self._existing_order_id(user_id, confirmation_id)
            if existing_id is not None:
                logger.info(f"Confirmation {confirmation_id} already recorded as order {existing_id}")
                return {"order_id": existing_id, "created": False}

            intent = self._issued_intent(user_id, intent_id)
            cart = self._non_empty_cart(user_id)
            self._check_amount(intent, cart)
            address = self._resolve_address(user_id, delivery_address)

            try:
                order = self._place_order(user_id, cart, intent_id, confirmation_id, address)
            except IntegrityError:
                # unique confirmation id: a parallel request got there first
                existing_id = self._existing_order_id(user_id, confirmation_id)
                if existing_id is None:
                    raise
                return {"order_id": existing_id, "created": False}

        self.notification_service.send_order_booked(user_id, order.id)
        return {"order_id": order.id, "created": True}

    def _place_order(self, user_id, cart, intent_id, confirmation_id, address) -> OrderModel:
        try:
            # fixed lock order across concurrent checkouts
            for item in sorted(cart.items, key=lambda i: i.variant_id):
                if not self.catalog.decrement_stock_if_available(item.variant_id, item.quantity):
                    logger.warning(
                        f"Insufficient stock for variant {item.variant_id} "
                        f"(requested {item.quantity}, cart {cart.id})"
                    )
                    raise InsufficientStockError(item.product.name, item.quantity)

            order_items = []
            for item in cart.items:
                price = unit_price(item, self.price_source)
                order_items.append(
                    OrderItemModel(
                        product_id=item.product_id,
                        variant_id=item.variant_id,
                        product_name=item.product.name,
                        color=item.variant.color,
                        size=item.variant.size,
                        unit_price=price,
                        market_price=money(item.variant.market_price),
                        quantity=item.quantity,
                        subtotal=price * item.quantity,
                    )
                )

            pricing = build_pricing(sum((i.subtotal for i in order_items), Decimal("0.00")), self.shipping_fee)
            now = datetime.now(timezone.utc)

            order = OrderModel(
                user_id=user_id,
                items=order_items,
                current_status=OrderStatus.BOOKED.value,
                status_updated_at=now,
                version=1,
                payment_intent_id=intent_id,
                payment_confirmation_id=confirmation_id,
                street=address["street"],
                city=address["city"],
                postal_code=address["postal_code"],
                events=[
                    OrderEventModel(
                        type=OrderStatus.BOOKED.event_type,
                        message="Order booked successfully",
                        actor=EventActor.SYSTEM.value,
                        created_at=now,
                    )
                ],
                **pricing,
            )
            self.orders.add_order(order)
            self.carts.clear_cart(cart.id)
            self.orders.commit()
        except Exception as e:
            logger.error(f"Checkout for cart {cart.id} rolled back: {e}")
            self.orders.rollback()
            raise

        logger.info(
            f"Order {order.id} booked for user {user_id}: "
            f"{len(order_items)} lines, final amount {pricing['final_amount']}"
        )
        return order
