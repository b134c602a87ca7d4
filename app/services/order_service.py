# app/services/order_service.py
from datetime import datetime, timezone
from typing import Dict, Any, List

from sqlalchemy.orm import Session

from app.data.models.order import OrderModel
from app.data.models.order_event import OrderEventModel
from app.domain.errors import ConflictError, ForbiddenError, InvalidStatusError, NotFoundError
from app.domain.order_status import OrderStatus, EventActor, is_allowed_transition
from app.repos.order_repo import OrderRepo
from app.services.notification_service import NotificationService
from app.utils.settings import STRICT_STATUS_TRANSITIONS
from app.utils.logging import get_logger

logger = get_logger(__name__)


def serialize_order(order: OrderModel) -> Dict[str, Any]:
    return {
        "id": order.id,
        "user_id": order.user_id,
        "items": [
            {
                "product_id": i.product_id,
                "variant_id": i.variant_id,
                "product_name": i.product_name,
                "color": i.color,
                "size": i.size,
                "unit_price": i.unit_price,
                "market_price": i.market_price,
                "quantity": i.quantity,
                "subtotal": i.subtotal,
            }
            for i in order.items
        ],
        "pricing": {
            "items_total": order.items_total,
            "tax_amount": order.tax_amount,
            "shipping_fee": order.shipping_fee,
            "final_amount": order.final_amount,
        },
        "current_status": order.current_status,
        "status_updated_at": order.status_updated_at,
        "version": order.version,
        "payment": {
            "intent_id": order.payment_intent_id,
            "confirmation_id": order.payment_confirmation_id,
        },
        "delivery_address": {
            "street": order.street,
            "city": order.city,
            "postal_code": order.postal_code,
        },
        "events": [
            {"type": e.type, "message": e.message, "actor": e.actor, "created_at": e.created_at}
            for e in order.events
        ],
        "created_at": order.created_at,
    }


class OrderService:
    """
    Order queries and the admin-side commands (status change, delete).
    Orders themselves are created by CheckoutService.
    """

    def __init__(
        self,
        db: Session,
        notification_service: NotificationService | None = None,
        strict_transitions: bool = STRICT_STATUS_TRANSITIONS,
    ):
        self.repo = OrderRepo(db)
        self.notification_service = notification_service or NotificationService()
        self.strict_transitions = strict_transitions

    def _get_or_404(self, order_id: int) -> OrderModel:
        order = self.repo.get_order(order_id)
        if not order:
            raise NotFoundError("Order not found")
        return order

    def get_order(self, order_id: int, user_id: int) -> Dict[str, Any]:
        order = self._get_or_404(order_id)
        if order.user_id != user_id:
            raise ForbiddenError("Access to this order is denied")
        return serialize_order(order)

    def list_user_orders(self, user_id: int) -> List[Dict[str, Any]]:
        return [serialize_order(o) for o in self.repo.list_orders_by_user(user_id)]

    def list_all_orders(self) -> List[Dict[str, Any]]:
        return [serialize_order(o) for o in self.repo.list_all_orders()]

    def update_status(
        self,
        order_id: int,
        status: str,
        expected_version: int | None = None,
    ) -> Dict[str, Any]:
        """
        Move an order to one of the five fulfilment statuses and append
        an ADMIN event. Without strict transitions any status may follow
        any other; the write is guarded by the order version either way.
        """
        new_status = OrderStatus.parse(status)
        if new_status is None:
            raise InvalidStatusError()

        order = self._get_or_404(order_id)

        if expected_version is not None and expected_version != order.version:
            raise ConflictError("Order was modified by another operation")

        current = OrderStatus(order.current_status)
        if not is_allowed_transition(current, new_status, self.strict_transitions):
            raise InvalidStatusError(f"Cannot move order from {current.value} to {new_status.value}")

        now = datetime.now(timezone.utc)
        rowcount = self.repo.update_order_version(
            order_id=order.id,
            old_version=order.version,
            new_data={
                "current_status": new_status.value,
                "status_updated_at": now,
                "version": order.version + 1,
            },
        )
        if rowcount == 0:
            self.repo.rollback()
            raise ConflictError("Order was modified by another operation")

        self.repo.add_event(
            OrderEventModel(
                order_id=order.id,
                type=new_status.event_type,
                message=f"Order marked as {new_status.value}",
                actor=EventActor.ADMIN.value,
                created_at=now,
            )
        )
        self.repo.commit()

        logger.info(f"Order {order_id}: {current.value} -> {new_status.value}")
        self.notification_service.send_status_changed(order.user_id, order.id, new_status.value)

        return serialize_order(self._get_or_404(order_id))

    def delete_order(self, order_id: int) -> None:
        order = self._get_or_404(order_id)
        owner_id = order.user_id
        self.repo.delete_order(order)
        logger.warning(f"Order {order_id} of user {owner_id} deleted by admin")
