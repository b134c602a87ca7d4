# app/services/notification_service.py
from app.celery_worker import celery_app
from app.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationService:
    """
    Order notifications, processed asynchronously by Celery.

    Called after the order transaction has committed; a broker outage
    must not turn a completed checkout into an error response.
    """

    @staticmethod
    def send_order_booked(user_id: int, order_id: int):
        try:
            send_order_booked_task.delay(user_id, order_id)
        except Exception as e:
            logger.warning(f"Could not enqueue booked notification for order {order_id}: {e}")

    @staticmethod
    def send_status_changed(user_id: int, order_id: int, status: str):
        try:
            send_order_status_task.delay(user_id, order_id, status)
        except Exception as e:
            logger.warning(f"Could not enqueue status notification for order {order_id}: {e}")


@celery_app.task(name="app.services.notification_service.send_order_booked_task")
def send_order_booked_task(user_id: int, order_id: int):
    # no mail/SMS transport yet, log only
    logger.info(f"[NOTIFICATION] User {user_id}: Order {order_id} booked")
    return {"user_id": user_id, "order_id": order_id, "status": "sent"}


@celery_app.task(name="app.services.notification_service.send_order_status_task")
def send_order_status_task(user_id: int, order_id: int, status: str):
    logger.info(f"[NOTIFICATION] User {user_id}: Order {order_id} is now {status}")
    return {"user_id": user_id, "order_id": order_id, "order_status": status, "status": "sent"}
