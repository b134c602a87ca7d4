# app/api/deps.py
import hmac

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from app.data.database import get_db
from app.domain.errors import AuthError
from app.services.cart_service import CartService
from app.services.checkout_service import CheckoutService
from app.services.contact_service import ContactService
from app.services.lock_service import LockService
from app.services.notification_service import NotificationService
from app.services.order_service import OrderService
from app.services.payment_gateway import PaymentGatewayClient
from app.services.user_service import UserService
from app.utils.settings import ADMIN_API_KEY


def get_lock_service() -> LockService:
    return LockService()


def get_payment_gateway() -> PaymentGatewayClient:
    return PaymentGatewayClient()


def get_notification_service() -> NotificationService:
    return NotificationService()


def get_cart_service(db: Session = Depends(get_db)) -> CartService:
    return CartService(db)


def get_checkout_service(
    db: Session = Depends(get_db),
    payment_gateway: PaymentGatewayClient = Depends(get_payment_gateway),
    lock_service: LockService = Depends(get_lock_service),
    notification_service: NotificationService = Depends(get_notification_service),
) -> CheckoutService:
    return CheckoutService(
        db=db,
        payment_gateway=payment_gateway,
        lock_service=lock_service,
        notification_service=notification_service,
    )


def get_order_service(
    db: Session = Depends(get_db),
    notification_service: NotificationService = Depends(get_notification_service),
) -> OrderService:
    return OrderService(db, notification_service=notification_service)


def get_user_service(db: Session = Depends(get_db)) -> UserService:
    return UserService(db)


def get_contact_service(db: Session = Depends(get_db)) -> ContactService:
    return ContactService(db)


def get_admin_key() -> str:
    return ADMIN_API_KEY


def require_admin(
    x_admin_key: str | None = Header(None),
    admin_key: str = Depends(get_admin_key),
) -> None:
    if not x_admin_key or not admin_key:
        raise AuthError("Admin credentials required")
    if not hmac.compare_digest(x_admin_key, admin_key):
        raise AuthError("Invalid admin credentials")
