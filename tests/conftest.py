"""Pytest configuration: in-memory SQLite, fake lock/gateway, mocked notifications."""

import os

# must be set before any app module reads settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ADMIN_API_KEY"] = "test-admin-key"
os.environ["PAYMENT_KEY_ID"] = "key_test"
os.environ["PAYMENT_KEY_SECRET"] = "secret_test"
os.environ["SHIPPING_FEE"] = "49.00"
os.environ["CHECKOUT_PRICE_SOURCE"] = "current"
os.environ["STRICT_STATUS_TRANSITIONS"] = "false"

from decimal import Decimal
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

import app.data.models  # noqa: F401
from app.api import deps
from app.data.database import Base, SessionLocal, engine
from app.data.models import CartItemModel, CartModel, ProductModel, UserModel, VariantModel
from app.main import app as fastapi_app
from app.services.lock_service import LockService
from app.services.notification_service import NotificationService
from app.services.payment_gateway import PaymentGatewayClient, compute_signature

SECRET = "secret_test"


class FakeLockService(LockService):
    """In-process stand-in for the Redis lock, same acquire/release contract."""

    def __init__(self, ttl: int = 30):
        self.ttl = ttl
        self.locks = {}
        self.acquired = []

    def acquire_checkout_lock(self, confirmation_id, token, ttl):
        key = self._key(confirmation_id)
        if key in self.locks:
            return False
        self.locks[key] = token
        self.acquired.append(confirmation_id)
        return True

    def release_checkout_lock(self, confirmation_id, token):
        key = self._key(confirmation_id)
        if self.locks.get(key) == token:
            del self.locks[key]
            return True
        return False


class FakePaymentGateway(PaymentGatewayClient):
    def __init__(self):
        super().__init__(base_url="http://gateway.test", key_id="key_test", key_secret=SECRET)
        self.created = []

    def create_intent(self, amount, currency, receipt):
        self.created.append({"amount": amount, "currency": currency, "receipt": receipt})
        return {"id": f"order_test_{len(self.created)}", "amount": amount, "currency": currency}


def sign(intent_id: str, confirmation_id: str) -> str:
    return compute_signature(SECRET, intent_id, confirmation_id)


@pytest.fixture(autouse=True)
def _fresh_schema():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def lock_service():
    return FakeLockService()


@pytest.fixture
def gateway():
    return FakePaymentGateway()


@pytest.fixture
def notifier():
    return MagicMock(spec=NotificationService)


@pytest.fixture
def client(lock_service, gateway, notifier):
    fastapi_app.dependency_overrides[deps.get_lock_service] = lambda: lock_service
    fastapi_app.dependency_overrides[deps.get_payment_gateway] = lambda: gateway
    fastapi_app.dependency_overrides[deps.get_notification_service] = lambda: notifier
    yield TestClient(fastapi_app)
    fastapi_app.dependency_overrides.clear()


@pytest.fixture
def admin_headers():
    return {"X-Admin-Key": "test-admin-key"}


# ---------------------------------------------------------------------------
# data builders
# ---------------------------------------------------------------------------

def make_user(db, email="buyer@example.com", with_address=True) -> UserModel:
    user = UserModel(
        name="Buyer",
        email=email,
        phone_number="9876543210",
        street="12 MG Road" if with_address else None,
        city="Pune" if with_address else None,
        postal_code="411001" if with_address else None,
    )
    db.add(user)
    db.commit()
    return user


def make_variant(db, name="Product A", price="100.00", stock=5, color="Red", size="M", sku=None) -> VariantModel:
    product = ProductModel(name=name, description=f"{name} description", material="Cotton")
    variant = VariantModel(
        color=color,
        size=size,
        selling_price=Decimal(price),
        market_price=Decimal(price) + Decimal("50.00"),
        stock_qty=stock,
        sku=sku,
    )
    product.variants.append(variant)
    db.add(product)
    db.commit()
    return variant


def put_in_cart(db, user, variant, quantity, price=None) -> CartModel:
    cart = db.query(CartModel).filter_by(user_id=user.id).one_or_none()
    if cart is None:
        cart = CartModel(user_id=user.id)
        db.add(cart)
        db.flush()
    db.add(
        CartItemModel(
            cart_id=cart.id,
            product_id=variant.product_id,
            variant_id=variant.id,
            quantity=quantity,
            price_at_add_time=Decimal(price) if price is not None else variant.selling_price,
        )
    )
    db.commit()
    return cart


def stock_of(db, variant_id) -> int:
    db.expire_all()
    return db.get(VariantModel, variant_id).stock_qty
