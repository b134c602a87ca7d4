# app/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict, EmailStr
from typing import List
from decimal import Decimal
from datetime import datetime


# ----------------------------------------------------------------- users

class AddressIn(BaseModel):
    street: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    postal_code: str = Field(..., min_length=1)


class AddressOut(BaseModel):
    street: str | None = None
    city: str | None = None
    postal_code: str | None = None


class UserCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    phone_number: str | None = Field(None, pattern=r"^[0-9]{10}$")
    address: AddressIn | None = None


class UserRead(BaseModel):
    id: int
    name: str
    email: str
    phone_number: str | None = None
    address: AddressOut


# ------------------------------------------------------------------ cart

class CartItemIn(BaseModel):
    """Add to cart: quantity is added to any existing line."""

    product_id: int = Field(..., gt=0)
    variant_id: int = Field(..., gt=0)
    quantity: int = Field(1, description="Units to add (must be >= 1)")


class CartItemUpdate(BaseModel):
    product_id: int = Field(..., gt=0)
    variant_id: int = Field(..., gt=0)
    quantity: int


class CartItemOut(BaseModel):
    product_id: int
    variant_id: int
    product_name: str
    color: str
    size: str
    quantity: int
    price_at_add_time: Decimal
    current_price: Decimal
    subtotal: Decimal


class CartOut(BaseModel):
    cart_id: int
    user_id: int
    items: List[CartItemOut]
    total: Decimal

    model_config = ConfigDict(from_attributes=True)


# -------------------------------------------------------------- checkout

class PaymentIntentOut(BaseModel):
    intent_id: str
    amount: Decimal
    amount_minor: int
    currency: str
    key_id: str


class VerifyPaymentIn(BaseModel):
    intent_id: str = Field(..., min_length=1)
    confirmation_id: str = Field(..., min_length=1)
    signature: str = Field(..., min_length=1)
    delivery_address: AddressIn | None = None


class VerifyPaymentOut(BaseModel):
    message: str
    order_id: int


# ---------------------------------------------------------------- orders

class OrderItemOut(BaseModel):
    product_id: int
    variant_id: int
    product_name: str
    color: str | None = None
    size: str | None = None
    unit_price: Decimal
    market_price: Decimal | None = None
    quantity: int
    subtotal: Decimal

    model_config = ConfigDict(from_attributes=True)


class PricingOut(BaseModel):
    items_total: Decimal
    tax_amount: Decimal
    shipping_fee: Decimal
    final_amount: Decimal


class OrderEventOut(BaseModel):
    type: str
    message: str | None = None
    actor: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PaymentOut(BaseModel):
    intent_id: str | None = None
    confirmation_id: str | None = None


class OrderOut(BaseModel):
    id: int
    user_id: int
    items: List[OrderItemOut]
    pricing: PricingOut
    current_status: str
    status_updated_at: datetime
    version: int
    payment: PaymentOut
    delivery_address: AddressOut
    events: List[OrderEventOut]
    created_at: datetime


class OrderStatusUpdate(BaseModel):
    status: str = Field(..., min_length=1)
    expected_version: int | None = Field(None, gt=0)


# --------------------------------------------------------------- contact

class ContactMessageIn(BaseModel):
    name: str = Field(..., min_length=2)
    email: EmailStr
    mobile: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    pincode: str = Field(..., min_length=1)


class BulkOrderIn(BaseModel):
    name: str = Field(..., min_length=2)
    email: EmailStr
    mobile: str = Field(..., min_length=1)
    organisation: str = Field(..., min_length=1)
    requirements: str = Field(..., min_length=1)
    pincode: str = Field(..., min_length=1)


class MessageOut(BaseModel):
    message: str
