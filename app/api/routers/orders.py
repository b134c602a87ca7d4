# app/api/routers/orders.py
from typing import List

from fastapi import APIRouter, Depends, Query, Response

from app.api.deps import get_checkout_service, get_contact_service, get_order_service
from app.domain.schemas import (
    BulkOrderIn,
    ContactMessageIn,
    MessageOut,
    OrderOut,
    PaymentIntentOut,
    VerifyPaymentIn,
    VerifyPaymentOut,
)
from app.services.checkout_service import CheckoutService
from app.services.contact_service import ContactService
from app.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["orders"])


@router.post("/payment-intent", response_model=PaymentIntentOut, status_code=201)
def create_payment_intent(
    user_id: int = Query(..., gt=0),
    svc: CheckoutService = Depends(get_checkout_service),
):
    """Price the cart and open a payment intent on the gateway."""
    return svc.create_payment_intent(user_id)


@router.post("/verify-payment", response_model=VerifyPaymentOut)
def verify_payment(
    payload: VerifyPaymentIn,
    response: Response,
    user_id: int = Query(..., gt=0),
    svc: CheckoutService = Depends(get_checkout_service),
):
    """
    Turn a completed payment into an order. Repeating the call with the
    same confirmation id returns the first order (200 instead of 201).
    """
    result = svc.verify_payment(
        user_id=user_id,
        intent_id=payload.intent_id,
        confirmation_id=payload.confirmation_id,
        signature=payload.signature,
        delivery_address=payload.delivery_address.model_dump() if payload.delivery_address else None,
    )
    if result["created"]:
        response.status_code = 201
        return {"message": "Order booked successfully", "order_id": result["order_id"]}
    return {"message": "Order already booked", "order_id": result["order_id"]}


@router.get("/my-orders", response_model=List[OrderOut])
def my_orders(
    user_id: int = Query(..., gt=0),
    svc: OrderService = Depends(get_order_service),
):
    return svc.list_user_orders(user_id)


@router.get("/{order_id}", response_model=OrderOut)
def get_order(
    order_id: int,
    user_id: int = Query(..., gt=0),
    svc: OrderService = Depends(get_order_service),
):
    return svc.get_order(order_id, user_id)


@router.post("/contact", response_model=MessageOut, status_code=201)
def contact_us(payload: ContactMessageIn, svc: ContactService = Depends(get_contact_service)):
    svc.save_contact_message(payload)
    return {"message": "Message sent successfully"}


@router.post("/bulk-order", response_model=MessageOut, status_code=201)
def bulk_order(payload: BulkOrderIn, svc: ContactService = Depends(get_contact_service)):
    svc.save_bulk_order(payload)
    return {"message": "Message sent successfully"}
