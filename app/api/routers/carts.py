#app/api/routers/carts.py
from fastapi import APIRouter, Depends, Query

from app.api.deps import get_cart_service
from app.domain.schemas import CartItemIn, CartItemUpdate, CartOut
from app.services.cart_service import CartService

router = APIRouter(prefix="/cart", tags=["cart"])


@router.get("/", response_model=CartOut)
def get_cart(
    user_id: int = Query(..., gt=0),
    svc: CartService = Depends(get_cart_service),
):
    return svc.get_cart(user_id)


@router.post("/items", response_model=CartOut)
def add_item(
    payload: CartItemIn,
    user_id: int = Query(..., gt=0),
    svc: CartService = Depends(get_cart_service),
):
    return svc.add_product(
        user_id=user_id,
        product_id=payload.product_id,
        variant_id=payload.variant_id,
        quantity=payload.quantity,
    )


@router.patch("/items", response_model=CartOut)
def update_item(
    payload: CartItemUpdate,
    user_id: int = Query(..., gt=0),
    svc: CartService = Depends(get_cart_service),
):
    return svc.update_quantity(
        user_id=user_id,
        product_id=payload.product_id,
        variant_id=payload.variant_id,
        quantity=payload.quantity,
    )


@router.delete("/items/{product_id}/{variant_id}", response_model=CartOut)
def remove_item(
    product_id: int,
    variant_id: int,
    user_id: int = Query(..., gt=0),
    svc: CartService = Depends(get_cart_service),
):
    return svc.remove_product(user_id, product_id, variant_id)
