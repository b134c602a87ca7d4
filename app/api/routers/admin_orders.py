# app/api/routers/admin_orders.py
from typing import List

from fastapi import APIRouter, Depends

from app.api.deps import get_order_service, require_admin
from app.domain.schemas import MessageOut, OrderOut, OrderStatusUpdate
from app.services.order_service import OrderService

router = APIRouter(
    prefix="/admin/orders",
    tags=["admin"],
    dependencies=[Depends(require_admin)],
)


@router.get("/", response_model=List[OrderOut])
def all_orders(svc: OrderService = Depends(get_order_service)):
    return svc.list_all_orders()


@router.patch("/{order_id}/status", response_model=OrderOut)
def update_status(
    order_id: int,
    payload: OrderStatusUpdate,
    svc: OrderService = Depends(get_order_service),
):
    return svc.update_status(order_id, payload.status, payload.expected_version)


@router.delete("/{order_id}", response_model=MessageOut)
def delete_order(order_id: int, svc: OrderService = Depends(get_order_service)):
    svc.delete_order(order_id)
    return {"message": "Order deleted successfully"}
