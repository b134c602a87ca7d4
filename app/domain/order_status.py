# app/domain/order_status.py
from enum import Enum


class OrderStatus(str, Enum):
    BOOKED = "BOOKED"
    CONFIRMED = "CONFIRMED"
    PACKED = "PACKED"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"

    @property
    def event_type(self) -> str:
        return f"ORDER_{self.value}"

    @classmethod
    def parse(cls, value: str) -> "OrderStatus | None":
        try:
            return cls(value)
        except ValueError:
            return None


class EventActor(str, Enum):
    SYSTEM = "SYSTEM"
    ADMIN = "ADMIN"


# position in the fulfilment sequence
_SEQUENCE = list(OrderStatus)

# strict mode: forward moves only, skipping steps allowed
FORWARD_TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    status: frozenset(_SEQUENCE[i + 1:]) for i, status in enumerate(_SEQUENCE)
}


def is_allowed_transition(current: OrderStatus, new: OrderStatus, strict: bool) -> bool:
    if not strict:
        return True
    return new in FORWARD_TRANSITIONS[current]
