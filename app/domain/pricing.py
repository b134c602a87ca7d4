# app/domain/pricing.py
from decimal import Decimal, ROUND_HALF_UP

ZERO = Decimal("0.00")
CENT = Decimal("0.01")

PRICE_SOURCE_CURRENT = "current"
PRICE_SOURCE_CART = "cart"


def money(value) -> Decimal:
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)


def unit_price(item, price_source: str = PRICE_SOURCE_CURRENT) -> Decimal:
    """Price charged per unit for a cart line."""
    if price_source == PRICE_SOURCE_CART:
        return money(item.price_at_add_time)
    return money(item.variant.selling_price)


def items_total(items, price_source: str = PRICE_SOURCE_CURRENT) -> Decimal:
    return sum((unit_price(i, price_source) * i.quantity for i in items), ZERO)


def build_pricing(total: Decimal, shipping_fee: Decimal) -> dict:
    # final amount is fixed here and stored, never recomputed
    total = money(total)
    shipping = money(shipping_fee)
    return {
        "items_total": total,
        "tax_amount": ZERO,
        "shipping_fee": shipping,
        "final_amount": total + shipping,
    }


def to_minor_units(amount: Decimal) -> int:
    return int((money(amount) * 100).to_integral_value())
