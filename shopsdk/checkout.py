# shopsdk/checkout.py
from dataclasses import dataclass
from typing import Any, Dict, Iterable

DELIVERY_FEE = 50


@dataclass(frozen=True)
class CheckoutSummary:
    subtotal: float
    delivery: float
    total: float


def summarize(lines: Iterable[Dict[str, Any]], delivery_fee: float = DELIVERY_FEE) -> CheckoutSummary:
    """Order totals for the given cart lines; a flat delivery fee applies to any non-empty order."""
    subtotal = sum(line["price"] * line["quantity"] for line in lines)
    delivery = delivery_fee if subtotal > 0 else 0
    return CheckoutSummary(subtotal=subtotal, delivery=delivery, total=subtotal + delivery)
