"""
Order pricing

Order VAT accumulates the unrounded unit_price * quantity * vat_rate / 100 of
every line and is rounded half-up to cents once. Each line also keeps its own
rounded vat_amount for display, so line VAT can differ from total_vat by a
cent on orders with many fractional lines. grand_total always equals
subtotal + delivery_cost + total_vat exactly.
"""

from dataclasses import dataclass, field
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, List, Optional

from bizhub.core.config import settings

CENT = Decimal("0.01")


def to_money(value) -> Decimal:
    return Decimal(str(value or 0)).quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass
class LinePrice:
    quantity: int
    unit_price: Decimal
    vat_rate: Decimal
    line_subtotal: Decimal
    vat_amount: Decimal
    vat_exact: Decimal

    @property
    def line_total(self) -> Decimal:
        return self.line_subtotal + self.vat_amount


@dataclass
class OrderPrice:
    lines: List[LinePrice] = field(default_factory=list)
    subtotal: Decimal = Decimal("0.00")
    delivery_cost: Decimal = Decimal("0.00")
    total_vat: Decimal = Decimal("0.00")

    @property
    def grand_total(self) -> Decimal:
        return self.subtotal + self.delivery_cost + self.total_vat


def compute_line(quantity: int, unit_price, vat_rate) -> LinePrice:
    """Price one line: VAT = unit_price * quantity * vat_rate / 100"""
    unit_price = Decimal(str(unit_price))
    vat_rate = Decimal(str(vat_rate or 0))
    line_subtotal = to_money(unit_price * quantity)
    vat_exact = unit_price * quantity * vat_rate / Decimal("100")
    return LinePrice(
        quantity=quantity,
        unit_price=unit_price,
        vat_rate=vat_rate,
        line_subtotal=line_subtotal,
        vat_amount=to_money(vat_exact),
        vat_exact=vat_exact,
    )


def delivery_cost_for(
    subtotal: Decimal,
    free_threshold: Optional[Decimal] = None,
    flat_cost: Optional[Decimal] = None) -> Decimal:
    """Free delivery from the threshold up, flat cost below it"""
    threshold = settings.DELIVERY_FREE_THRESHOLD if free_threshold is None else free_threshold
    flat = settings.DELIVERY_FLAT_COST if flat_cost is None else flat_cost
    if subtotal >= threshold:
        return Decimal("0.00")
    return to_money(flat)


def summarize(
    lines: Iterable[LinePrice],
    free_threshold: Optional[Decimal] = None,
    flat_cost: Optional[Decimal] = None) -> OrderPrice:
    lines = list(lines)
    subtotal = sum((line.line_subtotal for line in lines), Decimal("0.00"))
    total_vat = to_money(sum((line.vat_exact for line in lines), Decimal("0")))
    return OrderPrice(
        lines=lines,
        subtotal=subtotal,
        delivery_cost=delivery_cost_for(subtotal, free_threshold, flat_cost),
        total_vat=total_vat,
    )
