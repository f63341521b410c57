"""
Totals Engine - sum invoice line items and receipts for a travel group.

Pure functions with no I/O.

Usage:
    from decimal import Decimal
    from tour_engines.totals import InvoiceItem, calculate_invoice_total

    items = [
        InvoiceItem(price=Decimal("1000"), quantity=Decimal("2")),
        InvoiceItem(price=Decimal("500"), quantity=Decimal("3")),
    ]
    calculate_invoice_total(items)  # Decimal("3500")

Refund lines are summed with whatever sign ``price * quantity`` carries.
Sign normalization for refunds belongs to the bill pipeline
(``tour_engines.bill.calculate_invoice_item_price``), not to these totals.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Self

from tour_kernel.domain.values import ZERO, non_signaling, parse_amount, to_decimal
from tour_kernel.logging_config import get_logger

logger = get_logger("engines.totals")


@dataclass(frozen=True)
class InvoiceItem:
    """One invoice line: a unit price and a quantity (unparseable -> 0)."""

    price: Decimal
    quantity: Decimal

    def __post_init__(self) -> None:
        object.__setattr__(self, "price", parse_amount(self.price))
        object.__setattr__(self, "quantity", parse_amount(self.quantity))

    @property
    @non_signaling
    def amount(self) -> Decimal:
        return self.price * self.quantity

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> Self:
        return cls(price=data.get("price"), quantity=data.get("quantity"))


@dataclass(frozen=True)
class Receipt:
    """A receipt row; ``actual_amount`` may be missing (counts as zero)."""

    actual_amount: Decimal | None = None

    def __post_init__(self) -> None:
        if self.actual_amount is not None:
            object.__setattr__(self, "actual_amount", parse_amount(self.actual_amount))

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> Self:
        return cls(actual_amount=data.get("actualAmount", data.get("actual_amount")))


@non_signaling
def calculate_invoice_total(items: Iterable[InvoiceItem]) -> Decimal:
    """Sum of ``price * quantity`` over all items.  Empty input -> 0."""
    return sum((item.amount for item in items), ZERO)


@non_signaling
def calculate_receipt_total(receipts: Iterable[Receipt]) -> Decimal:
    """Sum of receipt actual amounts, treating missing amounts as 0."""
    return sum((to_decimal(r.actual_amount) for r in receipts), ZERO)


@non_signaling
def calculate_invoice_total_from_invoices(
    invoices: Iterable[Iterable[InvoiceItem] | None],
) -> Decimal:
    """
    Total across several invoices, each given as its own line items.

    An invoice with no line items (``None`` or empty) contributes 0.
    """
    total = ZERO
    invoice_count = 0
    for items in invoices:
        invoice_count += 1
        total += calculate_invoice_total(items or ())
    logger.debug("invoice_totals_summed", extra={
        "invoice_count": invoice_count,
        "invoice_total": str(total),
    })
    return total
