"""
Bill Engine - reshape invoice lines into payee batches for a disbursement bill.

Pure functions with deterministic behavior. No I/O.

Pipeline (``process_bill_invoices``):

    1. process  -- one ProcessedInvoiceItem per invoice line, with the payee,
                   creator and note resolved to display strings and the price
                   sign-normalized for refund lines
    2. group    -- bucket by payee display name, first-seen order
    3. merge    -- within a payee, fold lines sharing an invoice number
                   (notes joined with "、", prices summed) and total the payee
    4. split    -- chunk payees with more than ``max_group_size`` invoices;
                   only the first chunk carries the payee total, later chunks
                   have ``total == 0`` and ``hidden_total == True``
    5. sort     -- by payee display name, stable so chunks keep their order

Because continuation chunks carry a zero total, summing ``total`` over the
whole output (``calculate_bill_total_amount``) counts each payee exactly
once.  Renderers must not display the total of a ``hidden_total`` chunk.

No exception is raised for a malformed row: an unparseable price, quantity
or type code counts as 0, and NaN or infinite amounts are computed with.

Name lookups are injected as plain callables.  Whatever they raise
propagates to the caller unchanged.

Usage:
    from tour_engines.bill import BillInvoice, PaymentLabels, process_bill_invoices

    groups = process_bill_invoices(
        invoices,
        resolve_employee_name=employees.get_name,
        resolve_supplier_name=suppliers.get_name,
        resolve_invoice_type_name=invoice_item_type_name,
        refund_type_code=9,
        payment_labels=PaymentLabels("Customer refund", "Foreign currency payment"),
    )
"""

from __future__ import annotations

import time
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass, replace
from decimal import Decimal
from enum import Enum
from typing import Any, Self

from tour_engines.tracer import traced_engine
from tour_kernel.domain.values import ZERO, non_signaling, parse_amount, parse_code, to_decimal
from tour_kernel.logging_config import get_logger

logger = get_logger("engines.bill")

NOTE_SEPARATOR = "、"
DEFAULT_MAX_GROUP_SIZE = 5


# ============================================================================
# Payee
# ============================================================================


class PayeeKind(str, Enum):
    """Who an invoice line pays."""

    CUSTOMER = "customer"  # refund to the customer
    FOREIGN = "foreign"  # foreign currency payment
    SUPPLIER = "supplier"


@dataclass(frozen=True)
class Payee:
    """
    Recipient of an invoice line.

    Persisted rows store the payee as a string: either one of the reserved
    tokens ``"customer"`` / ``"foreign"`` or a supplier id.  ``parse`` turns
    that string into a tagged value so the processor dispatches on kind
    rather than comparing magic strings.
    """

    kind: PayeeKind
    supplier_id: str = ""

    @classmethod
    def customer(cls) -> Self:
        return cls(PayeeKind.CUSTOMER)

    @classmethod
    def foreign(cls) -> Self:
        return cls(PayeeKind.FOREIGN)

    @classmethod
    def supplier(cls, supplier_id: str) -> Self:
        return cls(PayeeKind.SUPPLIER, supplier_id)

    @classmethod
    def parse(cls, raw: Payee | str | None) -> Payee:
        if isinstance(raw, Payee):
            return raw
        if raw == PayeeKind.CUSTOMER.value:
            return cls.customer()
        if raw == PayeeKind.FOREIGN.value:
            return cls.foreign()
        return cls.supplier(raw or "")


@dataclass(frozen=True)
class PaymentLabels:
    """Display names for the two reserved payee categories."""

    customer_refund: str
    foreign_payment: str


def resolve_payee_name(
    payee: Payee,
    resolve_supplier_name: Callable[[str], str],
    payment_labels: PaymentLabels,
) -> str:
    """Display name for a payee."""
    match payee.kind:
        case PayeeKind.CUSTOMER:
            return payment_labels.customer_refund
        case PayeeKind.FOREIGN:
            return payment_labels.foreign_payment
        case PayeeKind.SUPPLIER:
            return resolve_supplier_name(payee.supplier_id)


# ============================================================================
# Records
# ============================================================================


@dataclass(frozen=True)
class InvoiceItemForBill:
    """One line of an invoice as stored, before display resolution."""

    pay_for: Payee
    invoice_type: int
    price: Decimal
    quantity: Decimal
    note: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "pay_for", Payee.parse(self.pay_for))
        object.__setattr__(self, "price", parse_amount(self.price))
        object.__setattr__(self, "quantity", parse_amount(self.quantity))
        object.__setattr__(self, "note", self.note or "")

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> Self:
        return cls(
            pay_for=data.get("payFor", data.get("pay_for")),
            invoice_type=parse_code(data.get("invoiceType", data.get("invoice_type"))),
            price=data.get("price"),
            quantity=data.get("quantity"),
            note=data.get("note") or "",
        )


@dataclass(frozen=True)
class BillInvoice:
    """An invoice header with its line items."""

    invoice_number: str
    created_by: str
    group_code: str
    group_name: str = ""
    invoice_items: tuple[InvoiceItemForBill, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "group_name", self.group_name or "")
        object.__setattr__(self, "invoice_items", tuple(self.invoice_items or ()))

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> Self:
        items = data.get("invoiceItems", data.get("invoice_items")) or ()
        return cls(
            invoice_number=data.get("invoiceNumber", data.get("invoice_number", "")),
            created_by=data.get("createdBy", data.get("created_by", "")),
            group_code=data.get("groupCode", data.get("group_code", "")),
            group_name=data.get("groupName", data.get("group_name")) or "",
            invoice_items=tuple(InvoiceItemForBill.from_mapping(i) for i in items),
        )


@dataclass(frozen=True)
class ProcessedInvoiceItem:
    """
    A display-ready invoice line.

    After merging, one instance stands for all lines of one invoice number
    within one payee.
    """

    invoice_number: str
    created_by: str
    group_name: str
    group_code: str
    pay_for: str
    note: str
    price: Decimal

    def to_dict(self) -> dict[str, str]:
        return {
            "invoiceNumber": self.invoice_number,
            "createdBy": self.created_by,
            "groupName": self.group_name,
            "groupCode": self.group_code,
            "note": self.note,
            "payFor": self.pay_for,
            "price": str(self.price),
        }


@dataclass(frozen=True)
class InvoiceGroup:
    """
    One payee batch on the bill.

    ``hidden_total`` marks a continuation chunk of a split payee: its
    ``total`` is a zero placeholder and must not be rendered.
    """

    pay_for: str
    invoices: tuple[ProcessedInvoiceItem, ...]
    total: Decimal
    hidden_total: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "invoices", tuple(self.invoices))
        object.__setattr__(self, "total", parse_amount(self.total))

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "payFor": self.pay_for,
            "invoices": [inv.to_dict() for inv in self.invoices],
            "total": str(self.total),
        }
        if self.hidden_total:
            data["hiddenTotal"] = True
        return data


# ============================================================================
# Stage 1: process
# ============================================================================


@non_signaling
def calculate_invoice_item_price(
    price: Decimal,
    quantity: Decimal,
    invoice_type: int,
    refund_type_code: int,
) -> Decimal:
    """
    Line amount with refund normalization.

    The refund type is always non-negative (absolute value); every other
    type keeps the sign of ``price * quantity``.
    """
    raw = to_decimal(price) * to_decimal(quantity)
    return abs(raw) if invoice_type == refund_type_code else raw


def process_invoice_items(
    invoices: Iterable[BillInvoice],
    resolve_employee_name: Callable[[str], str],
    resolve_supplier_name: Callable[[str], str],
    resolve_invoice_type_name: Callable[[int], str],
    refund_type_code: int,
    payment_labels: PaymentLabels,
) -> list[ProcessedInvoiceItem]:
    """Flatten invoices into one display-ready row per line item."""
    processed: list[ProcessedInvoiceItem] = []
    for invoice in invoices:
        if not invoice.invoice_items:
            continue
        created_by = resolve_employee_name(invoice.created_by)
        for item in invoice.invoice_items:
            processed.append(ProcessedInvoiceItem(
                invoice_number=invoice.invoice_number,
                created_by=created_by,
                group_name=invoice.group_name,
                group_code=invoice.group_code,
                pay_for=resolve_payee_name(item.pay_for, resolve_supplier_name, payment_labels),
                note=item.note or resolve_invoice_type_name(item.invoice_type),
                price=calculate_invoice_item_price(
                    item.price, item.quantity, item.invoice_type, refund_type_code,
                ),
            ))
    return processed


# ============================================================================
# Stages 2-4: group, merge, split
# ============================================================================


def group_invoices_by_pay_for(
    items: Iterable[ProcessedInvoiceItem],
) -> dict[str, list[ProcessedInvoiceItem]]:
    """Bucket rows by payee; payees and rows keep first-seen order."""
    groups: dict[str, list[ProcessedInvoiceItem]] = {}
    for item in items:
        groups.setdefault(item.pay_for, []).append(item)
    return groups


@non_signaling
def merge_invoices_by_number(
    items: Iterable[ProcessedInvoiceItem],
) -> list[ProcessedInvoiceItem]:
    """
    Fold rows sharing an invoice number into one row.

    Notes are joined with ``NOTE_SEPARATOR`` and prices summed, both in
    encounter order; every other field comes from the first row.  Output
    follows the first encounter of each invoice number, so merging an
    already merged list changes nothing.
    """
    by_number: dict[str, list[ProcessedInvoiceItem]] = {}
    for item in items:
        by_number.setdefault(item.invoice_number, []).append(item)

    merged: list[ProcessedInvoiceItem] = []
    for rows in by_number.values():
        if len(rows) == 1:
            merged.append(rows[0])
            continue
        merged.append(replace(
            rows[0],
            note=NOTE_SEPARATOR.join(row.note for row in rows),
            price=sum((row.price for row in rows), ZERO),
        ))
    return merged


def split_large_groups(
    groups: Iterable[InvoiceGroup],
    max_group_size: int = DEFAULT_MAX_GROUP_SIZE,
) -> list[InvoiceGroup]:
    """
    Chunk payee groups holding more than ``max_group_size`` invoices.

    The first chunk keeps the group's total; each later chunk has
    ``total == 0`` and ``hidden_total == True``.  Groups within the limit
    pass through unchanged.

    Raises:
        ValueError: If ``max_group_size`` is less than 1.
    """
    if max_group_size < 1:
        raise ValueError(f"max_group_size must be at least 1, got {max_group_size}")

    result: list[InvoiceGroup] = []
    for group in groups:
        if len(group.invoices) <= max_group_size:
            result.append(group)
            continue

        for index, start in enumerate(range(0, len(group.invoices), max_group_size)):
            chunk = group.invoices[start:start + max_group_size]
            if index == 0:
                result.append(replace(group, invoices=chunk))
            else:
                result.append(replace(group, invoices=chunk, total=ZERO, hidden_total=True))

        logger.debug("invoice_group_split", extra={
            "pay_for": group.pay_for,
            "invoice_count": len(group.invoices),
            "max_group_size": max_group_size,
        })
    return result


@non_signaling
def calculate_bill_total_amount(groups: Iterable[InvoiceGroup]) -> Decimal:
    """
    Sum of ``total`` over every group, chunks included.

    Continuation chunks contribute 0, so no filtering is needed.
    """
    return sum((group.total for group in groups), ZERO)


# ============================================================================
# Orchestrator
# ============================================================================


@traced_engine(
    "bill", "1.0",
    fingerprint_fields=("invoices", "refund_type_code", "payment_labels", "max_group_size"),
)
@non_signaling
def process_bill_invoices(
    invoices: Sequence[BillInvoice],
    resolve_employee_name: Callable[[str], str],
    resolve_supplier_name: Callable[[str], str],
    resolve_invoice_type_name: Callable[[int], str],
    refund_type_code: int,
    payment_labels: PaymentLabels,
    max_group_size: int = DEFAULT_MAX_GROUP_SIZE,
) -> list[InvoiceGroup]:
    """Run process -> group -> merge -> split -> sort over a bill's invoices."""
    t0 = time.monotonic()
    logger.info("bill_processing_started", extra={
        "invoice_count": len(invoices),
        "max_group_size": max_group_size,
    })

    processed = process_invoice_items(
        invoices,
        resolve_employee_name,
        resolve_supplier_name,
        resolve_invoice_type_name,
        refund_type_code,
        payment_labels,
    )

    payee_groups: list[InvoiceGroup] = []
    for pay_for, rows in group_invoices_by_pay_for(processed).items():
        merged = merge_invoices_by_number(rows)
        payee_groups.append(InvoiceGroup(
            pay_for=pay_for,
            invoices=tuple(merged),
            total=sum((row.price for row in merged), ZERO),
        ))

    result = sorted(
        split_large_groups(payee_groups, max_group_size),
        key=lambda group: group.pay_for,
    )

    duration_ms = round((time.monotonic() - t0) * 1000, 2)
    logger.info("bill_processing_completed", extra={
        "line_count": len(processed),
        "payee_count": len(payee_groups),
        "group_count": len(result),
        "bill_total": str(calculate_bill_total_amount(result)),
        "duration_ms": duration_ms,
    })
    return result
