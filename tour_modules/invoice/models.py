"""
Invoice item type catalog (``tour_modules.invoice.models``).

Integer codes stored on invoice lines and their display names.  The
catalog is what bill processing uses to fill in the note of a line that
has none.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import IntEnum


class InvoiceItemType(IntEnum):
    """Invoice line item types."""
    HOTEL = 0
    TRANSPORT = 1
    MEAL = 2
    ACTIVITY = 3
    TOUR_PAYMENT = 4
    TOUR_RETURN = 5
    OTHER = 6
    INSURANCE = 7
    BONUS = 8
    REFUND = 9  # refund of an advance receipt; amounts are non-negative
    B2B = 10
    ESIM = 11
    EMPLOYEE = 999


DEFAULT_INVOICE_ITEM_TYPE_NAMES: dict[int, str] = {
    InvoiceItemType.HOTEL: "Hotel",
    InvoiceItemType.TRANSPORT: "Transport",
    InvoiceItemType.MEAL: "Meals",
    InvoiceItemType.ACTIVITY: "Activities",
    InvoiceItemType.TOUR_PAYMENT: "Tour payment",
    InvoiceItemType.TOUR_RETURN: "Tour return",
    InvoiceItemType.OTHER: "Other",
    InvoiceItemType.INSURANCE: "Insurance",
    InvoiceItemType.BONUS: "Bonus",
    InvoiceItemType.REFUND: "Refund of advance receipt",
    InvoiceItemType.B2B: "B2B",
    InvoiceItemType.ESIM: "eSIM",
    InvoiceItemType.EMPLOYEE: "Employee",
}

UNKNOWN_TYPE_TEMPLATE = "Unknown type ({code})"


@dataclass(frozen=True)
class InvoiceItemTypeCatalog:
    """Code -> name lookup, usable directly as a ``resolve_invoice_type_name``."""
    names: Mapping[int, str] = field(
        default_factory=lambda: dict(DEFAULT_INVOICE_ITEM_TYPE_NAMES)
    )
    unknown_template: str = UNKNOWN_TYPE_TEMPLATE

    def __call__(self, code: int | None) -> str:
        return invoice_item_type_name(code, self.names, self.unknown_template)


def invoice_item_type_name(
    code: int | None,
    names: Mapping[int, str] | None = None,
    unknown_template: str = UNKNOWN_TYPE_TEMPLATE,
) -> str:
    """
    Display name for an invoice item type code.

    ``None`` -> ``""``; an unmapped code -> ``unknown_template`` filled in.
    """
    if code is None:
        return ""
    lookup = DEFAULT_INVOICE_ITEM_TYPE_NAMES if names is None else names
    name = lookup.get(code)
    if name:
        return name
    return unknown_template.format(code=code)
