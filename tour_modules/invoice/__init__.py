"""
Invoice Module (``tour_modules.invoice``).

Invoice item type codes and their display names.
"""

from tour_modules.invoice.models import (
    DEFAULT_INVOICE_ITEM_TYPE_NAMES,
    InvoiceItemType,
    InvoiceItemTypeCatalog,
    invoice_item_type_name,
)

__all__ = [
    "DEFAULT_INVOICE_ITEM_TYPE_NAMES",
    "InvoiceItemType",
    "InvoiceItemTypeCatalog",
    "invoice_item_type_name",
]
