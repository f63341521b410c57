"""
Bill Domain Models (``tour_modules.bill.models``).

Frozen value objects returned by ``BillService``.  All monetary fields
use ``Decimal``.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from tour_engines.bill import InvoiceGroup


@dataclass(frozen=True)
class BillCalculation:
    """Payee batches for a bill and the bill total."""
    invoice_groups: tuple[InvoiceGroup, ...]
    total_amount: Decimal

    @property
    def is_empty(self) -> bool:
        return not self.invoice_groups

    def to_dict(self) -> dict[str, Any]:
        return {
            "invoiceGroups": [group.to_dict() for group in self.invoice_groups],
            "totalAmount": str(self.total_amount),
        }
