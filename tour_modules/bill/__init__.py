"""
Bill Module (``tour_modules.bill``).

Disbursement bill preview: invoice lines batched by payee, merged by
invoice number, split into fixed-size chunks, plus the bill total.
All reshaping is done by ``tour_engines.bill``.
"""

from tour_modules.bill.models import BillCalculation
from tour_modules.bill.service import BillService

__all__ = ["BillCalculation", "BillService"]
