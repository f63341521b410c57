"""
Bill Service -- builds the disbursement bill preview.

Responsibility:
    Thin glue between ``EngineSettings`` and the pure bill engine.  Reads
    the refund type code, payment labels, chunk size and invoice item type
    names from settings and hands them to ``process_bill_invoices``.

Failure modes:
    - Exceptions raised by the caller's name lookups propagate unchanged.
    - ``ValueError`` when an explicit ``max_group_size`` is below 1.

Usage:
    service = BillService(get_active_config())
    bill = service.calculate(
        invoices,
        resolve_employee_name=employees.get_name,
        resolve_supplier_name=suppliers.get_name,
        bill_number="B20260101001",
    )
    print(bill.total_amount)
"""

from __future__ import annotations

from collections.abc import Callable, Sequence

from tour_config.schema import EngineSettings
from tour_engines.bill import (
    BillInvoice,
    PaymentLabels,
    calculate_bill_total_amount,
    process_bill_invoices,
)
from tour_kernel.domain.values import ZERO
from tour_kernel.logging_config import LogContext, get_logger
from tour_modules.bill.models import BillCalculation
from tour_modules.invoice.models import InvoiceItemTypeCatalog

logger = get_logger("modules.bill.service")


class BillService:
    """
    Computes payee batches and the total for a disbursement bill.

    Pure: no I/O, no session.  Invoices arrive already fetched.
    """

    def __init__(self, settings: EngineSettings):
        self._settings = settings
        self._payment_labels = PaymentLabels(
            customer_refund=settings.payment_labels.customer_refund,
            foreign_payment=settings.payment_labels.foreign_payment,
        )
        self._type_catalog = InvoiceItemTypeCatalog(
            names=settings.invoice_item_type_names or InvoiceItemTypeCatalog().names,
            unknown_template=settings.unknown_invoice_type,
        )

    @property
    def payment_labels(self) -> PaymentLabels:
        return self._payment_labels

    def calculate(
        self,
        invoices: Sequence[BillInvoice],
        resolve_employee_name: Callable[[str], str],
        resolve_supplier_name: Callable[[str], str],
        resolve_invoice_type_name: Callable[[int], str] | None = None,
        max_group_size: int | None = None,
        bill_number: str | None = None,
    ) -> BillCalculation:
        """
        Build the bill preview.

        ``resolve_invoice_type_name`` defaults to the configured catalog and
        ``max_group_size`` to ``settings.max_group_size``.  No invoices give
        an empty bill with a zero total.
        """
        if not invoices:
            logger.debug("bill_calculation_empty", extra={"bill_number": bill_number})
            return BillCalculation(invoice_groups=(), total_amount=ZERO)

        size = self._settings.max_group_size if max_group_size is None else max_group_size
        with LogContext.bind(bill_number=bill_number):
            groups = process_bill_invoices(
                invoices,
                resolve_employee_name,
                resolve_supplier_name,
                resolve_invoice_type_name or self._type_catalog,
                self._settings.refund_type_code,
                self._payment_labels,
                max_group_size=size,
            )
            total = calculate_bill_total_amount(groups)
            logger.info("bill_calculated", extra={
                "group_count": len(groups),
                "total_amount": str(total),
            })

        return BillCalculation(invoice_groups=tuple(groups), total_amount=total)
