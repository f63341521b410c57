"""
Pytest fixtures for the tour engine test suite.

Provides:
- Structured logging configured once per session
- ``captured_logs`` for asserting on emitted JSON log records
- Shared settings, lookups and invoice builders
"""

import json
import logging
from decimal import Decimal
from io import StringIO

import pytest

from tour_config import get_active_config
from tour_engines.bill import BillInvoice, InvoiceItemForBill, PaymentLabels
from tour_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)

EMPLOYEES = {"E001": "Alice Chen", "E002": "Bob Lin"}
SUPPLIERS = {"supplier001": "Supplier_supplier001", "supplier002": "Harbour Hotel"}

PAYMENT_LABELS = PaymentLabels(
    customer_refund="Customer refund",
    foreign_payment="Foreign currency payment",
)


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture tour_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs):
            calculate_net_profit(...)
            logs = captured_logs()
            assert any(r["message"] == "net_profit_calculated" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("tour_kernel")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Domain fixtures
# =============================================================================


@pytest.fixture
def settings():
    """Settings from the bundled default YAML."""
    return get_active_config()


@pytest.fixture
def payment_labels():
    return PAYMENT_LABELS


@pytest.fixture
def resolve_employee_name():
    return lambda code: EMPLOYEES.get(code, code)


@pytest.fixture
def resolve_supplier_name():
    return lambda supplier_id: SUPPLIERS.get(supplier_id, supplier_id)


def make_invoice(number, items, created_by="E001", group_code="TG001", group_name="Kyoto Autumn"):
    """Build a BillInvoice from ``(pay_for, invoice_type, price, quantity, note)`` tuples."""
    return BillInvoice(
        invoice_number=number,
        created_by=created_by,
        group_code=group_code,
        group_name=group_name,
        invoice_items=tuple(
            InvoiceItemForBill(
                pay_for=pay_for,
                invoice_type=invoice_type,
                price=Decimal(str(price)),
                quantity=Decimal(str(quantity)),
                note=note,
            )
            for pay_for, invoice_type, price, quantity, note in items
        ),
    )


@pytest.fixture
def invoice_factory():
    return make_invoice
