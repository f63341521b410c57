"""
Tests for BillService.

Covers:
- Settings wiring (refund code, labels, chunk size, type names)
- Empty bills
- Overrides and log context
"""

from decimal import Decimal

import pytest

from tour_modules.bill import BillCalculation, BillService


class TestBillService:
    """Tests for BillService.calculate."""

    def setup_method(self):
        self.employees = {"E001": "Alice Chen"}.get
        self.suppliers = {"supplier001": "Harbour Hotel", "supplier002": "Sky Bus"}.get

    def test_empty_bill(self, settings):
        bill = BillService(settings).calculate([], self.employees, self.suppliers)

        assert bill == BillCalculation(invoice_groups=(), total_amount=Decimal("0"))
        assert bill.is_empty
        assert bill.to_dict() == {"invoiceGroups": [], "totalAmount": "0"}

    def test_uses_configured_labels_and_type_names(self, settings, invoice_factory):
        invoices = [
            invoice_factory("I001", [
                ("supplier001", 0, 3000, 2, ""),
                ("customer", 9, -800, 1, ""),
                ("foreign", 6, 1200, 1, "FX fee"),
            ]),
        ]

        bill = BillService(settings).calculate(invoices, self.employees, self.suppliers)

        assert [g.pay_for for g in bill.invoice_groups] == [
            "Customer refund", "Foreign currency payment", "Harbour Hotel",
        ]
        refund, foreign, hotel = bill.invoice_groups
        assert refund.invoices[0].note == "Refund of advance receipt"
        assert refund.total == Decimal("800")
        assert foreign.invoices[0].note == "FX fee"
        assert hotel.invoices[0].note == "Hotel"
        assert hotel.invoices[0].created_by == "Alice Chen"
        assert bill.total_amount == Decimal("8000")

    def test_custom_type_name_lookup(self, settings, invoice_factory):
        invoices = [invoice_factory("I001", [("supplier002", 1, 100, 1, "")])]

        bill = BillService(settings).calculate(
            invoices, self.employees, self.suppliers,
            resolve_invoice_type_name=lambda code: f"T{code}",
        )
        assert bill.invoice_groups[0].invoices[0].note == "T1"

    def test_default_chunk_size_from_settings(self, settings, invoice_factory):
        invoices = [
            invoice_factory(f"I{i:03d}", [("supplier001", 0, 100, 1, "")]) for i in range(6)
        ]

        bill = BillService(settings).calculate(invoices, self.employees, self.suppliers)

        assert [len(g.invoices) for g in bill.invoice_groups] == [5, 1]
        assert bill.invoice_groups[1].hidden_total
        assert bill.total_amount == Decimal("600")

    def test_chunk_size_override(self, settings, invoice_factory):
        invoices = [
            invoice_factory(f"I{i:03d}", [("supplier001", 0, 100, 1, "")]) for i in range(6)
        ]

        bill = BillService(settings).calculate(
            invoices, self.employees, self.suppliers, max_group_size=2,
        )
        assert [len(g.invoices) for g in bill.invoice_groups] == [2, 2, 2]

    def test_invalid_chunk_size_override(self, settings, invoice_factory):
        invoices = [invoice_factory("I001", [("supplier001", 0, 100, 1, "")])]
        with pytest.raises(ValueError):
            BillService(settings).calculate(
                invoices, self.employees, self.suppliers, max_group_size=0,
            )

    def test_to_dict(self, settings, invoice_factory):
        invoices = [invoice_factory("I001", [("supplier001", 0, 100, 2, "Room")])]

        data = BillService(settings).calculate(invoices, self.employees, self.suppliers).to_dict()

        assert data == {
            "invoiceGroups": [{
                "payFor": "Harbour Hotel",
                "invoices": [{
                    "invoiceNumber": "I001",
                    "createdBy": "Alice Chen",
                    "groupName": "Kyoto Autumn",
                    "groupCode": "TG001",
                    "note": "Room",
                    "payFor": "Harbour Hotel",
                    "price": "200",
                }],
                "total": "200",
            }],
            "totalAmount": "200",
        }

    def test_bill_number_bound_to_logs(self, settings, invoice_factory, captured_logs):
        invoices = [invoice_factory("I001", [("supplier001", 0, 100, 1, "")])]

        BillService(settings).calculate(
            invoices, self.employees, self.suppliers, bill_number="B2026001",
        )

        (record,) = [r for r in captured_logs() if r["message"] == "bill_calculated"]
        assert record["bill_number"] == "B2026001"
        assert record["total_amount"] == "100"
