"""
Module: tour_engines
Responsibility:
    Package entrypoint that re-exports the public symbols of the pure
    calculation engines used to close out a travel group's accounts.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import tour_kernel (and sibling engine modules).
    MUST NOT import tour_config or tour_modules.

Invariants enforced:
    - Decimal-only arithmetic: all monetary amounts use ``Decimal``.
    - Determinism: identical inputs always produce identical outputs.
    - No failure paths of their own: unknown bonus types contribute 0,
      missing amounts count as 0, empty inputs give empty results.
      Exceptions from caller-supplied lookups propagate unchanged.

Usage:
    from tour_engines.totals import calculate_invoice_total
    from tour_engines.bonus import calculate_bonus
    from tour_engines.profit import calculate_net_profit
    from tour_engines.bill import process_bill_invoices
"""

from tour_kernel.logging_config import get_logger

logger = get_logger("engines")

from tour_engines.bill import (
    BillInvoice,
    InvoiceGroup,
    InvoiceItemForBill,
    Payee,
    PayeeKind,
    PaymentLabels,
    ProcessedInvoiceItem,
    calculate_bill_total_amount,
    calculate_invoice_item_price,
    group_invoices_by_pay_for,
    merge_invoices_by_number,
    process_bill_invoices,
    process_invoice_items,
    split_large_groups,
)
from tour_engines.bonus import (
    BonusCalculationCode,
    BonusCalculationType,
    BonusKind,
    BonusRule,
    BonusSettingType,
    EmployeeBonus,
    GroupBonusSetting,
    GroupedBonusSettings,
    administrative_cost_per_customer,
    calculate_administrative_cost,
    calculate_bonus,
    calculate_bonus_by_type,
    calculate_employee_bonuses,
    calculate_total_bonus,
    group_bonus_settings,
    profit_tax_rate,
)
from tour_engines.profit import (
    ProfitCalculationResult,
    calculate_net_profit,
    calculate_profit_tax,
    calculate_profit_without_tax,
)
from tour_engines.totals import (
    InvoiceItem,
    Receipt,
    calculate_invoice_total,
    calculate_invoice_total_from_invoices,
    calculate_receipt_total,
)

__all__ = [
    # Totals
    "InvoiceItem",
    "Receipt",
    "calculate_invoice_total",
    "calculate_invoice_total_from_invoices",
    "calculate_receipt_total",
    # Bonus
    "BonusKind",
    "BonusCalculationType",
    "BonusSettingType",
    "BonusCalculationCode",
    "BonusRule",
    "GroupBonusSetting",
    "GroupedBonusSettings",
    "EmployeeBonus",
    "calculate_bonus",
    "calculate_total_bonus",
    "calculate_administrative_cost",
    "group_bonus_settings",
    "administrative_cost_per_customer",
    "profit_tax_rate",
    "calculate_bonus_by_type",
    "calculate_employee_bonuses",
    # Profit
    "ProfitCalculationResult",
    "calculate_profit_without_tax",
    "calculate_profit_tax",
    "calculate_net_profit",
    # Bill
    "Payee",
    "PayeeKind",
    "PaymentLabels",
    "InvoiceItemForBill",
    "BillInvoice",
    "ProcessedInvoiceItem",
    "InvoiceGroup",
    "calculate_invoice_item_price",
    "process_invoice_items",
    "group_invoices_by_pay_for",
    "merge_invoices_by_number",
    "split_large_groups",
    "calculate_bill_total_amount",
    "process_bill_invoices",
]
