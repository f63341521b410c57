"""
Group Profit Domain Models (``tour_modules.group.models``).

Responsibility
--------------
Frozen value objects for the group closing report: the computed figures,
the title/value items shown on the profit sheet, and the two-column rows
the sheet is printed with.

Invariants enforced
-------------------
* All models are ``frozen=True``.
* All monetary fields use ``Decimal``.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from tour_engines.bonus import EmployeeBonus


@dataclass(frozen=True)
class ProfitDataItem:
    """One titled figure on the profit sheet."""
    title: str
    value: Decimal


@dataclass(frozen=True)
class ProfitTableRow:
    """Two profit sheet items side by side."""
    col_title1: str
    col_value1: Decimal
    col_title2: str = ""
    col_value2: Decimal = Decimal("0")


@dataclass(frozen=True)
class ProfitFigures:
    """Every number computed while closing a group."""
    receipt_total: Decimal
    invoice_total: Decimal
    administrative_cost: Decimal
    administrative_cost_per_customer: Decimal
    profit_without_tax: Decimal
    profit_tax_rate: Decimal
    profit_tax: Decimal
    net_profit: Decimal
    team_bonus: Decimal
    team_bonus_text: str
    employee_bonuses: tuple[EmployeeBonus, ...]
    company_profit: Decimal

    @property
    def bonuses_paid(self) -> bool:
        return self.net_profit.is_nan() or self.net_profit >= 0


@dataclass(frozen=True)
class GroupProfitReport:
    """Figures plus their presentation on the profit sheet."""
    figures: ProfitFigures
    data_items: tuple[ProfitDataItem, ...]
    table_rows: tuple[ProfitTableRow, ...]

    def to_dict(self) -> dict[str, Any]:
        f = self.figures
        return {
            "calculations": {
                "receiptTotal": str(f.receipt_total),
                "invoiceTotal": str(f.invoice_total),
                "administrativeCost": str(f.administrative_cost),
                "administrativeCostPerCustomer": str(f.administrative_cost_per_customer),
                "profitWithoutTax": str(f.profit_without_tax),
                "profitTaxRate": str(f.profit_tax_rate),
                "profitTax": str(f.profit_tax),
                "netProfit": str(f.net_profit),
                "teamBonus": str(f.team_bonus),
                "employeeBonuses": [
                    {
                        "name": b.name,
                        "bonus": str(b.bonus),
                        "type": b.type,
                        "bonusText": b.bonus_text,
                    }
                    for b in f.employee_bonuses
                ],
                "companyProfit": str(f.company_profit),
            },
            "dataItems": [{"title": i.title, "value": str(i.value)} for i in self.data_items],
            "tableRows": [
                {
                    "colTitle1": r.col_title1,
                    "colValue1": str(r.col_value1),
                    "colTitle2": r.col_title2,
                    "colValue2": str(r.col_value2),
                }
                for r in self.table_rows
            ],
        }
