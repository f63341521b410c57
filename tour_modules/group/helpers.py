"""
Group Profit Helpers (``tour_modules.group.helpers``).

Pure presentation functions for the profit sheet: the team bonus label,
the ordered list of titled figures, and the pairing of those figures into
two-column rows.  No calculation happens here beyond formatting.
"""

from __future__ import annotations

from collections.abc import Sequence
from decimal import Decimal

from tour_engines.bonus import GroupBonusSetting, describe_setting_value
from tour_modules.group.models import ProfitDataItem, ProfitFigures, ProfitTableRow

_ZERO = Decimal("0")


def team_bonus_text(team_settings: Sequence[GroupBonusSetting]) -> str:
    """Label such as ``5%+1000 fixed``; ``0`` when there are no settings."""
    if not team_settings:
        return "0"
    return "+".join(describe_setting_value(s) for s in team_settings)


def generate_profit_data_items(figures: ProfitFigures) -> tuple[ProfitDataItem, ...]:
    """
    Ordered profit sheet items.

    The six base figures always appear.  With a negative net profit a
    single "no bonus" item follows; otherwise each employee bonus, the
    team bonus and the company profit.
    """
    items = [
        ProfitDataItem("Receipts total (income)", figures.receipt_total),
        ProfitDataItem("Invoices total (expenses)", figures.invoice_total),
        ProfitDataItem(
            f"Administrative cost ({figures.administrative_cost_per_customer} per traveller)",
            figures.administrative_cost,
        ),
        ProfitDataItem("Revenue before profit tax", figures.profit_without_tax),
        ProfitDataItem(f"Profit tax ({figures.profit_tax_rate}%)", figures.profit_tax),
        ProfitDataItem("Profit after profit tax", figures.net_profit),
    ]

    if not figures.bonuses_paid:
        items.append(ProfitDataItem("No bonus (negative profit)", _ZERO))
        return tuple(items)

    for bonus in figures.employee_bonuses:
        items.append(ProfitDataItem(f"{bonus.bonus_text} - {bonus.name}", bonus.bonus))
    items.append(ProfitDataItem(f"Team bonus ({figures.team_bonus_text})", figures.team_bonus))
    items.append(ProfitDataItem("Company profit", figures.company_profit))
    return tuple(items)


def convert_to_table_rows(items: Sequence[ProfitDataItem]) -> tuple[ProfitTableRow, ...]:
    """Pair items two per row; an odd last item gets an empty right column."""
    rows: list[ProfitTableRow] = []
    for i in range(0, len(items), 2):
        left = items[i]
        if i + 1 < len(items):
            right = items[i + 1]
            rows.append(ProfitTableRow(left.title, left.value, right.title, right.value))
        else:
            rows.append(ProfitTableRow(left.title, left.value))
    return tuple(rows)
