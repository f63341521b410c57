"""
Group Module (``tour_modules.group``).

Closing a travel group: totals, administrative cost, profit tax, team and
employee bonuses, company profit, and the printed profit sheet.
"""

from tour_modules.group.helpers import (
    convert_to_table_rows,
    generate_profit_data_items,
    team_bonus_text,
)
from tour_modules.group.models import (
    GroupProfitReport,
    ProfitDataItem,
    ProfitFigures,
    ProfitTableRow,
)
from tour_modules.group.service import GroupProfitService

__all__ = [
    "GroupProfitReport",
    "GroupProfitService",
    "ProfitDataItem",
    "ProfitFigures",
    "ProfitTableRow",
    "convert_to_table_rows",
    "generate_profit_data_items",
    "team_bonus_text",
]
