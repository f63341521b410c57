"""
Group Profit Service -- closes a travel group's accounts.

Responsibility:
    Thin glue over the totals, bonus and profit engines.  Computes the
    invoice and receipt totals, the administrative cost, pre-tax profit,
    profit tax and net profit, then (only when net profit is not negative)
    the team bonus, each employee's bonus and the remaining company profit.

Business rules:
    - Administrative cost per traveller comes from the group's
      administrative-expense settings, falling back to
      ``settings.cost_per_customer``.
    - The tax rate is the first profit-tax setting when it is a percentage.
    - Team and employee bonuses here are computed on profit AFTER tax and
      are skipped entirely for a loss-making group.  This differs from
      ``tour_engines.profit.calculate_net_profit``, which applies a flat
      rule list to pre-tax profit.  A NaN net profit is not a loss: the
      bonuses are computed and come out NaN.
    - The team bonus sums every TEAM_BONUS setting, employee-scoped ones
      included, so an employee-scoped team setting also appears as that
      employee's bonus.  The team bonus label lists general team settings
      only.

Failure modes:
    - Exceptions raised by ``resolve_employee_name`` propagate unchanged.

Usage:
    service = GroupProfitService(get_active_config())
    report = service.calculate(
        invoices=[invoice_items_1, invoice_items_2],
        receipts=receipts,
        bonus_settings=settings,
        customer_count=24,
        resolve_employee_name=employees.get_name,
    )
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence

from tour_config.schema import EngineSettings
from tour_engines.bonus import (
    BonusSettingType,
    GroupBonusSetting,
    administrative_cost_per_customer,
    calculate_administrative_cost,
    calculate_bonus_by_type,
    calculate_employee_bonuses,
    group_bonus_settings,
    profit_tax_rate,
)
from tour_engines.profit import calculate_profit_tax, calculate_profit_without_tax
from tour_engines.totals import (
    InvoiceItem,
    Receipt,
    calculate_invoice_total_from_invoices,
    calculate_receipt_total,
)
from tour_engines.tracer import traced_engine
from tour_kernel.domain.values import ZERO, non_signaling
from tour_kernel.logging_config import LogContext, get_logger
from tour_modules.group.helpers import (
    convert_to_table_rows,
    generate_profit_data_items,
    team_bonus_text,
)
from tour_modules.group.models import GroupProfitReport, ProfitFigures

logger = get_logger("modules.group.service")

_DEFAULT_BONUS_NAME = "Bonus"


class GroupProfitService:
    """
    Produces the profit report for closing one travel group.

    Pure: no I/O.  Invoices, receipts and bonus settings arrive already
    fetched; employee names come from the injected lookup.
    """

    def __init__(self, settings: EngineSettings):
        self._settings = settings

    def bonus_type_name(self, setting_type: int) -> str:
        return self._settings.bonus_setting_type_names.get(setting_type, _DEFAULT_BONUS_NAME)

    def calculate(
        self,
        invoices: Iterable[Sequence[InvoiceItem] | None],
        receipts: Iterable[Receipt],
        bonus_settings: Sequence[GroupBonusSetting],
        customer_count: int,
        resolve_employee_name: Callable[[str], str],
        group_code: str | None = None,
    ) -> GroupProfitReport:
        """Close the group and build its profit sheet."""
        with LogContext.bind(group_code=group_code):
            figures = self._calculate_figures(
                invoices, receipts, bonus_settings, customer_count, resolve_employee_name,
            )
            data_items = generate_profit_data_items(figures)
            report = GroupProfitReport(
                figures=figures,
                data_items=data_items,
                table_rows=convert_to_table_rows(data_items),
            )
            logger.info("group_profit_calculated", extra={
                "profit_without_tax": str(figures.profit_without_tax),
                "net_profit": str(figures.net_profit),
                "team_bonus": str(figures.team_bonus),
                "employee_bonus_count": len(figures.employee_bonuses),
                "company_profit": str(figures.company_profit),
            })
        return report

    @traced_engine(
        "group_profit", "1.0",
        fingerprint_fields=("invoices", "receipts", "bonus_settings", "customer_count"),
    )
    @non_signaling
    def _calculate_figures(
        self,
        invoices: Iterable[Sequence[InvoiceItem] | None],
        receipts: Iterable[Receipt],
        bonus_settings: Sequence[GroupBonusSetting],
        customer_count: int,
        resolve_employee_name: Callable[[str], str],
    ) -> ProfitFigures:
        invoice_total = calculate_invoice_total_from_invoices(invoices)
        receipt_total = calculate_receipt_total(receipts)
        cost_per_customer = administrative_cost_per_customer(
            bonus_settings, self._settings.cost_per_customer,
        )
        administrative_cost = calculate_administrative_cost(customer_count, cost_per_customer)
        profit_without_tax = calculate_profit_without_tax(
            receipt_total, invoice_total, administrative_cost,
        )

        tax_rate = profit_tax_rate(bonus_settings)
        profit_tax = calculate_profit_tax(profit_without_tax, tax_rate)
        net_profit = profit_without_tax - profit_tax

        grouped = group_bonus_settings(bonus_settings)
        team_text = team_bonus_text(grouped.general.get(BonusSettingType.TEAM_BONUS, ()))

        team_bonus = ZERO
        employee_bonuses = ()
        company_profit = net_profit
        if net_profit.is_nan() or net_profit >= 0:
            team_bonus = calculate_bonus_by_type(
                bonus_settings,
                BonusSettingType.TEAM_BONUS,
                net_profit,
            )
            employee_bonuses = tuple(calculate_employee_bonuses(
                grouped.with_employee,
                net_profit,
                resolve_employee_name,
                self.bonus_type_name,
            ))
            company_profit = net_profit - team_bonus - sum(
                (b.bonus for b in employee_bonuses), ZERO,
            )
        else:
            logger.info("group_bonuses_skipped_for_loss", extra={
                "net_profit": str(net_profit),
            })

        return ProfitFigures(
            receipt_total=receipt_total,
            invoice_total=invoice_total,
            administrative_cost=administrative_cost,
            administrative_cost_per_customer=cost_per_customer,
            profit_without_tax=profit_without_tax,
            profit_tax_rate=tax_rate,
            profit_tax=profit_tax,
            net_profit=net_profit,
            team_bonus=team_bonus,
            team_bonus_text=team_text,
            employee_bonuses=employee_bonuses,
            company_profit=company_profit,
        )
