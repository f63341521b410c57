"""
Profit Engine - pre-tax profit, profit tax, bonuses and net profit.

Pure functions with deterministic behavior. No I/O.

The closing order is a contract:

    profit_without_tax = receipts - invoices - administrative cost
    profit_tax         = round_whole(profit_without_tax * rate / 100), 0 on a loss
    total_bonus        = calculate_total_bonus(profit_without_tax, rules)
    net_profit         = profit_without_tax - profit_tax - total_bonus

Bonuses are computed on pre-tax profit even when it is negative; a loss
is never taxed but does still flow through the bonus rules.  NaN and
infinite amounts are computed with, never rejected.

Usage:
    from decimal import Decimal
    from tour_engines.profit import calculate_net_profit

    result = calculate_net_profit(
        receipt_total=Decimal("50000"),
        invoice_total=Decimal("30000"),
        administrative_cost=Decimal("2000"),
        tax_rate_percent=Decimal("20"),
    )
    print(result.net_profit)  # Decimal("14400")
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal

from tour_engines.bonus import BonusRule, calculate_total_bonus
from tour_engines.tracer import traced_engine
from tour_kernel.domain.values import ZERO, non_signaling, percent_of, to_decimal
from tour_kernel.logging_config import get_logger

logger = get_logger("engines.profit")


@dataclass(frozen=True)
class ProfitCalculationResult:
    """
    Outcome of closing a group's accounts.

    Produced once per closing operation and never mutated.
    """

    receipt_total: Decimal
    invoice_total: Decimal
    administrative_cost: Decimal
    profit_without_tax: Decimal
    profit_tax: Decimal
    total_bonus: Decimal
    net_profit: Decimal

    @property
    def is_loss(self) -> bool:
        return not self.profit_without_tax.is_nan() and self.profit_without_tax <= 0

    def to_dict(self) -> dict[str, str]:
        return {
            "receiptTotal": str(self.receipt_total),
            "invoiceTotal": str(self.invoice_total),
            "administrativeCost": str(self.administrative_cost),
            "profitWithoutTax": str(self.profit_without_tax),
            "profitTax": str(self.profit_tax),
            "totalBonus": str(self.total_bonus),
            "netProfit": str(self.net_profit),
        }


@non_signaling
def calculate_profit_without_tax(
    receipt_total: Decimal,
    invoice_total: Decimal,
    administrative_cost: Decimal,
) -> Decimal:
    """Receipts minus invoices minus administrative cost (may be negative)."""
    return to_decimal(receipt_total) - to_decimal(invoice_total) - to_decimal(administrative_cost)


@non_signaling
def calculate_profit_tax(profit_without_tax: Decimal, tax_rate_percent: Decimal) -> Decimal:
    """
    Tax on pre-tax profit, rounded to a whole currency unit.

    Losses and break-even (``profit_without_tax <= 0``) are never taxed.
    A NaN profit is not a loss: it yields a NaN tax, the same way a NaN
    base yields a NaN percentage bonus.
    """
    profit = to_decimal(profit_without_tax)
    if not profit.is_nan() and profit <= 0:
        return ZERO
    return percent_of(profit, tax_rate_percent)


@traced_engine(
    "profit", "1.0",
    fingerprint_fields=(
        "receipt_total", "invoice_total", "administrative_cost",
        "tax_rate_percent", "bonus_rules",
    ),
)
@non_signaling
def calculate_net_profit(
    receipt_total: Decimal,
    invoice_total: Decimal,
    administrative_cost: Decimal,
    tax_rate_percent: Decimal,
    bonus_rules: Sequence[BonusRule] = (),
) -> ProfitCalculationResult:
    """Compose pre-tax profit, tax, bonuses and net profit in that order."""
    rules = tuple(bonus_rules)
    profit_without_tax = calculate_profit_without_tax(
        receipt_total, invoice_total, administrative_cost,
    )
    profit_tax = calculate_profit_tax(profit_without_tax, tax_rate_percent)
    total_bonus = calculate_total_bonus(profit_without_tax, rules)
    net_profit = profit_without_tax - profit_tax - total_bonus

    if profit_without_tax < 0 and total_bonus != 0:
        logger.warning("bonus_applied_to_loss", extra={
            "profit_without_tax": str(profit_without_tax),
            "total_bonus": str(total_bonus),
            "rule_count": len(rules),
        })

    result = ProfitCalculationResult(
        receipt_total=to_decimal(receipt_total),
        invoice_total=to_decimal(invoice_total),
        administrative_cost=to_decimal(administrative_cost),
        profit_without_tax=profit_without_tax,
        profit_tax=profit_tax,
        total_bonus=total_bonus,
        net_profit=net_profit,
    )

    logger.info("net_profit_calculated", extra={
        "profit_without_tax": str(profit_without_tax),
        "profit_tax": str(profit_tax),
        "total_bonus": str(total_bonus),
        "net_profit": str(net_profit),
        "is_loss": result.is_loss,
    })
    return result
