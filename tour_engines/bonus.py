"""
Bonus Engine - evaluate bonus rules against a base amount.

Pure functions with no I/O.

A bonus rule has a semantic kind (profit tax, OP, sales, team,
administrative) and one of four calculation types:

    percentage          round_whole(base * value / 100)
    amount              value
    negativePercentage  -round_whole(base * value / 100)
    negativeAmount      -value

Any other calculation type contributes 0.  The engine never raises for an
unrecognized rule, and it never guards against a negative base: a loss
flows through percentage rules as a negative adjustment.  Non-finite
amounts are computed with as well: a NaN base gives a NaN percentage
bonus and an infinite base an infinite one.

Persisted group settings (``GroupBonusSetting``) carry integer codes for
both the setting type and the calculation type; ``to_rule()`` maps them
onto a ``BonusRule`` so every helper in this module shares one formula.

Usage:
    from decimal import Decimal
    from tour_engines.bonus import BonusRule, BonusKind, BonusCalculationType, calculate_bonus

    rule = BonusRule(BonusKind.SALES, BonusCalculationType.PERCENTAGE, Decimal("10"))
    calculate_bonus(Decimal("10000"), rule)  # Decimal("1000")
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum, IntEnum
from typing import Any, Self

from tour_kernel.domain.values import (
    ZERO,
    non_signaling,
    parse_amount,
    parse_code,
    percent_of,
    to_decimal,
)
from tour_kernel.logging_config import get_logger

logger = get_logger("engines.bonus")


class BonusKind(str, Enum):
    """Semantic kind of a bonus rule."""

    PROFIT_TAX = "profitTax"
    OP = "op"
    SALES = "sales"
    TEAM = "team"
    ADMINISTRATIVE = "administrative"


class BonusCalculationType(str, Enum):
    """How a bonus rule turns its value into an amount."""

    PERCENTAGE = "percentage"
    AMOUNT = "amount"
    NEGATIVE_PERCENTAGE = "negativePercentage"
    NEGATIVE_AMOUNT = "negativeAmount"


class BonusSettingType(IntEnum):
    """Persisted setting type codes."""

    PROFIT_TAX = 0
    OP_BONUS = 1
    SALE_BONUS = 2
    TEAM_BONUS = 3
    ADMINISTRATIVE_EXPENSES = 4


class BonusCalculationCode(IntEnum):
    """Persisted calculation type codes."""

    PERCENT = 0
    FIXED_AMOUNT = 1
    MINUS_PERCENT = 2
    MINUS_FIXED_AMOUNT = 3


_KIND_BY_SETTING_TYPE: dict[int, BonusKind] = {
    BonusSettingType.PROFIT_TAX: BonusKind.PROFIT_TAX,
    BonusSettingType.OP_BONUS: BonusKind.OP,
    BonusSettingType.SALE_BONUS: BonusKind.SALES,
    BonusSettingType.TEAM_BONUS: BonusKind.TEAM,
    BonusSettingType.ADMINISTRATIVE_EXPENSES: BonusKind.ADMINISTRATIVE,
}

_CALCULATION_BY_CODE: dict[int, BonusCalculationType] = {
    BonusCalculationCode.PERCENT: BonusCalculationType.PERCENTAGE,
    BonusCalculationCode.FIXED_AMOUNT: BonusCalculationType.AMOUNT,
    BonusCalculationCode.MINUS_PERCENT: BonusCalculationType.NEGATIVE_PERCENTAGE,
    BonusCalculationCode.MINUS_FIXED_AMOUNT: BonusCalculationType.NEGATIVE_AMOUNT,
}

_PERCENT_CODES = frozenset({BonusCalculationCode.PERCENT, BonusCalculationCode.MINUS_PERCENT})
_NEGATIVE_CODES = frozenset(
    {BonusCalculationCode.MINUS_PERCENT, BonusCalculationCode.MINUS_FIXED_AMOUNT}
)


def _coerce(enum_type: type[Enum], value: Any) -> Any:
    """Return the enum member equal to ``value``, or ``value`` unchanged."""
    for member in enum_type:
        if member == value:
            return member
    return value


@dataclass(frozen=True)
class BonusRule:
    """
    One bonus rule, evaluated per calculation call and never persisted.

    ``calculation_type`` is normally a ``BonusCalculationType``; a raw
    string that is not one of its values is kept as-is and evaluates to 0.
    """

    kind: BonusKind | str
    calculation_type: BonusCalculationType | str
    value: Decimal

    def __post_init__(self) -> None:
        object.__setattr__(self, "value", parse_amount(self.value))
        object.__setattr__(self, "kind", _coerce(BonusKind, self.kind))
        object.__setattr__(
            self, "calculation_type", _coerce(BonusCalculationType, self.calculation_type)
        )

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> Self:
        return cls(
            kind=data.get("type", ""),
            calculation_type=data.get("calculationType", data.get("calculation_type", "")),
            value=data.get("value"),
        )


@dataclass(frozen=True)
class GroupBonusSetting:
    """
    Persisted bonus setting for a travel group.

    With ``employee_code`` the setting pays a named individual; without it
    the setting is company-level (team bonus, administrative cost per head,
    profit tax rate).
    """

    type: int
    bonus_type: int
    bonus: Decimal
    employee_code: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "bonus", parse_amount(self.bonus))
        if not self.employee_code:
            object.__setattr__(self, "employee_code", None)

    @property
    def is_percent(self) -> bool:
        return self.bonus_type in _PERCENT_CODES

    @property
    def is_negative(self) -> bool:
        return self.bonus_type in _NEGATIVE_CODES

    def to_rule(self) -> BonusRule:
        """Map integer codes onto a BonusRule; unknown codes evaluate to 0."""
        return BonusRule(
            kind=_KIND_BY_SETTING_TYPE.get(self.type, str(self.type)),
            calculation_type=_CALCULATION_BY_CODE.get(self.bonus_type, str(self.bonus_type)),
            value=self.bonus,
        )

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> Self:
        return cls(
            type=parse_code(data.get("type"), -1),
            bonus_type=parse_code(data.get("bonusType", data.get("bonus_type")), -1),
            bonus=data.get("bonus"),
            employee_code=data.get("employeeCode", data.get("employee_code")),
        )


@dataclass(frozen=True)
class GroupedBonusSettings:
    """Settings split into employee-scoped and general (by setting type)."""

    with_employee: tuple[GroupBonusSetting, ...] = ()
    general: dict[int, tuple[GroupBonusSetting, ...]] = field(default_factory=dict)


@dataclass(frozen=True)
class EmployeeBonus:
    """Bonus paid to one named employee."""

    name: str
    bonus: Decimal
    type: int
    bonus_text: str


# ============================================================================
# Rule evaluation
# ============================================================================


@non_signaling
def calculate_bonus(base_amount: Decimal, rule: BonusRule) -> Decimal:
    """Evaluate one rule against ``base_amount``.  Unknown types give 0."""
    base = to_decimal(base_amount)
    match rule.calculation_type:
        case BonusCalculationType.PERCENTAGE:
            return percent_of(base, rule.value)
        case BonusCalculationType.AMOUNT:
            return rule.value
        case BonusCalculationType.NEGATIVE_PERCENTAGE:
            return -percent_of(base, rule.value)
        case BonusCalculationType.NEGATIVE_AMOUNT:
            return -rule.value
        case _:
            logger.debug("bonus_calculation_type_unrecognized", extra={
                "calculation_type": str(rule.calculation_type),
                "kind": str(rule.kind),
            })
            return ZERO


@non_signaling
def calculate_total_bonus(base_amount: Decimal, rules: Iterable[BonusRule]) -> Decimal:
    """Sum of ``calculate_bonus`` over all rules.  Empty -> 0."""
    return sum((calculate_bonus(base_amount, rule) for rule in rules), ZERO)


@non_signaling
def calculate_administrative_cost(
    customer_count: int,
    cost_per_customer: Decimal | int = 10,
) -> Decimal:
    """Administrative cost for a group: head count times cost per head."""
    return to_decimal(customer_count) * to_decimal(cost_per_customer)


# ============================================================================
# Persisted settings helpers
# ============================================================================


def group_bonus_settings(settings: Iterable[GroupBonusSetting]) -> GroupedBonusSettings:
    """Split settings into employee-scoped ones and general ones by type."""
    with_employee: list[GroupBonusSetting] = []
    general: dict[int, list[GroupBonusSetting]] = {}
    for setting in settings:
        if setting.employee_code:
            with_employee.append(setting)
        else:
            general.setdefault(setting.type, []).append(setting)
    return GroupedBonusSettings(
        with_employee=tuple(with_employee),
        general={k: tuple(v) for k, v in general.items()},
    )


@non_signaling
def administrative_cost_per_customer(
    settings: Iterable[GroupBonusSetting],
    default_cost: Decimal | int = 10,
) -> Decimal:
    """
    Cost per head from the administrative-expense settings.

    No such setting -> ``default_cost``.  Otherwise the largest configured
    value, floored at 0.
    """
    values = [
        s.bonus for s in settings
        if s.type == BonusSettingType.ADMINISTRATIVE_EXPENSES
    ]
    if not values:
        return to_decimal(default_cost)
    return max(ZERO, *values)


def profit_tax_rate(settings: Sequence[GroupBonusSetting]) -> Decimal:
    """
    Tax rate (percent) from the first profit-tax setting.

    Only a PERCENT setting defines a rate; any other calculation code, or
    no profit-tax setting at all, gives 0.
    """
    for setting in settings:
        if setting.type == BonusSettingType.PROFIT_TAX:
            if setting.bonus_type == BonusCalculationCode.PERCENT:
                return setting.bonus
            return ZERO
    return ZERO


@non_signaling
def calculate_bonus_by_type(
    settings: Iterable[GroupBonusSetting],
    setting_type: int,
    base_amount: Decimal,
) -> Decimal:
    """Sum the bonus of every setting with ``setting_type``."""
    return calculate_total_bonus(
        base_amount,
        (s.to_rule() for s in settings if s.type == setting_type),
    )


def describe_setting_value(setting: GroupBonusSetting) -> str:
    """Short label such as ``5%``, ``1000 fixed`` or ``-3%``."""
    sign = "-" if setting.is_negative else ""
    if setting.is_percent:
        return f"{sign}{setting.bonus}%"
    return f"{sign}{setting.bonus} fixed"


@non_signaling
def calculate_employee_bonuses(
    settings: Iterable[GroupBonusSetting],
    base_amount: Decimal,
    resolve_employee_name: Callable[[str], str],
    resolve_type_name: Callable[[int], str],
) -> list[EmployeeBonus]:
    """One EmployeeBonus per employee-scoped setting, in input order."""
    bonuses: list[EmployeeBonus] = []
    for setting in settings:
        if not setting.employee_code:
            continue
        bonuses.append(EmployeeBonus(
            name=resolve_employee_name(setting.employee_code),
            bonus=calculate_bonus(base_amount, setting.to_rule()),
            type=setting.type,
            bonus_text=f"{resolve_type_name(setting.type)}({describe_setting_value(setting)})",
        ))
    return bonuses
