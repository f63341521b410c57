"""
Engine settings schema.

Frozen dataclasses parsed from YAML by ``tour_config.loader``.  These are
the configuration constants the engines take as parameters: the refund
type code, the bill chunk size, the default administrative cost per
traveller and the display labels.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

from tour_kernel.exceptions import InvalidConfigError


@dataclass(frozen=True)
class PaymentLabelSettings:
    """Display names for the reserved payee categories."""

    customer_refund: str
    foreign_payment: str

    def __post_init__(self) -> None:
        for attr in ("customer_refund", "foreign_payment"):
            if not getattr(self, attr).strip():
                raise InvalidConfigError(f"payment_labels.{attr}", getattr(self, attr), "cannot be empty")


@dataclass(frozen=True)
class EngineSettings:
    """Validated engine configuration."""

    config_id: str
    version: int
    payment_labels: PaymentLabelSettings
    refund_type_code: int = 9
    max_group_size: int = 5
    cost_per_customer: Decimal = Decimal("10")
    currency_symbol: str = "NT$"
    unknown_invoice_type: str = "Unknown type ({code})"
    invoice_item_type_names: dict[int, str] = field(default_factory=dict)
    bonus_setting_type_names: dict[int, str] = field(default_factory=dict)
    checksum: str = ""

    def __post_init__(self) -> None:
        if self.max_group_size < 1:
            raise InvalidConfigError("bill.max_group_size", self.max_group_size, "must be at least 1")
        if self.cost_per_customer < 0:
            raise InvalidConfigError("profit.cost_per_customer", self.cost_per_customer, "cannot be negative")
        if "{code}" not in self.unknown_invoice_type:
            raise InvalidConfigError(
                "labels.unknown_invoice_type", self.unknown_invoice_type, "must contain '{code}'",
            )
