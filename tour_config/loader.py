"""
Configuration Loader (``tour_config.loader``).

Responsibility
--------------
Loads a YAML settings file and parses it into the frozen
``tour_config.schema`` dataclasses.  Runtime callers go through
``tour_config.get_active_config()`` rather than calling this directly.

Failure modes
-------------
* Missing YAML file  -> ``ConfigNotFoundError``.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Missing required keys or out-of-range values  -> ``InvalidConfigError``.
"""

from __future__ import annotations

import hashlib
import json
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

import yaml

from tour_config.schema import EngineSettings, PaymentLabelSettings
from tour_kernel.exceptions import ConfigNotFoundError, InvalidConfigError


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        ConfigNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
    """
    if not path.is_file():
        raise ConfigNotFoundError(str(path))
    with open(path, encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def _require(data: dict[str, Any], key: str, prefix: str) -> Any:
    if key not in data or data[key] is None:
        raise InvalidConfigError(f"{prefix}{key}", None, "is required")
    return data[key]


def _parse_int(value: Any, field_name: str) -> int:
    if isinstance(value, bool):
        raise InvalidConfigError(field_name, value, "must be an integer")
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise InvalidConfigError(field_name, value, "must be an integer") from e


def _parse_decimal(value: Any, field_name: str) -> Decimal:
    try:
        return Decimal(str(value))
    except InvalidOperation as e:
        raise InvalidConfigError(field_name, value, "must be a number") from e


def parse_code_names(data: dict[Any, Any] | None, field_name: str) -> dict[int, str]:
    """Parse a ``code: name`` mapping; YAML may give the codes as strings."""
    return {
        _parse_int(code, f"{field_name}.{code}"): str(name)
        for code, name in (data or {}).items()
    }


def parse_payment_labels(data: dict[str, Any]) -> PaymentLabelSettings:
    """Parse the ``bill.payment_labels`` section."""
    return PaymentLabelSettings(
        customer_refund=str(_require(data, "customer_refund", "bill.payment_labels.")),
        foreign_payment=str(_require(data, "foreign_payment", "bill.payment_labels.")),
    )


def parse_engine_settings(data: dict[str, Any]) -> EngineSettings:
    """
    Parse ``EngineSettings`` from a loaded YAML document.

    Preconditions:
        - ``data`` has ``config_id`` and a ``bill.payment_labels`` section.
    Postconditions:
        - Returns a validated, frozen ``EngineSettings`` carrying the
          checksum of ``data``.
    Raises:
        InvalidConfigError: on missing keys or invalid values.
    """
    bill = data.get("bill") or {}
    profit = data.get("profit") or {}
    labels = data.get("labels") or {}

    return EngineSettings(
        config_id=str(_require(data, "config_id", "")),
        version=_parse_int(data.get("version", 1), "version"),
        payment_labels=parse_payment_labels(_require(bill, "payment_labels", "bill.")),
        refund_type_code=_parse_int(bill.get("refund_type_code", 9), "bill.refund_type_code"),
        max_group_size=_parse_int(bill.get("max_group_size", 5), "bill.max_group_size"),
        cost_per_customer=_parse_decimal(
            profit.get("cost_per_customer", 10), "profit.cost_per_customer",
        ),
        currency_symbol=str(profit.get("currency_symbol", "NT$")),
        unknown_invoice_type=str(labels.get("unknown_invoice_type", "Unknown type ({code})")),
        invoice_item_type_names=parse_code_names(
            labels.get("invoice_item_types"), "labels.invoice_item_types",
        ),
        bonus_setting_type_names=parse_code_names(
            labels.get("bonus_setting_types"), "labels.bonus_setting_types",
        ),
        checksum=compute_checksum(data),
    )


def compute_checksum(data: dict[str, Any]) -> str:
    """SHA-256 of the canonical JSON serialization of ``data``."""
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()
