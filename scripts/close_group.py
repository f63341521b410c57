#!/usr/bin/env python3
"""
Close a travel group from an exported data file.

Reads a YAML (or JSON) export holding a group's invoices, receipts, bonus
settings, traveller count and the employee/supplier lookup tables, then
prints the disbursement bill groups and the profit report as JSON.

Export layout:

    group_code: TG2026001
    bill_number: B2026001
    customer_count: 24
    employees: {E001: Alice}
    suppliers: {S001: Harbour Hotel}
    invoices:
      - invoiceNumber: I001
        createdBy: E001
        groupCode: TG2026001
        groupName: Kyoto Autumn
        invoiceItems:
          - {payFor: S001, invoiceType: 0, price: 12000, quantity: 2}
    receipts:
      - {actualAmount: 80000}
    bonus_settings:
      - {type: 0, bonusType: 0, bonus: 20}
      - {type: 2, bonusType: 0, bonus: 5, employeeCode: E001}

Usage:
    python3 scripts/close_group.py export.yaml
    python3 scripts/close_group.py export.yaml --config my_settings.yaml
    python3 scripts/close_group.py export.yaml --max-group-size 3 --verbose
    python3 scripts/close_group.py export.yaml --actor E001
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any
from uuid import uuid4

import yaml

ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

from tour_config import get_active_config  # noqa: E402
from tour_config.schema import EngineSettings  # noqa: E402
from tour_engines.bill import BillInvoice  # noqa: E402
from tour_engines.bonus import GroupBonusSetting  # noqa: E402
from tour_engines.totals import InvoiceItem, Receipt  # noqa: E402
from tour_kernel.domain.values import format_currency  # noqa: E402
from tour_kernel.logging_config import LogContext, configure_logging  # noqa: E402
from tour_modules.bill import BillService  # noqa: E402
from tour_modules.group import GroupProfitService  # noqa: E402


def _lookup(table: dict[str, str]):
    """Name lookup that falls back to the code itself."""
    def resolve(code: str) -> str:
        return table.get(code, code)
    return resolve


def load_export(path: Path) -> dict[str, Any]:
    with open(path, encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def close_group(
    data: dict[str, Any],
    settings: EngineSettings,
    max_group_size: int | None = None,
) -> dict[str, Any]:
    """Run the bill and profit pipelines over one export."""
    employees = _lookup({str(k): str(v) for k, v in (data.get("employees") or {}).items()})
    suppliers = _lookup({str(k): str(v) for k, v in (data.get("suppliers") or {}).items()})
    raw_invoices = data.get("invoices") or []

    bill = BillService(settings).calculate(
        [BillInvoice.from_mapping(inv) for inv in raw_invoices],
        resolve_employee_name=employees,
        resolve_supplier_name=suppliers,
        max_group_size=max_group_size,
        bill_number=data.get("bill_number"),
    )

    report = GroupProfitService(settings).calculate(
        invoices=[
            [InvoiceItem.from_mapping(item) for item in inv.get("invoiceItems") or []]
            for inv in raw_invoices
        ],
        receipts=[Receipt.from_mapping(r) for r in data.get("receipts") or []],
        bonus_settings=[GroupBonusSetting.from_mapping(s) for s in data.get("bonus_settings") or []],
        customer_count=int(data.get("customer_count") or 0),
        resolve_employee_name=employees,
        group_code=data.get("group_code"),
    )

    return {
        "groupCode": data.get("group_code"),
        "bill": bill.to_dict(),
        "billTotalDisplay": format_currency(bill.total_amount, settings.currency_symbol),
        "profit": report.to_dict(),
        "companyProfitDisplay": format_currency(
            report.figures.company_profit, settings.currency_symbol,
        ),
    }


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Close a travel group: disbursement bill and profit report",
    )
    parser.add_argument("export", type=Path, help="YAML or JSON export of the group")
    parser.add_argument("--config", type=Path, default=None, help="Engine settings YAML")
    parser.add_argument(
        "--max-group-size", type=int, default=None,
        help="Invoices per bill row before a payee is split (default from config)",
    )
    parser.add_argument("--actor", default=None, help="Employee code of whoever closes the group")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log to stderr")
    args = parser.parse_args(argv)

    configure_logging(level=logging.DEBUG if args.verbose else logging.WARNING)

    if not args.export.is_file():
        print(f"Export file not found: {args.export}", file=sys.stderr)
        return 1

    with LogContext.bind(correlation_id=str(uuid4()), actor_id=args.actor):
        settings = get_active_config(args.config)
        result = close_group(load_export(args.export), settings, args.max_group_size)
    print(json.dumps(result, indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
