"""Tests for scripts/close_group.py."""

import importlib.util
import json
from pathlib import Path

import pytest
import yaml

SCRIPT = Path(__file__).resolve().parents[2] / "scripts" / "close_group.py"

EXPORT = {
    "group_code": "TG2026001",
    "bill_number": "B2026001",
    "customer_count": 20,
    "employees": {"E001": "Alice Chen", "E002": "Bob Lin"},
    "suppliers": {"S001": "Harbour Hotel"},
    "invoices": [
        {
            "invoiceNumber": "I001",
            "createdBy": "E001",
            "groupCode": "TG2026001",
            "groupName": "Kyoto Autumn",
            "invoiceItems": [
                {"payFor": "S001", "invoiceType": 0, "price": 12000, "quantity": 2},
            ],
        },
        {
            "invoiceNumber": "I002",
            "createdBy": "E002",
            "groupCode": "TG2026001",
            "groupName": "Kyoto Autumn",
            "invoiceItems": [
                {"payFor": "customer", "invoiceType": 9, "price": -3000, "quantity": 2},
            ],
        },
    ],
    "receipts": [{"actualAmount": 50000}, {"actualAmount": 30000}],
    "bonus_settings": [
        {"type": 0, "bonusType": 0, "bonus": 20},
        {"type": 3, "bonusType": 0, "bonus": 5},
        {"type": 3, "bonusType": 1, "bonus": 1000},
        {"type": 2, "bonusType": 0, "bonus": 10, "employeeCode": "E001"},
        {"type": 1, "bonusType": 1, "bonus": 500, "employeeCode": "E002"},
    ],
}


@pytest.fixture(scope="module")
def close_group_script():
    spec = importlib.util.spec_from_file_location("close_group", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


class TestCloseGroup:
    """Tests for the close_group() entry point."""

    def test_bill_and_profit(self, close_group_script, settings):
        result = close_group_script.close_group(EXPORT, settings)

        assert result["groupCode"] == "TG2026001"
        assert [g["payFor"] for g in result["bill"]["invoiceGroups"]] == [
            "Customer refund", "Harbour Hotel",
        ]
        assert result["bill"]["totalAmount"] == "30000"
        assert result["billTotalDisplay"] == "NT$30,000"
        # The refund line is negative in the invoice total
        assert result["profit"]["calculations"]["invoiceTotal"] == "18000"
        assert result["profit"]["calculations"]["companyProfit"] == result[
            "companyProfitDisplay"
        ].replace("NT$", "").replace(",", "")

    def test_unknown_codes_fall_back_to_code(self, close_group_script, settings):
        export = dict(EXPORT, suppliers={}, employees={})
        result = close_group_script.close_group(export, settings)

        hotel = result["bill"]["invoiceGroups"][1]
        assert hotel["payFor"] == "S001"
        assert hotel["invoices"][0]["createdBy"] == "E001"


class TestMain:
    """Tests for the command line."""

    def test_prints_json(self, close_group_script, tmp_path, capsys):
        path = tmp_path / "export.yaml"
        path.write_text(yaml.safe_dump(EXPORT, allow_unicode=True), encoding="utf-8")

        assert close_group_script.main([str(path), "--max-group-size", "1"]) == 0

        output = json.loads(capsys.readouterr().out)
        assert output["bill"]["totalAmount"] == "30000"

    def test_json_export(self, close_group_script, tmp_path, capsys):
        path = tmp_path / "export.json"
        path.write_text(json.dumps(EXPORT), encoding="utf-8")

        assert close_group_script.main([str(path)]) == 0
        assert json.loads(capsys.readouterr().out)["groupCode"] == "TG2026001"

    def test_missing_export(self, close_group_script, tmp_path, capsys):
        assert close_group_script.main([str(tmp_path / "absent.yaml")]) == 1
        assert "not found" in capsys.readouterr().err

    def test_actor_and_correlation_id_in_logs(
        self, close_group_script, tmp_path, capsys, captured_logs,
    ):
        path = tmp_path / "export.json"
        path.write_text(json.dumps(EXPORT), encoding="utf-8")

        assert close_group_script.main([str(path), "--actor", "E002"]) == 0
        capsys.readouterr()

        records = [r for r in captured_logs() if r["message"] == "group_profit_calculated"]
        assert records
        assert records[0]["actor_id"] == "E002"
        assert records[0]["group_code"] == "TG2026001"
        assert records[0]["correlation_id"]
