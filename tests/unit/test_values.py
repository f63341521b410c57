"""
Unit tests for the decimal money helpers.

Verifies:
- Cent-scaled addition, subtraction and multiplication
- Half-away-from-zero rounding
- Float inputs never leak binary representation error
- Currency formatting and amount validation
- Non-finite amounts and malformed row fields never raise
"""

from decimal import Decimal, InvalidOperation

import pytest

from tour_kernel.domain.values import (
    ZERO,
    format_currency,
    is_valid_amount,
    parse_amount,
    parse_code,
    percent_of,
    round_whole,
    safe_add,
    safe_multiply,
    safe_subtract,
    to_decimal,
)


class TestToDecimal:
    """Tests for boundary conversion."""

    def test_none_is_zero(self):
        assert to_decimal(None) == ZERO

    def test_decimal_passes_through(self):
        value = Decimal("12.345")
        assert to_decimal(value) is value

    def test_float_goes_through_str(self):
        assert to_decimal(0.1) == Decimal("0.1")

    def test_int_and_str(self):
        assert to_decimal(42) == Decimal("42")
        assert to_decimal("-7.50") == Decimal("-7.50")

    def test_invalid_string_raises(self):
        with pytest.raises(InvalidOperation):
            to_decimal("not a number")


class TestSafeAdd:
    """Tests for safe_add."""

    def test_no_operands_is_zero(self):
        assert safe_add() == Decimal("0")

    def test_classic_float_case(self):
        assert safe_add(0.1, 0.2) == Decimal("0.3")

    def test_single_operand_is_identity(self):
        assert safe_add(Decimal("19.99")) == Decimal("19.99")

    def test_many_operands(self):
        assert safe_add(100, Decimal("0.05"), "0.95", 0.5) == Decimal("101.5")

    def test_negative_operands(self):
        assert safe_add(10, -15.25) == Decimal("-5.25")

    def test_none_counts_as_zero(self):
        assert safe_add(None, 5) == Decimal("5")

    def test_sub_cent_rounds_half_away_from_zero(self):
        assert safe_add(Decimal("0.005")) == Decimal("0.01")
        assert safe_add(Decimal("-0.005")) == Decimal("-0.01")


class TestSafeSubtract:
    """Tests for safe_subtract."""

    def test_simple(self):
        assert safe_subtract(0.3, 0.1) == Decimal("0.2")

    def test_multiple_subtrahends(self):
        assert safe_subtract(100, 30, 20.5) == Decimal("49.5")

    def test_no_subtrahends(self):
        assert safe_subtract(12.34) == Decimal("12.34")

    def test_result_can_be_negative(self):
        assert safe_subtract(1, 2) == Decimal("-1")


class TestSafeMultiply:
    """Tests for safe_multiply."""

    def test_classic_float_case(self):
        assert safe_multiply(0.1, 3) == Decimal("0.3")

    def test_fractional_both_sides(self):
        assert safe_multiply(Decimal("1.5"), Decimal("2.5")) == Decimal("3.75")

    def test_zero(self):
        assert safe_multiply(0, 12345) == Decimal("0")

    def test_negative(self):
        assert safe_multiply(-2, Decimal("10.10")) == Decimal("-20.2")


class TestRoundWhole:
    """Tests for round_whole."""

    @pytest.mark.parametrize("value,expected", [
        ("2.5", "3"),
        ("-2.5", "-3"),
        ("2.4", "2"),
        ("1999.5", "2000"),
        ("0", "0"),
    ])
    def test_half_away_from_zero(self, value, expected):
        assert round_whole(Decimal(value)) == Decimal(expected)

    @pytest.mark.parametrize("value", ["Infinity", "-Infinity"])
    def test_infinity_returned_unchanged(self, value):
        assert round_whole(Decimal(value)) == Decimal(value)

    def test_nan_returned_unchanged(self):
        assert round_whole(Decimal("NaN")).is_nan()


class TestPercentOf:
    """Tests for percent_of."""

    def test_rounded_percentage(self):
        assert percent_of(Decimal("12345"), Decimal("5")) == Decimal("617")

    def test_nan_amount_gives_nan(self):
        assert percent_of(Decimal("NaN"), Decimal("20")).is_nan()

    def test_infinite_amount_stays_infinite(self):
        assert percent_of(Decimal("-Infinity"), Decimal("10")) == Decimal("-Infinity")


class TestNonFiniteArithmetic:
    """Infinities and NaN flow through the helpers without raising."""

    def test_opposite_infinities_add_to_nan(self):
        assert safe_add(Decimal("Infinity"), Decimal("-Infinity")).is_nan()

    def test_infinity_plus_finite(self):
        assert safe_add(Decimal("Infinity"), 1) == Decimal("Infinity")

    def test_subtract_nan(self):
        assert safe_subtract(100, Decimal("NaN")).is_nan()

    def test_infinity_times_zero_is_nan(self):
        assert safe_multiply(Decimal("Infinity"), 0).is_nan()

    def test_format_nan(self):
        assert format_currency(Decimal("NaN")) == "NT$NaN"

    def test_format_infinity(self):
        assert format_currency(Decimal("Infinity")) == "NT$Infinity"


class TestRowFieldParsing:
    """Tests for parse_amount and parse_code."""

    @pytest.mark.parametrize("value", ["", "abc", "12,000", [1]])
    def test_unparseable_amount_is_zero(self, value):
        assert parse_amount(value) == ZERO

    def test_parseable_amount(self):
        assert parse_amount("1200.50") == Decimal("1200.50")
        assert parse_amount(None) == ZERO

    def test_nan_string_is_a_number(self):
        assert parse_amount("NaN").is_nan()

    @pytest.mark.parametrize("value", ["x", "", None, "1.5", float("inf")])
    def test_unparseable_code_uses_default(self, value):
        assert parse_code(value) == 0
        assert parse_code(value, -1) == -1

    def test_parseable_code(self):
        assert parse_code("9") == 9
        assert parse_code(3) == 3


class TestFormatCurrency:
    """Tests for format_currency."""

    def test_thousands_separator(self):
        assert format_currency(12345) == "NT$12,345"

    def test_negative_sign_before_symbol(self):
        assert format_currency(-5000) == "-NT$5,000"

    def test_rounds_to_whole_units(self):
        assert format_currency(1234.56) == "NT$1,235"

    def test_zero(self):
        assert format_currency(0) == "NT$0"

    def test_custom_symbol(self):
        assert format_currency(Decimal("1000000"), symbol="$") == "$1,000,000"


class TestIsValidAmount:
    """Tests for is_valid_amount."""

    @pytest.mark.parametrize("value", [0, 10, 0.5, Decimal("99.99")])
    def test_valid(self, value):
        assert is_valid_amount(value) is True

    @pytest.mark.parametrize("value", [
        -1,
        -0.01,
        Decimal("-5"),
        float("nan"),
        float("inf"),
        Decimal("Infinity"),
        Decimal("NaN"),
        "100",
        None,
        True,
    ])
    def test_invalid(self, value):
        assert is_valid_amount(value) is False
