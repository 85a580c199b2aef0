"""Tests for Indian amount formatting and amount-in-words."""

from decimal import Decimal

import pytest

from marathi_invoice.marathi.amounts import (
    AMOUNT_TOO_LARGE,
    MAX_WORDS_AMOUNT,
    amount_to_words,
    format_amount,
    format_indian_number,
    number_to_words,
    split_rupees_paise,
    to_decimal,
)
from marathi_invoice.marathi.digits import parse_number


class TestToDecimal:

    def test_float_goes_through_str(self):
        assert to_decimal(0.1) == Decimal("0.1")

    def test_string_uses_lenient_parser(self):
        assert to_decimal("१,२३४.५०") == Decimal("1234.5")
        assert to_decimal("abc") == Decimal("0.0")

    def test_missing_and_non_finite(self):
        assert to_decimal(None) is None
        assert to_decimal(float("nan")) is None
        assert to_decimal(Decimal("Infinity")) is None


class TestSplitRupeesPaise:

    def test_plain(self):
        assert split_rupees_paise(Decimal("1234.50")) == (1234, 50)

    def test_half_up(self):
        assert split_rupees_paise(Decimal("10.005")) == (10, 1)

    def test_carry_into_rupees(self):
        assert split_rupees_paise(Decimal("9.996")) == (10, 0)


class TestIndianFormatting:

    def test_grouping(self):
        assert format_indian_number(1234567.891) == "12,34,567.89"
        assert format_indian_number(100) == "100.00"
        assert format_indian_number(1000) == "1,000.00"
        assert format_indian_number(123456789) == "12,34,56,789.00"

    def test_negative(self):
        assert format_indian_number(-1234) == "-1,234.00"

    def test_negative_zero_is_normalised(self):
        assert format_indian_number("-0.001") == "0.00"

    def test_half_up(self):
        assert format_indian_number(Decimal("2.345")) == "2.35"

    def test_format_amount_in_devanagari(self):
        assert format_amount(1234567.5) == "१२,३४,५६७.५०"

    def test_format_amount_blank_for_zero_and_missing(self):
        assert format_amount(0) == ""
        assert format_amount(None) == ""
        assert format_amount("") == ""


class TestNumberToWords:

    def test_zero(self):
        assert number_to_words(0) == "Zero"

    def test_teens_and_tens(self):
        assert number_to_words(13) == "Thirteen"
        assert number_to_words(40) == "Forty"
        assert number_to_words(99) == "Ninety Nine"

    def test_hundreds(self):
        assert number_to_words(100) == "One Hundred"
        assert number_to_words(105) == "One Hundred and Five"

    def test_indian_scale(self):
        assert number_to_words(100000) == "One Lakh"
        assert number_to_words(10234567) == (
            "One Crore Two Lakh Thirty Four Thousand Five Hundred and Sixty Seven"
        )

    def test_negative(self):
        assert number_to_words(-5) == "Minus Five"

    def test_ceiling(self):
        assert number_to_words(MAX_WORDS_AMOUNT) == (
            "Ninety Nine Crore Ninety Nine Lakh Ninety Nine Thousand "
            "Nine Hundred and Ninety Nine"
        )
        assert number_to_words(MAX_WORDS_AMOUNT + 1) == AMOUNT_TOO_LARGE


class TestAmountToWords:

    def test_rupees_and_paise(self):
        assert amount_to_words(1234.50) == (
            "One Thousand Two Hundred and Thirty Four Rupees and Fifty Paise only"
        )

    def test_crore_lakh_boundaries(self):
        assert amount_to_words(10234567.89) == (
            "One Crore Two Lakh Thirty Four Thousand Five Hundred and Sixty Seven "
            "Rupees and Eighty Nine Paise only"
        )

    def test_whole_rupees(self):
        assert amount_to_words(500) == "Five Hundred Rupees only"
        assert amount_to_words(0) == "Zero Rupees only"

    def test_missing_is_blank(self):
        assert amount_to_words(None) == ""

    def test_negative(self):
        assert amount_to_words(-20) == "Minus Twenty Rupees only"

    @pytest.mark.parametrize("value", [0, 1, 99999, 10_000_000, MAX_WORDS_AMOUNT])
    def test_within_ceiling_never_sentinel(self, value):
        assert amount_to_words(value) != AMOUNT_TOO_LARGE

    @pytest.mark.parametrize("value", [MAX_WORDS_AMOUNT + 1, 1_000_000_000, 5e12, "999999999.5"])
    def test_above_ceiling_is_sentinel(self, value):
        assert amount_to_words(value) == AMOUNT_TOO_LARGE

    @pytest.mark.parametrize("value", [
        "0", "1", "20.50", "10.005", "2.345", "0.995", "1234567.895",
        "10234567.89", "-20.50", "999999999.994", "999999999.995",
    ])
    def test_words_survive_display_round_trip(self, value):
        amount = Decimal(value)
        shown = format_amount(amount)
        assert amount_to_words(parse_number(shown)) == amount_to_words(amount)
