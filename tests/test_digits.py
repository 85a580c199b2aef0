"""Tests for the Devanagari digit mapper."""

import math
from decimal import Decimal

import pytest

from marathi_invoice.marathi.digits import (
    NumeralScript,
    contains_devanagari,
    contains_devanagari_digits,
    count_devanagari,
    detect_numeral_script,
    format_devanagari_currency,
    format_devanagari_number,
    number_to_devanagari,
    parse_number,
    to_devanagari_digits,
    to_latin_digits,
)


class TestDigitConversion:
    """Tests for the two digit translation directions."""

    def test_to_latin(self):
        assert to_latin_digits("१२७") == "127"

    def test_to_devanagari(self):
        assert to_devanagari_digits("Price: 100") == "Price: १००"

    def test_other_characters_pass_through(self):
        assert to_latin_digits("पावती क्र. ४५-अ") == "पावती क्र. 45-अ"
        assert to_devanagari_digits("INV/2025-08") == "INV/२०२५-०८"

    def test_blank_input_is_empty_string(self):
        assert to_latin_digits(None) == ""
        assert to_latin_digits("") == ""
        assert to_devanagari_digits(None) == ""

    @pytest.mark.parametrize("text", ["0", "0123456789", "9999", "10-08-2025"])
    def test_round_trip_is_idempotent(self, text):
        once = to_devanagari_digits(text)
        assert to_devanagari_digits(to_latin_digits(once)) == once

    def test_mixed_scripts(self):
        assert to_latin_digits("१2३") == "123"
        assert to_devanagari_digits("१2३") == "१२३"


class TestScriptDetection:

    def test_contains_devanagari_digits(self):
        assert contains_devanagari_digits("abc ५")
        assert not contains_devanagari_digits("abc 5")
        assert not contains_devanagari_digits(None)

    def test_contains_devanagari(self):
        assert contains_devanagari("मुंबई")
        assert not contains_devanagari("Mumbai")
        assert not contains_devanagari("")

    def test_count_devanagari(self):
        assert count_devanagari("मुंबई 12") == 5
        assert count_devanagari(None) == 0

    def test_detect_numeral_script(self):
        assert detect_numeral_script("१२") == NumeralScript.DEVANAGARI
        assert detect_numeral_script("12 आणि १") == NumeralScript.DEVANAGARI
        assert detect_numeral_script("12") == NumeralScript.LATIN
        assert detect_numeral_script("abc") is None
        assert detect_numeral_script(None) is None


class TestParseNumber:
    """parse_number never raises; junk is 0."""

    def test_devanagari_with_grouping(self):
        assert parse_number("१२,३४५.६७") == 12345.67

    def test_latin(self):
        assert parse_number("127") == 127.0
        assert parse_number("  -4.5 ") == -4.5

    def test_garbage_is_zero(self):
        assert parse_number("abc") == 0
        assert parse_number("") == 0
        assert parse_number(None) == 0
        assert parse_number("-") == 0

    def test_trailing_suffix_is_dropped(self):
        assert parse_number("12.5kg") == 12.5
        assert parse_number("१०० रु.") == 100.0

    def test_numeric_types(self):
        assert parse_number(5) == 5.0
        assert parse_number(Decimal("2.25")) == 2.25
        assert parse_number(True) == 0.0

    def test_non_finite_is_zero(self):
        assert parse_number(float("nan")) == 0.0
        assert parse_number(math.inf) == 0.0
        assert parse_number("1e999") == 0.0


class TestNumberFormatting:

    def test_number_to_devanagari(self):
        assert number_to_devanagari(127) == "१२७"
        assert number_to_devanagari(127.0) == "१२७"
        assert number_to_devanagari(127.5) == "१२७.५"
        assert number_to_devanagari(None) == ""

    def test_format_devanagari_number(self):
        assert format_devanagari_number(127.5) == "१२७.५०"
        assert format_devanagari_number(3, decimals=0) == "३"

    def test_currency_blank_for_zero(self):
        assert format_devanagari_currency(0) == ""
        assert format_devanagari_currency(None) == ""
        assert format_devanagari_currency(10) == "१०.००"
