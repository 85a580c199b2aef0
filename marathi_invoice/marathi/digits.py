"""
Digit Mapper

Bidirectional conversion between ASCII digits and Devanagari numeral
glyphs (० = 0, १ = 1, ... ९ = 9), plus numeric parsing that accepts
either script.

Every function here is total: blank, None or malformed input yields an
empty string or zero, never an exception. Callers are display and
calculation paths where an unfilled field must behave as zero.
"""

import math
import re
from decimal import Decimal
from enum import Enum
from typing import Optional, Union


DEVANAGARI_DIGITS = "०१२३४५६७८९"
LATIN_DIGITS = "0123456789"

_TO_LATIN = str.maketrans(DEVANAGARI_DIGITS, LATIN_DIGITS)
_TO_DEVANAGARI = str.maketrans(LATIN_DIGITS, DEVANAGARI_DIGITS)

_DEVANAGARI_DIGIT_RE = re.compile("[०-९]")
_LATIN_DIGIT_RE = re.compile("[0-9]")
_DEVANAGARI_RE = re.compile("[ऀ-ॿ]")

# Leading numeric prefix, the way a lenient float parser reads "12.5kg" as 12.5
_LEADING_NUMBER_RE = re.compile(r"^[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")

Number = Union[int, float, Decimal]


class NumeralScript(str, Enum):
    """Script a run of digits is written in."""
    LATIN = "latin"
    DEVANAGARI = "devanagari"


def to_latin_digits(text: Optional[str]) -> str:
    """
    Replace every Devanagari digit with its ASCII equivalent.

    Example: "१२७" -> "127". Other characters pass through unchanged.
    """
    if not text:
        return ""
    return str(text).translate(_TO_LATIN)


def to_devanagari_digits(text: Optional[str]) -> str:
    """
    Replace every ASCII digit with its Devanagari equivalent.

    Example: "Price: 100" -> "Price: १००"
    """
    if not text:
        return ""
    return str(text).translate(_TO_DEVANAGARI)


def contains_devanagari_digits(text: Optional[str]) -> bool:
    if not text:
        return False
    return bool(_DEVANAGARI_DIGIT_RE.search(text))


def contains_devanagari(text: Optional[str]) -> bool:
    """True if the text has any code point in the Devanagari block (U+0900-U+097F)."""
    if not text:
        return False
    return bool(_DEVANAGARI_RE.search(text))


def count_devanagari(text: Optional[str]) -> int:
    if not text:
        return 0
    return len(_DEVANAGARI_RE.findall(text))


def detect_numeral_script(text: Optional[str]) -> Optional[NumeralScript]:
    """
    Classify the digits of a string.

    Devanagari wins as soon as one Devanagari digit is present; None
    means the text has no digits at all.
    """
    if contains_devanagari_digits(text):
        return NumeralScript.DEVANAGARI
    if text and _LATIN_DIGIT_RE.search(text):
        return NumeralScript.LATIN
    return None


def parse_number(text: Union[str, Number, None]) -> float:
    """
    Parse a number written with Marathi or English digits.

    Thousands separators are ignored and a trailing non-numeric suffix is
    dropped. Anything unparseable is 0.

    Examples:
        "१२,३४५.६७" -> 12345.67
        "127" -> 127.0
        "abc" -> 0.0
    """
    if text is None or isinstance(text, bool):
        return 0.0

    if isinstance(text, (int, float, Decimal)):
        value = float(text)
        return value if math.isfinite(value) else 0.0

    normalized = to_latin_digits(str(text).strip()).replace(",", "")
    match = _LEADING_NUMBER_RE.match(normalized)
    if not match:
        return 0.0

    value = float(match.group())
    return value if math.isfinite(value) else 0.0


def number_to_devanagari(num: Optional[Number]) -> str:
    """
    Render a number with Devanagari digits.

    Example: 127 -> "१२७", 127.5 -> "१२७.५"
    """
    if num is None:
        return ""
    if isinstance(num, float) and num.is_integer():
        num = int(num)
    return to_devanagari_digits(str(num))


def format_devanagari_number(num: Optional[Number], decimals: int = 2) -> str:
    """
    Fixed-decimal rendering with Devanagari digits.

    Example: 127.5 -> "१२७.५०"
    """
    if num is None:
        return ""
    return to_devanagari_digits(f"{float(num):.{decimals}f}")


def format_devanagari_currency(value: Optional[Number]) -> str:
    """Currency cell text: blank for None and zero, two decimals otherwise."""
    if value is None or value == 0:
        return ""
    return format_devanagari_number(value, 2)
