"""
Amount Formatter

Indian digit grouping (12,34,567.89), Devanagari amount display and
English amount-in-words using the Indian numbering scale
(Hundred, Thousand, Lakh, Crore).

Rounding is half-up at the paisa and is applied once, on the decimal
value as written, so a formatted amount parsed back formats the same way.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Optional, Union

from marathi_invoice.marathi.digits import parse_number, to_devanagari_digits


Number = Union[int, float, Decimal]

# Words expansion ceiling (99 crore 99 lakh ...)
MAX_WORDS_AMOUNT = 999_999_999
AMOUNT_TOO_LARGE = "Amount too large"

_ONES = [
    "", "One", "Two", "Three", "Four", "Five", "Six", "Seven", "Eight", "Nine",
    "Ten", "Eleven", "Twelve", "Thirteen", "Fourteen", "Fifteen", "Sixteen",
    "Seventeen", "Eighteen", "Nineteen",
]
_TENS = [
    "", "", "Twenty", "Thirty", "Forty", "Fifty", "Sixty", "Seventy", "Eighty", "Ninety",
]


def to_decimal(value: Union[str, Number, None]) -> Optional[Decimal]:
    """
    Convert a user/display value to Decimal.

    Floats go through str() so 0.1 stays 0.1. Strings use the lenient
    digit-aware parser. None, NaN and infinities give None.
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        if isinstance(value, Decimal):
            result = value
        elif isinstance(value, (int, float)):
            result = Decimal(str(value))
        else:
            result = Decimal(str(parse_number(value)))
    except InvalidOperation:
        return None
    if not result.is_finite():
        return None
    return result


def split_rupees_paise(amount: Decimal) -> tuple[int, int]:
    """
    Split a non-negative amount into (rupees, paise).

    Paise are rounded half-up; 99.5 paise carries into the next rupee so
    paise is always 0-99.
    """
    rupees = int(amount)
    paise = int(((amount - rupees) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    if paise >= 100:
        rupees += 1
        paise -= 100
    return rupees, paise


def _group_indian(digits: str) -> str:
    """Group an integer digit string as 3 then 2,2,2... from the right."""
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups + [tail])


def format_indian_number(value: Union[str, Number, None], decimals: int = 2) -> str:
    """
    Format with Indian digit grouping and ASCII digits.

    Examples:
        1234567.891 -> "12,34,567.89"
        -1234 -> "-1,234.00"
    """
    amount = to_decimal(value)
    if amount is None:
        return ""

    quantum = Decimal(1).scaleb(-decimals) if decimals > 0 else Decimal(1)
    amount = amount.quantize(quantum, rounding=ROUND_HALF_UP)
    if amount == 0:
        amount = abs(amount)

    text = format(amount, "f")
    sign = ""
    if text.startswith("-"):
        sign, text = "-", text[1:]

    left, _, right = text.partition(".")
    grouped = _group_indian(left)
    return sign + grouped + ("." + right if right else "")


def format_amount(value: Union[str, Number, None], decimals: int = 2) -> str:
    """
    Invoice display of an amount: Indian grouping in Devanagari digits.

    Zero and missing amounts are rendered blank.

    Example: 1234567.5 -> "१२,३४,५६७.५०"
    """
    amount = to_decimal(value)
    if amount is None or amount == 0:
        return ""
    return to_devanagari_digits(format_indian_number(amount, decimals))


def _two_digit_words(n: int) -> str:
    if n > 19:
        words = _TENS[n // 10]
        if n % 10:
            words += " " + _ONES[n % 10]
        return words
    return _ONES[n]


def number_to_words(number: Optional[int]) -> str:
    """
    Spell an integer in English using the Indian scale.

    Examples:
        0 -> "Zero"
        1234 -> "One Thousand Two Hundred and Thirty Four"
        10234567 -> "One Crore Two Lakh Thirty Four Thousand Five Hundred and Sixty Seven"
    """
    if number is None:
        return ""

    n = int(number)
    if n < 0:
        return "Minus " + number_to_words(-n)
    if n == 0:
        return "Zero"
    if n > MAX_WORDS_AMOUNT:
        return AMOUNT_TOO_LARGE

    crore = n // 10_000_000
    lakh = (n // 100_000) % 100
    thousand = (n // 1000) % 100
    hundred = (n // 100) % 10
    rest = n % 100

    parts = []
    if crore:
        parts.append(f"{_two_digit_words(crore)} Crore")
    if lakh:
        parts.append(f"{_two_digit_words(lakh)} Lakh")
    if thousand:
        parts.append(f"{_two_digit_words(thousand)} Thousand")
    if hundred:
        parts.append(f"{_ONES[hundred]} Hundred")
    if rest:
        if parts:
            parts.append("and")
        parts.append(_two_digit_words(rest))

    return " ".join(parts)


def amount_to_words(value: Union[str, Number, None]) -> str:
    """
    Spell an amount as rupees and paise.

    Examples:
        1234.50 -> "One Thousand Two Hundred and Thirty Four Rupees and Fifty Paise only"
        0 -> "Zero Rupees only"
        1_000_000_000 -> "Amount too large"
    """
    amount = to_decimal(value)
    if amount is None:
        return ""

    prefix = ""
    if amount < 0:
        prefix, amount = "Minus ", -amount

    if amount > MAX_WORDS_AMOUNT:
        return AMOUNT_TOO_LARGE

    rupees, paise = split_rupees_paise(amount)
    words = f"{number_to_words(rupees)} Rupees"
    if paise > 0:
        words += f" and {number_to_words(paise)} Paise"
    return f"{prefix}{words} only"
