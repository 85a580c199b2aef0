"""
Marathi text and number layer.

Pure, synchronous, never-raising helpers: Devanagari digits, Indian
amount formatting and words, and the local phonetic transliterator.
"""

from marathi_invoice.marathi.digits import (
    NumeralScript,
    contains_devanagari,
    contains_devanagari_digits,
    detect_numeral_script,
    format_devanagari_currency,
    format_devanagari_number,
    number_to_devanagari,
    parse_number,
    to_devanagari_digits,
    to_latin_digits,
)
from marathi_invoice.marathi.amounts import (
    AMOUNT_TOO_LARGE,
    amount_to_words,
    format_amount,
    format_indian_number,
    number_to_words,
)
from marathi_invoice.marathi.phonetic import phonetic_transliterate

__all__ = [
    "NumeralScript",
    "contains_devanagari",
    "contains_devanagari_digits",
    "detect_numeral_script",
    "format_devanagari_currency",
    "format_devanagari_number",
    "number_to_devanagari",
    "parse_number",
    "to_devanagari_digits",
    "to_latin_digits",
    "AMOUNT_TOO_LARGE",
    "amount_to_words",
    "format_amount",
    "format_indian_number",
    "number_to_words",
    "phonetic_transliterate",
]
