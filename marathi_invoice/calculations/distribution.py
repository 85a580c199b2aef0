"""
Film distribution invoice calculations.

A distribution invoice bills a cinema for the distributor's share of the
week's collection:

    net collection = total collection - (show tax + other deductions)
    taxable amount = net collection x share %
    net payable    = taxable amount + GST/IGST

The daily table is laid out over the screening window: one row per day,
filled from the imported workbook where a day matches.
"""

import re
from datetime import date, timedelta
from decimal import Decimal
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from marathi_invoice.calculations.tax import TaxBreakdown, TaxType, compute_tax
from marathi_invoice.marathi.amounts import amount_to_words, to_decimal
from marathi_invoice.models.invoice import CinemaInvoice, DailyCollection


_DMY_RE = re.compile(r"^(\d{1,2})[/-](\d{1,2})[/-](\d{4})$")
_DMY_STRICT_RE = re.compile(r"^\d{2}[/-]\d{2}[/-]\d{4}$")
_ISO_DATE_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")

# A distribution week is billed over days, never years.
MAX_SCREENING_DAYS = 366


def parse_dmy(value: str) -> Optional[date]:
    """Parse DD/MM/YYYY or DD-MM-YYYY; None when invalid."""
    if not value:
        return None
    match = _DMY_RE.match(value.strip())
    if not match:
        return None
    day, month, year = (int(part) for part in match.groups())
    try:
        return date(year, month, day)
    except ValueError:
        return None


def normalize_date(value: Optional[str]) -> str:
    """
    Normalise a day label to DD-MM-YYYY where possible.

    "01/08/2025" -> "01-08-2025", "2025-08-01" -> "01-08-2025".
    Anything else (e.g. "23-05") is returned unchanged.
    """
    if not value:
        return ""
    value = value.strip()
    if _DMY_STRICT_RE.match(value):
        return value.replace("/", "-")
    match = _ISO_DATE_RE.match(value)
    if match:
        year, month, day = match.groups()
        return f"{day}-{month}-{year}"
    return value


def generate_date_range(start: Optional[str], end: Optional[str]) -> list[str]:
    """
    Every day from start to end inclusive, as DD-MM-YYYY.

    Empty when either end is missing or unparseable, end is before start,
    or the window is longer than MAX_SCREENING_DAYS.
    """
    start_date = parse_dmy(start or "")
    end_date = parse_dmy(end or "")
    if start_date is None or end_date is None:
        return []
    span = (end_date - start_date).days
    if span < 0 or span >= MAX_SCREENING_DAYS:
        return []

    days = []
    current = start_date
    while True:
        days.append(f"{current.day:02d}-{current.month:02d}-{current.year:04d}")
        if current >= end_date:
            break
        current += timedelta(days=1)
    return days


def _day_key(label: str, year: Optional[int]) -> str:
    """Key for matching imported day labels (DD-MM) against a full date range."""
    normalized = normalize_date(label)
    if year is not None and re.match(r"^\d{2}-\d{2}$", normalized):
        return f"{normalized}-{year}"
    return normalized


def fill_screening_rows(
    table: list[DailyCollection],
    screening_from: Optional[str],
    screening_to: Optional[str]
) -> list[DailyCollection]:
    """
    Lay the imported daily figures out over the screening window.

    Days without imported data get zeros. Without a usable window the
    imported rows are returned with their dates normalised.
    """
    date_range = generate_date_range(screening_from, screening_to)
    if not date_range:
        return [
            row.model_copy(update={"date": normalize_date(row.date)})
            for row in table
        ]

    start = parse_dmy(screening_from or "")
    year = start.year if start else None
    existing = {_day_key(row.date, year): row for row in table if row.date}

    rows = []
    for day in date_range:
        found = existing.get(day)
        rows.append(DailyCollection(
            date=day,
            show=found.show if found else 0,
            aud=found.aud if found else 0,
            collection=found.collection if found else 0,
        ))
    return rows


class DistributionSummary(BaseModel):
    """Everything printed in the totals block of a distribution invoice."""
    model_config = ConfigDict(frozen=True)

    rows: list[DailyCollection] = Field(default_factory=list)
    total_show: Decimal
    total_aud: Decimal
    total_collection: Decimal
    show_tax: Decimal
    other_deduction: Decimal
    total_deduction: Decimal
    net_collection: Decimal
    distribution_percent: Decimal
    taxable_amount: Decimal
    tax: TaxBreakdown
    amount_in_words: str

    @property
    def net_payable(self) -> Decimal:
        return self.tax.net_payable


def _sum(values) -> Decimal:
    return sum((to_decimal(v) or Decimal("0") for v in values), Decimal("0"))


def compute_distribution(
    invoice: CinemaInvoice,
    distribution_percent: Union[Decimal, float, int, str] = Decimal("45"),
    gst_rate: Union[Decimal, float, int, str] = Decimal("18"),
    tax_type: Union[TaxType, str] = TaxType.IGST,
    screening_from: Optional[str] = None,
    screening_to: Optional[str] = None
) -> DistributionSummary:
    """
    Totals, deductions, distributor share and tax for one cinema.

    Table sums win; the workbook's TOTAL columns are used only when the
    table sums to zero. A share of 0 falls back to 45%.
    """
    rows = fill_screening_rows(invoice.table, screening_from, screening_to)

    total_show = _sum(row.show for row in rows) or (to_decimal(invoice.total_show) or Decimal("0"))
    total_aud = _sum(row.aud for row in rows) or (to_decimal(invoice.total_aud) or Decimal("0"))
    total_collection = (
        _sum(row.collection for row in rows)
        or (to_decimal(invoice.total_collection) or Decimal("0"))
    )

    show_tax = to_decimal(invoice.show_tax) or Decimal("0")
    other_deduction = to_decimal(invoice.other_deduction) or Decimal("0")
    total_deduction = show_tax + other_deduction
    net_collection = total_collection - total_deduction

    percent = to_decimal(distribution_percent) or Decimal("45")
    taxable = net_collection * percent / 100

    tax = compute_tax(taxable, gst_rate, tax_type)

    return DistributionSummary(
        rows=rows,
        total_show=total_show,
        total_aud=total_aud,
        total_collection=total_collection,
        show_tax=show_tax,
        other_deduction=other_deduction,
        total_deduction=total_deduction,
        net_collection=net_collection,
        distribution_percent=percent,
        taxable_amount=tax.taxable_amount,
        tax=tax,
        amount_in_words=amount_to_words(tax.net_payable),
    )
