"""
Report Engine

DESIGN DECISION: Reports are computed from what the invoice service
actually returns. Nothing is estimated: an invoice without a readable
date never matches a date filter, and an unparseable total counts as 0.
"""

import re
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Iterable, Optional

from pydantic import BaseModel, Field, ValidationError, model_validator

from marathi_invoice.marathi.amounts import to_decimal
from marathi_invoice.marathi.digits import parse_number
from marathi_invoice.models.invoice import InvoiceRecord


FIXED_REPORT_COLUMNS = [
    "SR. NO",
    "CLIENT (MR. RA. RA.)",
    "PLACE",
    "CITY",
    "TOTAL SALES",
    "TOTAL EXPENSES",
    "GRAND TOTAL",
]

_NON_NUMERIC_RE = re.compile(r"[^0-9.\-]")
_FILENAME_UNSAFE_RE = re.compile(r"[^a-zA-Z0-9]")


class ReportError(Exception):
    """Report cannot be produced for the requested filter."""
    pass


class ReportFilter(BaseModel):
    """
    Date range and/or client filter.

    At least one of them must be set. The date range only applies when
    both ends are given.
    """

    start_date: Optional[date] = None
    end_date: Optional[date] = None
    client: Optional[str] = Field(
        default=None,
        description="Exact Mr. Ra. Ra. value"
    )

    @model_validator(mode='after')
    def require_a_filter(self) -> 'ReportFilter':
        if self.client is not None:
            self.client = self.client.strip() or None
        if not self.start_date and not self.end_date and not self.client:
            raise ValueError("Please select at least one filter (date range or client)")
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("End date cannot be before start date")
        return self

    @property
    def has_date_range(self) -> bool:
        return bool(self.start_date and self.end_date)

    def describe(self) -> dict[str, Any]:
        return {
            "start_date": self.start_date.isoformat() if self.start_date else None,
            "end_date": self.end_date.isoformat() if self.end_date else None,
            "client": self.client,
        }


class ReportSummary(BaseModel):
    """Dashboard figures."""

    total_invoices: int = 0
    total_revenue: Decimal = Decimal("0")
    this_month_invoices: int = 0
    this_month_revenue: Decimal = Decimal("0")
    last_month_invoices: int = 0
    last_month_revenue: Decimal = Decimal("0")


def parse_invoice_date(value: Optional[str]) -> Optional[date]:
    """
    Parse the date formats seen in stored invoices.

    ISO timestamps ("2025-08-01T10:00:00Z"), DD/MM/YYYY, DD-MM-YYYY and
    YYYY-MM-DD. None when nothing matches.
    """
    if not value:
        return None
    text = str(value).strip()

    if "T" in text or text.endswith("Z"):
        try:
            return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
        except ValueError:
            return None

    separator = "/" if "/" in text else "-" if "-" in text else None
    if separator is None:
        return None
    parts = text.split(separator)
    if len(parts) != 3 or not all(part.strip().isdigit() for part in parts):
        return None

    first, second, third = (int(part) for part in parts)
    try:
        if len(parts[0].strip()) == 4:
            return date(first, second, third)
        return date(third, second, first)
    except ValueError:
        return None


def record_date(record: InvoiceRecord) -> Optional[date]:
    """Invoice date, falling back to the service creation time."""
    return parse_invoice_date(record.data.get("invoiceDate") or record.created_at)


def grand_total_of(record: InvoiceRecord) -> Decimal:
    """
    Headline amount of an invoice.

    First present of grandTotalRs, grandTotal, netAmount, totalCollection;
    strings are stripped of everything but digits, '.' and '-'.
    """
    data = record.data
    raw = None
    for key in ("grandTotalRs", "grandTotal", "netAmount", "totalCollection"):
        if data.get(key) is not None:
            raw = data[key]
            break

    if raw is None or isinstance(raw, bool):
        return Decimal("0")
    if isinstance(raw, (int, float, Decimal)):
        return to_decimal(raw) or Decimal("0")
    cleaned = _NON_NUMERIC_RE.sub("", str(raw))
    if not cleaned:
        return Decimal("0")
    return to_decimal(cleaned) or Decimal("0")


def _previous_month(today: date) -> tuple[int, int]:
    if today.month == 1:
        return today.year - 1, 12
    return today.year, today.month - 1


def summarize(records: Iterable[InvoiceRecord], today: Optional[date] = None) -> ReportSummary:
    today = today or date.today()
    last_year, last_month = _previous_month(today)

    summary = ReportSummary()
    for record in records:
        total = grand_total_of(record)
        summary.total_invoices += 1
        summary.total_revenue += total

        when = record_date(record)
        if when is None:
            continue
        if (when.year, when.month) == (today.year, today.month):
            summary.this_month_invoices += 1
            summary.this_month_revenue += total
        elif (when.year, when.month) == (last_year, last_month):
            summary.last_month_invoices += 1
            summary.last_month_revenue += total
    return summary


def unique_clients(records: Iterable[InvoiceRecord]) -> list[str]:
    """Sorted distinct non-blank Mr. Ra. Ra. values."""
    return sorted({record.client for record in records if record.client})


def filter_records(records: Iterable[InvoiceRecord], report_filter: ReportFilter) -> list[InvoiceRecord]:
    matched = []
    for record in records:
        if report_filter.has_date_range:
            when = record_date(record)
            if when is None:
                continue
            if not (report_filter.start_date <= when <= report_filter.end_date):
                continue
        if report_filter.client and record.client != report_filter.client:
            continue
        matched.append(record)
    return matched


def no_match_message(report_filter: ReportFilter) -> str:
    if report_filter.has_date_range and report_filter.client:
        return f'No invoices found for the selected date range and client "{report_filter.client}"'
    if report_filter.has_date_range:
        return "No invoices found for the selected date range"
    if report_filter.client:
        return f'No invoices found for client "{report_filter.client}"'
    return "No invoices found"


def _money(value: Any) -> str:
    return f"{parse_number(value):.2f}"


def build_report_rows(records: list[InvoiceRecord]) -> tuple[list[str], list[list[Any]]]:
    """
    Header and rows of the invoice report.

    Fixed columns first, then one column per distinct day found in any
    invoice's daily table (sorted), holding that day's collection.
    """
    all_days = set()
    for record in records:
        for row in record.data.get("table") or []:
            if isinstance(row, dict) and row.get("date"):
                all_days.add(str(row["date"]))
    days = sorted(all_days)

    rows = []
    for index, record in enumerate(records, start=1):
        data = record.data
        daily = {}
        for row in data.get("table") or []:
            if isinstance(row, dict) and row.get("date") and row.get("collection"):
                daily[str(row["date"])] = parse_number(row["collection"])

        rows.append([
            index,
            data.get("mrRaRa") or "",
            data.get("place") or "",
            data.get("centre") or "",
            _money(data.get("totalCollection")),
            _money(data.get("expensesTotal")),
            _money(data.get("grandTotalRs") or data.get("netAmount")),
            *(f"{daily.get(day, 0):.2f}" for day in days),
        ])

    return FIXED_REPORT_COLUMNS + days, rows


def report_filename(report_filter: ReportFilter) -> str:
    """
    Invoice_Report[_DD-MM-YYYY_to_DD-MM-YYYY][_Client].xlsx, or
    Invoice_Report_<Client>_AllDates.xlsx for a client-only report.
    """
    client = _FILENAME_UNSAFE_RE.sub("_", report_filter.client) if report_filter.client else ""

    if not report_filter.start_date and not report_filter.end_date and client:
        return f"Invoice_Report_{client}_AllDates.xlsx"

    name = "Invoice_Report"
    if report_filter.has_date_range:
        start = report_filter.start_date.strftime("%d-%m-%Y")
        end = report_filter.end_date.strftime("%d-%m-%Y")
        name += f"_{start}_to_{end}"
    if client:
        name += f"_{client}"
    return name + ".xlsx"


def make_filter(
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    client: Optional[str] = None
) -> ReportFilter:
    """
    Build a ReportFilter from form inputs.

    Raises:
        ReportError: no filter selected, or an inverted date range
    """
    try:
        return ReportFilter(start_date=start_date, end_date=end_date, client=client)
    except ValidationError as e:
        message = e.errors()[0]["msg"].removeprefix("Value error, ")
        raise ReportError(message) from e
