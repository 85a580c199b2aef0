"""Reports package - summaries, filtering and report rows over stored invoices."""

from marathi_invoice.reports.executor import (
    ReportError,
    ReportFilter,
    ReportSummary,
    build_report_rows,
    filter_records,
    grand_total_of,
    make_filter,
    no_match_message,
    parse_invoice_date,
    record_date,
    report_filename,
    summarize,
    unique_clients,
)

__all__ = [
    "ReportError",
    "ReportFilter",
    "ReportSummary",
    "build_report_rows",
    "filter_records",
    "grand_total_of",
    "make_filter",
    "no_match_message",
    "parse_invoice_date",
    "record_date",
    "report_filename",
    "summarize",
    "unique_clients",
]
