"""
Invoice Calculation Model

Pure functions: no I/O, no shared state, safe to call repeatedly.
"""

from marathi_invoice.calculations.ledger import (
    compute_totals,
    line_amount,
    net_balance,
    row_total,
    total_expenses,
    total_sales,
)
from marathi_invoice.calculations.tax import TaxBreakdown, TaxType, compute_tax
from marathi_invoice.calculations.distribution import (
    DistributionSummary,
    compute_distribution,
    fill_screening_rows,
    generate_date_range,
    normalize_date,
    parse_dmy,
)

__all__ = [
    "compute_totals",
    "line_amount",
    "net_balance",
    "row_total",
    "total_expenses",
    "total_sales",
    "TaxBreakdown",
    "TaxType",
    "compute_tax",
    "DistributionSummary",
    "compute_distribution",
    "fill_screening_rows",
    "generate_date_range",
    "normalize_date",
    "parse_dmy",
]
