"""
Direct-entry ledger calculations.

Pure functions over sales rows and expense rows. All sums are done in
integer paise.

Blank vs zero:
- a sales row without quantity or price has no amount (None), not 0.00
- total sales of exactly zero is None, the sheet shows a blank cell
- total expenses is always a MonetaryAmount; zero expenses are a real value
- net balance is None whenever total sales is None
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional, Union

from marathi_invoice.marathi.amounts import to_decimal
from marathi_invoice.models.invoice import ExpenseEntry, InvoiceLineItem, InvoiceTotals
from marathi_invoice.models.money import MonetaryAmount, NetBalance


Number = Union[int, float, Decimal, str, None]


def row_total(quantity: Number, unit_price: Number) -> Optional[MonetaryAmount]:
    """
    Amount for one sales row, rounded half-up to the paisa.

    Returns None when either quantity or price is zero or unset. A negative
    quantity or price is blanked the same way instead of billed as a credit.

    Example: row_total(5, 10) -> MonetaryAmount(rupees=50, paise=0)
    """
    q = to_decimal(quantity)
    p = to_decimal(unit_price)
    if q is None or p is None or q <= 0 or p <= 0:
        return None

    total_paise = (q * p * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return MonetaryAmount.from_paise(int(total_paise))


def line_amount(item: InvoiceLineItem) -> Optional[MonetaryAmount]:
    return row_total(item.quantity, item.unit_price)


def total_sales(amounts: Iterable[Optional[MonetaryAmount]]) -> Optional[MonetaryAmount]:
    """
    Sum the filled row amounts.

    None entries are skipped. A sum of exactly zero is None.
    """
    total = sum(amount.total_paise for amount in amounts if amount is not None)
    if total == 0:
        return None
    return MonetaryAmount.from_paise(total)


def total_expenses(expenses: Iterable[Union[ExpenseEntry, MonetaryAmount]]) -> MonetaryAmount:
    """
    Sum of all expense rows; zero when nothing is entered.

    Negative rows reduce the total. A total below zero is shown as zero.
    """
    total = sum(entry.total_paise for entry in expenses)
    return MonetaryAmount.from_paise(max(total, 0))


def net_balance(
    sales: Optional[MonetaryAmount],
    expenses: MonetaryAmount
) -> Optional[NetBalance]:
    """
    Sales minus expenses as an absolute amount plus a sign flag.

    Example: net_balance(50.00, 70.00) -> 20.00 with is_negative=True
    """
    if sales is None:
        return None
    return NetBalance.from_paise(sales.total_paise - expenses.total_paise)


def compute_totals(
    line_items: Iterable[InvoiceLineItem],
    expenses: Iterable[ExpenseEntry]
) -> InvoiceTotals:
    sales = total_sales(line_amount(item) for item in line_items)
    expense_total = total_expenses(expenses)
    return InvoiceTotals(
        total_sales=sales,
        total_expenses=expense_total,
        net_balance=net_balance(sales, expense_total),
    )
