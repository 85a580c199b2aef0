"""
Core Data Models for Marathi Invoice

These models define the schemas for everything flowing through the system:
direct-entry ledger invoices, Excel-imported film distribution invoices,
stored invoice records and validation results.

DESIGN DECISION: Numeric user input is never rejected at the model layer.
Quantity, price and amount fields run through parse_number before
validation, so a blank or malformed field becomes 0 and the calculation
model decides whether that renders as blank or zero.
"""

from datetime import datetime
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)

from marathi_invoice.marathi.digits import parse_number
from marathi_invoice.models.money import MonetaryAmount, NetBalance


# Standard expense heads printed on the direct-entry sheet
EXPENSE_HEADS = (
    "Commission",
    "Porterage",
    "Car rental",
    "Bundle expenses",
    "Hundekari expenses",
    "Space rent",
    "Warai",
    "Other expenses",
)


def _as_text(v: Any) -> str:
    if v is None:
        return ""
    if isinstance(v, float) and v.is_integer():
        v = int(v)
    return str(v)


# =============================================================================
# DIRECT-ENTRY (LEDGER) INVOICE
# =============================================================================

class InvoiceLineItem(BaseModel):
    """
    One sales row: goods sold on a date at a per-unit price.

    The sheet has two quantity columns; piece wins when filled,
    otherwise crates is used.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    details: str = Field(
        default="",
        description="Item description"
    )
    date: str = Field(
        default="",
        description="Date as entered (free text)"
    )
    piece: float = Field(
        default=0,
        description="Quantity in pieces"
    )
    crates: float = Field(
        default=0,
        description="Quantity in crates"
    )
    unit_price: float = Field(
        default=0,
        description="Price per unit"
    )

    @field_validator('piece', 'crates', 'unit_price', mode='before')
    @classmethod
    def parse_numeric(cls, v: Any) -> float:
        return parse_number(v)

    @field_validator('details', 'date', mode='before')
    @classmethod
    def coerce_text(cls, v: Any) -> str:
        return _as_text(v)

    @property
    def quantity(self) -> float:
        return self.piece if self.piece > 0 else self.crates

    @property
    def is_blank(self) -> bool:
        return not self.details and self.quantity <= 0 and self.unit_price <= 0


class ExpenseEntry(BaseModel):
    """An expense row entered as separate rupee and paise fields."""
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(
        default="",
        description="Expense head"
    )
    rupees: float = Field(
        default=0,
        description="Rupee part as entered"
    )
    paise: float = Field(
        default=0,
        description="Paise part as entered"
    )

    @field_validator('rupees', 'paise', mode='before')
    @classmethod
    def parse_numeric(cls, v: Any) -> float:
        return parse_number(v)

    @field_validator('name', mode='before')
    @classmethod
    def coerce_text(cls, v: Any) -> str:
        return _as_text(v)

    @property
    def total_paise(self) -> int:
        """Signed integer paise for this row. A negative row is a refund or correction."""
        return round(self.rupees * 100 + self.paise)

    @property
    def is_filled(self) -> bool:
        return self.rupees != 0 or self.paise != 0


class InvoiceTotals(BaseModel):
    """
    Derived totals of a direct-entry invoice.

    total_sales and net_balance are None until at least one sales row
    has an amount; total_expenses is always present (zero is a real value).
    """
    model_config = ConfigDict(frozen=True)

    total_sales: Optional[MonetaryAmount] = None
    total_expenses: MonetaryAmount = Field(default_factory=MonetaryAmount.zero)
    net_balance: Optional[NetBalance] = None


class DirectInvoice(BaseModel):
    """
    A direct-entry invoice draft as typed by the operator.

    The draft is the unit of work for preview, validation and save.
    Nothing is persisted until the operator saves it, and a draft
    without an invoice number is never persisted.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    invoice_no: str = Field(
        default="",
        description="Invoice number (In_no)"
    )
    invoice_date: str = Field(
        default_factory=lambda: datetime.now().strftime("%d-%m-%Y"),
        description="Invoice date, DD-MM-YYYY"
    )
    mr_ra_ra: str = Field(
        default="",
        description="Client (Mr. Ra. Ra.)"
    )
    place: str = ""
    to: str = ""
    cheque_draft_no: str = ""
    received: str = ""
    deposit: str = ""
    ra_ra_no: str = Field(
        default="",
        description="Ra. Ra. No. / mobile number"
    )

    line_items: list[InvoiceLineItem] = Field(default_factory=list)
    expenses: list[ExpenseEntry] = Field(default_factory=list)

    @field_validator(
        'invoice_no', 'invoice_date', 'mr_ra_ra', 'place', 'to',
        'cheque_draft_no', 'received', 'deposit', 'ra_ra_no',
        mode='before'
    )
    @classmethod
    def coerce_text(cls, v: Any) -> str:
        return _as_text(v)

    @classmethod
    def blank(cls, sales_rows: int = 13, blank_expense_rows: int = 5) -> "DirectInvoice":
        """An empty sheet with the standard expense heads."""
        expenses = [ExpenseEntry(name=head) for head in EXPENSE_HEADS]
        expenses += [ExpenseEntry() for _ in range(blank_expense_rows)]
        return cls(
            line_items=[InvoiceLineItem() for _ in range(sales_rows)],
            expenses=expenses,
        )

    def to_record(self) -> dict[str, Any]:
        """
        Flat JSON-serialisable record for the remote invoice service.

        Amounts that are not filled in are blank strings; an expense total
        of zero is blank as it is on the printed sheet.
        """
        from marathi_invoice.calculations.ledger import compute_totals, row_total

        totals = compute_totals(self.line_items, self.expenses)

        table = []
        for item in self.line_items:
            amount = row_total(item.quantity, item.unit_price)
            if amount is None:
                continue
            table.append({
                "rs": amount.rupees,
                "paise": amount.paise,
                "details": item.details,
                "date": item.date,
                "piece": _as_text(item.piece) if item.piece else "",
                "crates": _as_text(item.crates) if item.crates else "",
                "price": _as_text(item.unit_price) if item.unit_price else "",
            })

        expenses = [
            {
                "name": entry.name,
                "rs": _as_text(entry.rupees),
                "paise": _as_text(entry.paise),
            }
            for entry in self.expenses
            if entry.is_filled
        ]

        sales = totals.total_sales
        expense_total = totals.total_expenses
        net = totals.net_balance

        return {
            "In_no": self.invoice_no,
            "invoiceDate": self.invoice_date,
            "mrRaRa": self.mr_ra_ra,
            "place": self.place,
            "to": self.to,
            "chequeDraftNo": self.cheque_draft_no,
            "received": self.received,
            "deposit": self.deposit,
            "raRaNo": self.ra_ra_no,
            "table": table,
            "expenses": expenses,
            "totalSalesRs": sales.rupees if sales else "",
            "totalSalesPaise": sales.paise if sales else "",
            "expensesRs": expense_total.rupees if expense_total.rupees > 0 else "",
            "expensesPaise": expense_total.paise if expense_total.paise > 0 else "",
            "expensesTotal": expense_total.display(),
            "netBalanceRs": net.amount.rupees if net else "",
            "netBalancePaise": net.amount.paise if net else "",
            "netBalanceNegative": net.is_negative if net else False,
            "grandTotalRs": net.amount.rupees if net else "",
            "grandTotalPaise": net.amount.paise if net else "",
        }


# =============================================================================
# FILM DISTRIBUTION (EXCEL) INVOICE
# =============================================================================

class DailyCollection(BaseModel):
    """Shows, audience and collection for one screening day."""

    date: str = Field(
        ...,
        description="Day label, DD-MM or DD-MM-YYYY"
    )
    show: float = 0
    aud: float = 0
    collection: float = 0

    @field_validator('show', 'aud', 'collection', mode='before')
    @classmethod
    def parse_numeric(cls, v: Any) -> float:
        return parse_number(v)

    @field_validator('date', mode='before')
    @classmethod
    def coerce_text(cls, v: Any) -> str:
        return _as_text(v).strip()


class CinemaInvoice(BaseModel):
    """
    One cinema row of a distribution workbook.

    Header fields are kept as text; totals and deductions are parsed
    leniently (unparseable -> 0).
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    invoice_no: str = Field(
        default="",
        description="In_no column, if the workbook has one"
    )
    client_name: str = Field(
        ...,
        min_length=1,
        description="BILL TO"
    )
    client_address: str = ""
    pan_no: str = ""
    gstin_no: str = ""
    cinema_name: str = Field(
        default="",
        description="CINEMA NAME"
    )
    centre: str = ""
    place_of_service: str = ""

    table: list[DailyCollection] = Field(default_factory=list)

    total_show: float = 0
    total_aud: float = 0
    total_collection: float = 0
    show_tax: float = 0
    other_deduction: float = 0

    @field_validator(
        'invoice_no', 'client_name', 'client_address', 'pan_no', 'gstin_no',
        'cinema_name', 'centre', 'place_of_service',
        mode='before'
    )
    @classmethod
    def coerce_text(cls, v: Any) -> str:
        return _as_text(v)

    @field_validator(
        'total_show', 'total_aud', 'total_collection', 'show_tax', 'other_deduction',
        mode='before'
    )
    @classmethod
    def parse_numeric(cls, v: Any) -> float:
        return parse_number(v)


# =============================================================================
# STORED RECORDS
# =============================================================================

class InvoiceRecord(BaseModel):
    """
    An invoice as returned by the remote service.

    `data` is the flat record that was uploaded; the service adds
    an id and a creation timestamp.
    """
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: Optional[str] = Field(
        default=None,
        description="Service-assigned id"
    )
    created_at: Optional[str] = Field(
        default=None,
        alias="createdAt",
        description="Creation timestamp as sent by the service"
    )
    data: dict[str, Any] = Field(default_factory=dict)

    @field_validator('id', mode='before')
    @classmethod
    def coerce_id(cls, v: Any) -> Optional[str]:
        return None if v is None else str(v)

    @field_validator('data', mode='before')
    @classmethod
    def coerce_data(cls, v: Any) -> dict:
        return v if isinstance(v, dict) else {}

    @property
    def invoice_no(self) -> str:
        return _as_text(self.data.get("In_no") or self.data.get("invoiceNo") or "").strip()

    @property
    def client(self) -> str:
        return _as_text(self.data.get("mrRaRa") or "").strip()


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single validation issue found."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'invalid_format', 'duplicate')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        ...,
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )
    suggested_fix: Optional[str] = Field(
        default=None,
        description="Suggested fix if available"
    )


class ValidationResult(BaseModel):
    """
    Result of the two-stage validation.

    Stage 1: Schema validation (required fields, formats)
    Stage 2: Semantic validation (totals make sense)
    """

    validation_id: UUID = Field(default_factory=uuid4)
    validated_at: datetime = Field(default_factory=datetime.utcnow)

    schema_valid: bool = Field(
        ...,
        description="Did schema validation pass?"
    )
    semantic_valid: bool = Field(
        ...,
        description="Did semantic validation pass?"
    )
    is_valid: bool = Field(
        ...,
        description="Overall validation result"
    )
    can_save: bool = Field(
        ...,
        description="Can the draft be persisted?"
    )

    issues: list[ValidationIssue] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)

    duplicate_of: Optional[str] = Field(
        default=None,
        description="Invoice number that already exists in storage"
    )

    @property
    def has_errors(self) -> bool:
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        return sum(1 for issue in self.issues if issue.severity == "error")
