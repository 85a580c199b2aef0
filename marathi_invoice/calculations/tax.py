"""
GST / IGST derivation.

IGST applies the whole rate to the taxable base. CGST/SGST splits the
rate in half; each half is rounded to 2 places on its own and the net
payable is the sum of the rounded parts. Historical invoices were
produced this way, so the order of rounding must not change.
"""

from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Union

from pydantic import BaseModel, ConfigDict

from marathi_invoice.marathi.amounts import to_decimal


_TWO_PLACES = Decimal("0.01")


class TaxType(str, Enum):
    IGST = "IGST"
    CGST_SGST = "CGST/SGST"


class TaxBreakdown(BaseModel):
    model_config = ConfigDict(frozen=True)

    tax_type: TaxType
    taxable_amount: Decimal
    rate: Decimal
    igst: Decimal = Decimal("0.00")
    cgst: Decimal = Decimal("0.00")
    sgst: Decimal = Decimal("0.00")
    net_payable: Decimal

    @property
    def total_tax(self) -> Decimal:
        return self.igst + self.cgst + self.sgst


def round_money(value: Decimal) -> Decimal:
    return value.quantize(_TWO_PLACES, rounding=ROUND_HALF_UP)


def compute_tax(
    taxable: Union[Decimal, float, int, str],
    rate: Union[Decimal, float, int, str],
    tax_type: Union[TaxType, str] = TaxType.IGST
) -> TaxBreakdown:
    """
    Tax on a taxable base at a percentage rate.

    Example (CGST/SGST): base 1000 at 18% -> cgst 90.00, sgst 90.00, net 1180.00
    """
    base = to_decimal(taxable) or Decimal("0")
    pct = to_decimal(rate) or Decimal("0")
    tax_type = TaxType(tax_type)

    if tax_type == TaxType.IGST:
        igst = round_money(base * pct / 100)
        return TaxBreakdown(
            tax_type=tax_type,
            taxable_amount=round_money(base),
            rate=pct,
            igst=igst,
            net_payable=round_money(base + igst),
        )

    half = round_money(base * (pct / 2) / 100)
    return TaxBreakdown(
        tax_type=tax_type,
        taxable_amount=round_money(base),
        rate=pct,
        cgst=half,
        sgst=half,
        net_payable=round_money(base + half + half),
    )
