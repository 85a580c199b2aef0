"""
Monetary value types.

An amount on the invoice is always a (rupees, paise) pair with paise in
0-99; the sign is carried separately (NetBalance) rather than spread over
the components.

DESIGN DECISION: "not filled in" is modelled as None, never as a zero
MonetaryAmount. Calculations return Optional[MonetaryAmount] and the
presentation layer renders None as a blank cell.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Union

from pydantic import BaseModel, ConfigDict, Field

from marathi_invoice.marathi.amounts import format_indian_number, split_rupees_paise, to_decimal


class MonetaryAmount(BaseModel):
    """
    Non-negative rupee/paise pair.

    Immutable: build a new one instead of editing fields.
    """
    model_config = ConfigDict(frozen=True)

    rupees: int = Field(
        default=0,
        ge=0,
        description="Whole rupees"
    )
    paise: int = Field(
        default=0,
        ge=0,
        le=99,
        description="Paise (0-99)"
    )

    @classmethod
    def zero(cls) -> "MonetaryAmount":
        return cls(rupees=0, paise=0)

    @classmethod
    def from_paise(cls, total_paise: int) -> "MonetaryAmount":
        """Build from an integer count of paise (sign is dropped)."""
        total_paise = abs(int(total_paise))
        return cls(rupees=total_paise // 100, paise=total_paise % 100)

    @classmethod
    def from_decimal(cls, value: Union[Decimal, float, int, str]) -> "MonetaryAmount":
        """
        Build from a combined decimal amount.

        Paise are rounded half-up; a rounded paise of 100 carries into rupees.
        Unparseable input gives zero.
        """
        amount = to_decimal(value)
        if amount is None:
            return cls.zero()
        rupees, paise = split_rupees_paise(abs(amount))
        return cls(rupees=rupees, paise=paise)

    @classmethod
    def from_parts(cls, rupees: Union[int, float, Decimal], paise: Union[int, float, Decimal] = 0) -> "MonetaryAmount":
        """
        Build from separately entered rupee and paise fields.

        Paise beyond 99 overflow into rupees (0 Rs 150 paise -> 1 Rs 50 paise).
        """
        total = Decimal(str(rupees)) * 100 + Decimal(str(paise))
        total = total.quantize(Decimal("1"), rounding=ROUND_HALF_UP)
        return cls.from_paise(int(total))

    @property
    def total_paise(self) -> int:
        return self.rupees * 100 + self.paise

    @property
    def is_zero(self) -> bool:
        return self.total_paise == 0

    def to_decimal(self) -> Decimal:
        return Decimal(self.total_paise) / 100

    def display(self) -> str:
        """Plain two-decimal rendering, e.g. "50.00"."""
        return f"{self.rupees}.{self.paise:02d}"

    def display_indian(self) -> str:
        """Indian digit grouping, e.g. "12,34,567.89"."""
        return format_indian_number(self.to_decimal())

    def __add__(self, other: "MonetaryAmount") -> "MonetaryAmount":
        if not isinstance(other, MonetaryAmount):
            return NotImplemented
        return MonetaryAmount.from_paise(self.total_paise + other.total_paise)


class NetBalance(BaseModel):
    """
    Signed balance: absolute amount plus a sign flag.

    is_negative is True exactly when sales are below expenses.
    """
    model_config = ConfigDict(frozen=True)

    amount: MonetaryAmount
    is_negative: bool = False

    @classmethod
    def from_paise(cls, signed_paise: int) -> "NetBalance":
        return cls(
            amount=MonetaryAmount.from_paise(abs(signed_paise)),
            is_negative=signed_paise < 0,
        )

    @property
    def signed_paise(self) -> int:
        return -self.amount.total_paise if self.is_negative else self.amount.total_paise

    def to_decimal(self) -> Decimal:
        return Decimal(self.signed_paise) / 100

    def display(self) -> str:
        prefix = "-" if self.is_negative else ""
        return prefix + self.amount.display()
