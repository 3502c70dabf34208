"""
Ledger data model

Records read from and written to the ledger tables, plus the money helpers
shared by posting and reporting.

Money is a Decimal quantised to two places in Python and an integer number
of minor units (paise) in the database, so balance updates can be a single
atomic `balance_minor = balance_minor + ?` write.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from core.ledger.types import AccountStatus, LedgerType, SourceTag

MONEY_QUANT = Decimal("0.01")
MINOR_UNITS = 100
ZERO = Decimal("0.00")


class PostingValidationError(ValueError):
    """Posting request rejected before anything is written"""

    pass


# =========================================================================
# Money helpers
# =========================================================================


def to_money(value: Decimal | int | str | float) -> Decimal:
    """Quantise a value to two decimal places (ROUND_HALF_UP)

    Floats go through str() so 0.1 stays 0.10.
    """
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
        if not amount.is_finite():
            raise PostingValidationError(f"Invalid amount: {value!r}")
        return amount.quantize(MONEY_QUANT, rounding=ROUND_HALF_UP)
    except InvalidOperation as e:
        raise PostingValidationError(f"Invalid amount: {value!r}") from e


def to_minor(value: Decimal | int | str | float) -> int:
    """Money -> integer minor units"""
    return int(to_money(value) * MINOR_UNITS)


def from_minor(minor: int | None) -> Decimal:
    """Integer minor units -> money"""
    if minor is None:
        return ZERO
    return (Decimal(minor) / MINOR_UNITS).quantize(MONEY_QUANT)


def signed_amount(amount: Decimal, ledger_type: str) -> Decimal:
    """Income counts positive, expense negative"""
    if ledger_type == LedgerType.INCOME.value:
        return amount
    return -amount


def parse_iso_date(value: str | date) -> date:
    """ISO calendar date (YYYY-MM-DD) -> date

    Raises:
        ValueError: malformed value
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(value)


# =========================================================================
# Records
# =========================================================================


@dataclass
class Institute:
    """Institute (owned by the institute CRUD layer, read for names)"""

    institute_id: str
    tenant_id: str
    name: str


@dataclass
class Ledger:
    """Named income/expense bucket

    Unique per (tenant, institute, name, ledger_type).
    """

    ledger_id: str
    tenant_id: str
    name: str
    ledger_type: str
    institute_id: str | None = None
    description: str | None = None
    created_at: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.ledger_id,
            "name": self.name,
            "type": self.ledger_type,
            "instituteId": self.institute_id,
            "description": self.description,
        }


@dataclass
class Category:
    """Optional income/expense tag on a ledger item"""

    category_id: str
    tenant_id: str
    name: str
    category_type: str


@dataclass
class LedgerItem:
    """One signed, dated transaction against a ledger

    item_type is always the owning ledger's type. seq is the insertion
    order and breaks ties between items on the same date.
    """

    item_id: str
    seq: int
    tenant_id: str
    ledger_id: str
    item_type: str
    entry_date: date
    amount: Decimal
    description: str
    source: str

    institute_id: str | None = None
    category_id: str | None = None
    payment_method: str | None = None
    reference_no: str | None = None
    source_id: str | None = None
    created_at: str | None = None

    # Joined display names (filled by report reads)
    ledger_name: str | None = None
    category_name: str | None = None
    institute_name: str | None = None

    @property
    def signed_amount(self) -> Decimal:
        return signed_amount(self.amount, self.item_type)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.item_id,
            "tenantId": self.tenant_id,
            "instituteId": self.institute_id,
            "ledgerId": self.ledger_id,
            "type": self.item_type,
            "date": self.entry_date.isoformat(),
            "amount": self.amount,
            "description": self.description,
            "categoryId": self.category_id,
            "paymentMethod": self.payment_method,
            "referenceNo": self.reference_no,
            "source": self.source,
            "sourceId": self.source_id,
        }


@dataclass
class InstituteAccount:
    """Bank account of an institute

    balance only ever moves by signed deltas from the posting engine.
    """

    account_id: str
    seq: int
    tenant_id: str
    institute_id: str
    account_name: str
    balance: Decimal
    status: str = AccountStatus.ACTIVE.value
    account_number: str | None = None
    bank_name: str | None = None
    ifsc_code: str | None = None
    created_at: str | None = None
    institute_name: str | None = None

    @property
    def is_active(self) -> bool:
        return self.status == AccountStatus.ACTIVE.value

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.account_id,
            "tenantId": self.tenant_id,
            "instituteId": self.institute_id,
            "accountName": self.account_name,
            "accountNumber": self.account_number,
            "bankName": self.bank_name,
            "ifscCode": self.ifsc_code,
            "balance": self.balance,
            "status": self.status,
        }


@dataclass
class PostingRequest:
    """Normalised description of one ledger posting

    Validated on construction; an invalid request raises
    PostingValidationError before anything touches the store.
    """

    tenant_id: str
    ledger_name: str
    ledger_type: LedgerType
    amount: Decimal
    description: str
    entry_date: date
    source: SourceTag
    source_id: str | None = None
    institute_id: str | None = None
    payment_method: str | None = None
    reference_no: str | None = None
    category_name: str | None = None

    def __post_init__(self) -> None:
        if not self.tenant_id:
            raise PostingValidationError("tenant_id is required")
        if not self.ledger_name or not self.ledger_name.strip():
            raise PostingValidationError("ledger_name is required")
        self.ledger_name = self.ledger_name.strip()

        try:
            self.ledger_type = LedgerType(self.ledger_type)
        except ValueError as e:
            raise PostingValidationError(f"Invalid ledger type: {self.ledger_type!r}") from e
        try:
            self.source = SourceTag(self.source)
        except ValueError as e:
            raise PostingValidationError(f"Invalid source: {self.source!r}") from e

        self.amount = to_money(self.amount)
        if self.amount < 0:
            raise PostingValidationError(f"Amount must not be negative: {self.amount}")

        try:
            self.entry_date = parse_iso_date(self.entry_date)
        except (TypeError, ValueError) as e:
            raise PostingValidationError(f"Invalid date: {self.entry_date!r}") from e

        # Only manual entries may lack a source id; anything else has to be reversible
        if self.source != SourceTag.MANUAL and not self.source_id:
            raise PostingValidationError(
                f"source_id is required for source '{self.source.value}'"
            )

    @property
    def balance_delta(self) -> Decimal:
        """Signed change applied to the institute account"""
        return signed_amount(self.amount, self.ledger_type.value)
