"""
Aggregation primitives

Pure functions over sequences of ledger items: grouping, type totals and
the running-balance fold. No I/O; the report builders compose these.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Callable, Hashable, Iterable, Sequence, TypeVar

from core.ledger.models import ZERO, InstituteAccount, LedgerItem
from core.ledger.types import LedgerType

T = TypeVar("T")
K = TypeVar("K", bound=Hashable)


def chronological(items: Iterable[LedgerItem]) -> list[LedgerItem]:
    """Sort by (date, insertion order)"""
    return sorted(items, key=lambda item: (item.entry_date, item.seq))


def group_by(items: Iterable[T], key: Callable[[T], K]) -> dict[K, list[T]]:
    """Group preserving first-seen key order and item order within a group"""
    groups: dict[K, list[T]] = {}
    for item in items:
        groups.setdefault(key(item), []).append(item)
    return groups


def sum_amounts(items: Iterable[LedgerItem]) -> Decimal:
    return sum((item.amount for item in items), ZERO)


def sum_signed(items: Iterable[LedgerItem]) -> Decimal:
    """Income positive, expense negative"""
    return sum((item.signed_amount for item in items), ZERO)


def sum_balances(accounts: Iterable[InstituteAccount]) -> Decimal:
    return sum((account.balance for account in accounts), ZERO)


@dataclass(frozen=True)
class TypeTotals:
    """Income / expense split of a set of items"""

    income: Decimal = ZERO
    expense: Decimal = ZERO
    count: int = 0

    @property
    def net(self) -> Decimal:
        return self.income - self.expense


def totals_by_type(items: Iterable[LedgerItem]) -> TypeTotals:
    income = ZERO
    expense = ZERO
    count = 0
    for item in items:
        if item.item_type == LedgerType.INCOME.value:
            income += item.amount
        else:
            expense += item.amount
        count += 1
    return TypeTotals(income=income, expense=expense, count=count)


@dataclass(frozen=True)
class RunningRow:
    """One step of a running-balance fold"""

    item: LedgerItem
    debit: Decimal
    credit: Decimal
    balance: Decimal


def running_balance(
    items: Sequence[LedgerItem],
    opening: Decimal = ZERO,
) -> tuple[list[RunningRow], Decimal]:
    """Fold items in the given order, starting at opening

    Expense items go to the debit column, income items to credit. Each
    row carries the balance after that item is applied.

    Returns:
        (rows, closing balance)
    """
    balance = opening
    rows: list[RunningRow] = []
    for item in items:
        balance += item.signed_amount
        is_income = item.item_type == LedgerType.INCOME.value
        rows.append(
            RunningRow(
                item=item,
                debit=ZERO if is_income else item.amount,
                credit=item.amount if is_income else ZERO,
                balance=balance,
            )
        )
    return rows, balance
