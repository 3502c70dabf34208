"""
Report engine

Six read-only views over the transaction log and the account balances.

The store does the row selection (tenant / institute / ledger / date);
everything after that is done by the pure `build_*` functions below,
which take plain item and account lists and return the JSON payload.

Usage:
```python
reports = ReportEngine(db)
payload = await reports.day_book(DayBookFilter.from_params(tenant_id, start_date="2024-01-01"))
```
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Iterable, Sequence

from core.ledger.aggregation import (
    chronological,
    group_by,
    running_balance,
    sum_amounts,
    sum_balances,
    sum_signed,
    totals_by_type,
)
from core.ledger.filters import (
    BalanceSheetFilter,
    ConsolidatedFilter,
    DayBookFilter,
    IncomeExpenditureFilter,
    LedgerStatementFilter,
    TrialBalanceFilter,
)
from core.ledger.models import ZERO, InstituteAccount, Ledger, LedgerItem
from core.ledger.store import LedgerStore
from core.ledger.types import UNASSIGNED, UNCATEGORIZED, LedgerType

if TYPE_CHECKING:
    from adapters.db.sqlite_adapter import SQLiteAdapter

logger = logging.getLogger(__name__)


# =========================================================================
# Pure builders
# =========================================================================


def build_day_book(items: Iterable[LedgerItem]) -> dict[str, Any]:
    """Chronological list plus income/expense totals"""
    ordered = chronological(items)
    totals = totals_by_type(ordered)
    return {
        "entries": [
            {
                "id": item.item_id,
                "date": item.entry_date.isoformat(),
                "description": item.description,
                "ledger": item.ledger_name,
                "ledgerType": item.item_type,
                "category": item.category_name,
                "institute": item.institute_name,
                "amount": item.amount,
                "paymentMethod": item.payment_method,
                "referenceNo": item.reference_no,
                "type": item.item_type,
            }
            for item in ordered
        ],
        "summary": {
            "totalIncome": totals.income,
            "totalExpense": totals.expense,
            "netBalance": totals.net,
            "totalEntries": totals.count,
        },
    }


def build_trial_balance(items: Iterable[LedgerItem]) -> dict[str, Any]:
    """Per-ledger totals in the debit (expense) or credit (income) column"""
    rows = []
    for ledger_id, ledger_items in group_by(items, lambda item: item.ledger_id).items():
        first = ledger_items[0]
        total = sum_amounts(ledger_items)
        is_income = first.item_type == LedgerType.INCOME.value
        rows.append(
            {
                "ledgerId": ledger_id,
                "ledgerName": first.ledger_name,
                "ledgerType": first.item_type,
                "debit": ZERO if is_income else total,
                "credit": total if is_income else ZERO,
                "totalAmount": total,
                "transactionCount": len(ledger_items),
            }
        )
    rows.sort(key=lambda row: (row["ledgerType"], row["ledgerName"] or ""))

    total_debit = sum((row["debit"] for row in rows), ZERO)
    total_credit = sum((row["credit"] for row in rows), ZERO)
    return {
        "ledgers": rows,
        "totals": {
            "totalDebit": total_debit,
            "totalCredit": total_credit,
            "difference": total_credit - total_debit,
        },
    }


def _ledger_totals(items: Iterable[LedgerItem]) -> list[dict[str, Any]]:
    rows = [
        {
            "ledgerId": ledger_id,
            "ledgerName": ledger_items[0].ledger_name,
            "total": sum_amounts(ledger_items),
        }
        for ledger_id, ledger_items in group_by(items, lambda item: item.ledger_id).items()
    ]
    rows.sort(key=lambda row: row["ledgerName"] or "")
    return rows


def build_balance_sheet(
    accounts: Sequence[InstituteAccount],
    income_items: Iterable[LedgerItem],
    expense_items: Iterable[LedgerItem],
) -> dict[str, Any]:
    """Bank balances, income by ledger, expenses by ledger

    Salary postings already sit in the expense ledgers, so salaryExpense
    is always 0.
    """
    income = _ledger_totals(income_items)
    expenses = _ledger_totals(expense_items)

    total_bank = sum_balances(accounts)
    total_income = sum((row["total"] for row in income), ZERO)
    total_expense = sum((row["total"] for row in expenses), ZERO)

    return {
        "assets": {
            "bankAccounts": [
                {
                    "accountId": account.account_id,
                    "accountName": account.account_name,
                    "bankName": account.bank_name,
                    "balance": account.balance,
                    "institute": account.institute_name,
                }
                for account in accounts
            ],
            "totalBankBalance": total_bank,
        },
        "income": {"items": income, "total": total_income},
        "expenses": {"items": expenses, "salaryExpense": ZERO, "total": total_expense},
        "summary": {
            "totalAssets": total_bank,
            "totalIncome": total_income,
            "totalExpenses": total_expense,
            "netBalance": total_income - total_expense,
        },
    }


def build_ledger_statement(
    ledger: Ledger | None,
    opening_items: Iterable[LedgerItem],
    range_items: Iterable[LedgerItem],
) -> dict[str, Any]:
    """Opening balance, running balance per entry, closing balance"""
    opening = sum_signed(opening_items)
    rows, closing = running_balance(chronological(range_items), opening)

    return {
        "ledger": ledger.to_dict() if ledger else None,
        "openingBalance": opening,
        "closingBalance": closing,
        "totalDebit": sum((row.debit for row in rows), ZERO),
        "totalCredit": sum((row.credit for row in rows), ZERO),
        "entries": [
            {
                "id": row.item.item_id,
                "date": row.item.entry_date.isoformat(),
                "description": row.item.description,
                "category": row.item.category_name,
                "institute": row.item.institute_name,
                "debit": row.debit,
                "credit": row.credit,
                "amount": row.item.amount,
                "balance": row.balance,
                "paymentMethod": row.item.payment_method,
                "referenceNo": row.item.reference_no,
                "source": row.item.source,
            }
            for row in rows
        ],
    }


def _ledgers_with_categories(items: Iterable[LedgerItem]) -> list[dict[str, Any]]:
    ledgers = []
    for ledger_id, ledger_items in group_by(items, lambda item: item.ledger_id).items():
        categories = [
            {
                "categoryId": category_id,
                "categoryName": category_items[0].category_name or UNCATEGORIZED,
                "total": sum_amounts(category_items),
                "count": len(category_items),
            }
            for category_id, category_items in group_by(
                ledger_items, lambda item: item.category_id
            ).items()
        ]
        categories.sort(key=lambda row: row["categoryName"])
        ledgers.append(
            {
                "ledgerId": ledger_id,
                "ledgerName": ledger_items[0].ledger_name,
                "categories": categories,
                "total": sum_amounts(ledger_items),
            }
        )
    ledgers.sort(key=lambda row: row["ledgerName"] or "")
    return ledgers


def build_income_expenditure(items: Iterable[LedgerItem]) -> dict[str, Any]:
    """Ledger -> category breakdown for each side, and the surplus"""
    by_type = group_by(items, lambda item: item.item_type)
    income = _ledgers_with_categories(by_type.get(LedgerType.INCOME.value, []))
    expenses = _ledgers_with_categories(by_type.get(LedgerType.EXPENSE.value, []))

    total_income = sum((row["total"] for row in income), ZERO)
    total_expense = sum((row["total"] for row in expenses), ZERO)
    return {
        "income": income,
        "expenses": expenses,
        "totalIncome": total_income,
        "totalExpense": total_expense,
        "surplus": total_income - total_expense,
    }


def build_consolidated(
    items: Iterable[LedgerItem],
    accounts: Iterable[InstituteAccount],
) -> dict[str, Any]:
    """Per-institute rollup merged with active bank balances

    Only institutes that have transactions in range are listed; items
    without an institute are grouped under "Unassigned".
    """
    bank_by_institute = {
        institute_id: sum_balances(institute_accounts)
        for institute_id, institute_accounts in group_by(
            accounts, lambda account: account.institute_id
        ).items()
    }

    institutes = []
    for institute_id, institute_items in group_by(items, lambda item: item.institute_id).items():
        totals = totals_by_type(institute_items)
        institutes.append(
            {
                "instituteId": institute_id,
                "instituteName": institute_items[0].institute_name or UNASSIGNED,
                "totalIncome": totals.income,
                "totalExpense": totals.expense,
                "netBalance": totals.net,
                "bankBalance": bank_by_institute.get(institute_id, ZERO),
                "transactionCount": totals.count,
            }
        )
    institutes.sort(key=lambda row: row["instituteName"])

    return {
        "institutes": institutes,
        "grandTotals": {
            "totalIncome": sum((row["totalIncome"] for row in institutes), ZERO),
            "totalExpense": sum((row["totalExpense"] for row in institutes), ZERO),
            "netBalance": sum((row["netBalance"] for row in institutes), ZERO),
            "bankBalance": sum((row["bankBalance"] for row in institutes), ZERO),
        },
    }


# =========================================================================
# Engine
# =========================================================================


class ReportEngine:
    """Report engine

    Args:
        db: SQLite adapter (read-only is enough)
    """

    def __init__(self, db: SQLiteAdapter):
        self.store = LedgerStore(db)

    async def day_book(self, flt: DayBookFilter) -> dict[str, Any]:
        items = await self.store.fetch_items(flt.item_query())
        return build_day_book(items)

    async def trial_balance(self, flt: TrialBalanceFilter) -> dict[str, Any]:
        items = await self.store.fetch_items(flt.item_query())
        return build_trial_balance(items)

    async def balance_sheet(self, flt: BalanceSheetFilter) -> dict[str, Any]:
        accounts = await self.store.list_accounts(
            tenant_id=flt.tenant_id,
            institute_id=flt.institute_id,
            active_only=True,
        )
        income_items = await self.store.fetch_items(flt.item_query(LedgerType.INCOME.value))
        expense_items = await self.store.fetch_items(flt.item_query(LedgerType.EXPENSE.value))
        return build_balance_sheet(accounts, income_items, expense_items)

    async def ledger_statement(self, flt: LedgerStatementFilter) -> dict[str, Any]:
        """Statement for one ledger; ledger is None for an unknown id"""
        ledger = await self.store.get_ledger(flt.ledger_id, flt.tenant_id)
        if ledger is None:
            logger.debug(f"Ledger statement for unknown ledger {flt.ledger_id}")

        opening_query = flt.opening_query()
        opening_items = (
            await self.store.fetch_items(opening_query) if opening_query is not None else []
        )
        range_items = await self.store.fetch_items(flt.range_query())
        return build_ledger_statement(ledger, opening_items, range_items)

    async def income_expenditure(self, flt: IncomeExpenditureFilter) -> dict[str, Any]:
        items = await self.store.fetch_items(flt.item_query())
        return build_income_expenditure(items)

    async def consolidated(self, flt: ConsolidatedFilter) -> dict[str, Any]:
        items = await self.store.fetch_items(flt.item_query())
        accounts = await self.store.list_accounts(tenant_id=flt.tenant_id, active_only=True)
        return build_consolidated(items, accounts)
