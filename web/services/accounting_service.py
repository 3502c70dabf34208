"""
Accounting service

Glue between the HTTP routes and the accounting core: builds typed
filters from query parameters, runs postings and reports, and hands back
JSON-ready dicts.
"""

import logging
from decimal import Decimal
from typing import Any

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.ledger.filters import (
    BalanceSheetFilter,
    ConsolidatedFilter,
    DayBookFilter,
    IncomeExpenditureFilter,
    LedgerStatementFilter,
    TrialBalanceFilter,
)
from core.ledger.models import PostingRequest
from core.ledger.posting import PostingEngine
from core.ledger.reports import ReportEngine
from core.ledger.store import LedgerStore
from core.ledger.types import AccountStatus

logger = logging.getLogger(__name__)


class AccountingService:
    """Accounting service

    Args:
        db: SQLite adapter (writable for postings/accounts)
    """

    def __init__(self, db: SQLiteAdapter):
        self.db = db
        self.store = LedgerStore(db)

    # =========================================================================
    # Postings
    # =========================================================================

    async def post(self, tenant_id: str, **fields: Any) -> dict[str, Any]:
        """Post one entry

        Raises:
            PostingValidationError: invalid request
        """
        request = PostingRequest(tenant_id=tenant_id, **fields)
        item = await PostingEngine(self.db).post(request)
        return item.to_dict()

    async def reverse(self, tenant_id: str, source: str, source_id: str) -> int:
        """Reverse every item of a source record within the tenant"""
        return await PostingEngine(self.db).reverse(source, source_id, tenant_id)

    # =========================================================================
    # Reports
    # =========================================================================

    async def day_book(
        self,
        tenant_id: str,
        institute_id: str | None = None,
        start_date: str | None = None,
        end_date: str | None = None,
    ) -> dict[str, Any]:
        flt = DayBookFilter.from_params(tenant_id, institute_id, start_date, end_date)
        return await ReportEngine(self.db).day_book(flt)

    async def trial_balance(
        self,
        tenant_id: str,
        institute_id: str | None = None,
        start_date: str | None = None,
        end_date: str | None = None,
    ) -> dict[str, Any]:
        flt = TrialBalanceFilter.from_params(tenant_id, institute_id, start_date, end_date)
        return await ReportEngine(self.db).trial_balance(flt)

    async def balance_sheet(
        self,
        tenant_id: str,
        institute_id: str | None = None,
        start_date: str | None = None,
        end_date: str | None = None,
    ) -> dict[str, Any]:
        flt = BalanceSheetFilter.from_params(tenant_id, institute_id, start_date, end_date)
        return await ReportEngine(self.db).balance_sheet(flt)

    async def ledger_statement(
        self,
        tenant_id: str,
        ledger_id: str | None,
        institute_id: str | None = None,
        start_date: str | None = None,
        end_date: str | None = None,
    ) -> dict[str, Any]:
        flt = LedgerStatementFilter.from_params(
            ledger_id, tenant_id, institute_id, start_date, end_date
        )
        return await ReportEngine(self.db).ledger_statement(flt)

    async def income_expenditure(
        self,
        tenant_id: str,
        institute_id: str | None = None,
        start_date: str | None = None,
        end_date: str | None = None,
    ) -> dict[str, Any]:
        flt = IncomeExpenditureFilter.from_params(tenant_id, institute_id, start_date, end_date)
        return await ReportEngine(self.db).income_expenditure(flt)

    async def consolidated(
        self,
        tenant_id: str,
        start_date: str | None = None,
        end_date: str | None = None,
    ) -> dict[str, Any]:
        flt = ConsolidatedFilter.from_params(tenant_id, start_date, end_date)
        return await ReportEngine(self.db).consolidated(flt)

    # =========================================================================
    # Administration
    # =========================================================================

    async def list_ledgers(
        self,
        tenant_id: str,
        institute_id: str | None = None,
        ledger_type: str | None = None,
    ) -> list[dict[str, Any]]:
        ledgers = await self.store.list_ledgers(tenant_id, institute_id, ledger_type)
        return [ledger.to_dict() for ledger in ledgers]

    async def list_accounts(
        self,
        tenant_id: str,
        institute_id: str | None = None,
        active_only: bool = False,
    ) -> list[dict[str, Any]]:
        accounts = await self.store.list_accounts(tenant_id, institute_id, active_only)
        return [account.to_dict() for account in accounts]

    async def create_account(
        self,
        tenant_id: str,
        institute_id: str,
        account_name: str,
        *,
        bank_name: str | None = None,
        account_number: str | None = None,
        ifsc_code: str | None = None,
        opening_balance: Decimal = Decimal("0"),
        status: str = AccountStatus.ACTIVE.value,
    ) -> dict[str, Any]:
        account = await self.store.create_institute_account(
            tenant_id,
            institute_id,
            account_name,
            bank_name=bank_name,
            account_number=account_number,
            ifsc_code=ifsc_code,
            opening_balance=opening_balance,
            status=status,
        )
        return account.to_dict()

    async def set_account_status(
        self,
        tenant_id: str,
        account_id: str,
        status: str,
    ) -> dict[str, Any] | None:
        """Change an account's status

        Returns:
            The updated account, or None when it does not belong to the tenant
        """
        account = await self.store.get_account(account_id)
        if account is None or account.tenant_id != tenant_id:
            return None
        await self.store.set_account_status(account_id, status)
        logger.info(f"Account {account_id} status -> {status}")
        updated = await self.store.get_account(account_id)
        return updated.to_dict() if updated else None
