"""
Accounting routes

Postings, reversals, the six financial reports and the account/ledger
administration they depend on. The tenant comes from the X-Tenant-ID
header.
"""

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Path, Query

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.ledger.filters import ReportValidationError
from core.ledger.models import PostingValidationError
from core.ledger.types import LedgerType
from web.dependencies import get_db, get_db_write, get_tenant_id
from web.models.requests import (
    AccountCreateRequest,
    AccountStatusRequest,
    PostingRequestModel,
    ReversalRequestModel,
)
from web.models.responses import ReversalResponse
from web.services.accounting_service import AccountingService

router = APIRouter(prefix="/api/accounting", tags=["Accounting"])


def _report(payload: dict[str, Any]) -> dict[str, Any]:
    return {"success": True, "data": payload}


# =========================================================================
# Postings
# =========================================================================


@router.post("/postings", status_code=201)
async def create_posting(
    request: PostingRequestModel,
    tenant_id: str = Depends(get_tenant_id),
    db: SQLiteAdapter = Depends(get_db_write),
):
    """Post one ledger entry and apply the institute balance delta"""
    service = AccountingService(db)
    try:
        item = await service.post(
            tenant_id,
            institute_id=request.institute_id,
            ledger_name=request.ledger_name,
            ledger_type=request.ledger_type,
            amount=request.amount,
            description=request.description,
            entry_date=request.entry_date,
            source=request.source,
            source_id=request.source_id,
            payment_method=request.payment_method,
            reference_no=request.reference_no,
            category_name=request.category_name,
        )
    except PostingValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"success": True, "data": item}


@router.post("/postings/reverse", response_model=ReversalResponse)
async def reverse_posting(
    request: ReversalRequestModel,
    tenant_id: str = Depends(get_tenant_id),
    db: SQLiteAdapter = Depends(get_db_write),
) -> ReversalResponse:
    """Reverse every item posted for a source record (idempotent)"""
    service = AccountingService(db)
    try:
        removed = await service.reverse(tenant_id, request.source, request.source_id)
    except PostingValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return ReversalResponse(reversed=removed)


# =========================================================================
# Reports
# =========================================================================


@router.get("/reports/day-book")
async def get_day_book(
    institute_id: str | None = Query(default=None, alias="instituteId"),
    start_date: str | None = Query(default=None, alias="startDate"),
    end_date: str | None = Query(default=None, alias="endDate"),
    tenant_id: str = Depends(get_tenant_id),
    db: SQLiteAdapter = Depends(get_db),
):
    """Day book: every transaction in range plus totals"""
    try:
        payload = await AccountingService(db).day_book(tenant_id, institute_id, start_date, end_date)
    except ReportValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _report(payload)


@router.get("/reports/trial-balance")
async def get_trial_balance(
    institute_id: str | None = Query(default=None, alias="instituteId"),
    start_date: str | None = Query(default=None, alias="startDate"),
    end_date: str | None = Query(default=None, alias="endDate"),
    tenant_id: str = Depends(get_tenant_id),
    db: SQLiteAdapter = Depends(get_db),
):
    """Trial balance per ledger"""
    try:
        payload = await AccountingService(db).trial_balance(
            tenant_id, institute_id, start_date, end_date
        )
    except ReportValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _report(payload)


@router.get("/reports/balance-sheet")
async def get_balance_sheet(
    institute_id: str | None = Query(default=None, alias="instituteId"),
    start_date: str | None = Query(default=None, alias="startDate"),
    end_date: str | None = Query(default=None, alias="endDate"),
    tenant_id: str = Depends(get_tenant_id),
    db: SQLiteAdapter = Depends(get_db),
):
    """Balance sheet: bank balances, income and expenses by ledger"""
    try:
        payload = await AccountingService(db).balance_sheet(
            tenant_id, institute_id, start_date, end_date
        )
    except ReportValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _report(payload)


@router.get("/reports/ledger-statement")
async def get_ledger_statement(
    ledger_id: str | None = Query(default=None, alias="ledgerId"),
    institute_id: str | None = Query(default=None, alias="instituteId"),
    start_date: str | None = Query(default=None, alias="startDate"),
    end_date: str | None = Query(default=None, alias="endDate"),
    tenant_id: str = Depends(get_tenant_id),
    db: SQLiteAdapter = Depends(get_db),
):
    """Ledger statement with opening, running and closing balance

    ledgerId is required (400 without it).
    """
    try:
        payload = await AccountingService(db).ledger_statement(
            tenant_id, ledger_id, institute_id, start_date, end_date
        )
    except ReportValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _report(payload)


@router.get("/reports/income-expenditure")
async def get_income_expenditure(
    institute_id: str | None = Query(default=None, alias="instituteId"),
    start_date: str | None = Query(default=None, alias="startDate"),
    end_date: str | None = Query(default=None, alias="endDate"),
    tenant_id: str = Depends(get_tenant_id),
    db: SQLiteAdapter = Depends(get_db),
):
    """Income & expenditure by ledger and category"""
    try:
        payload = await AccountingService(db).income_expenditure(
            tenant_id, institute_id, start_date, end_date
        )
    except ReportValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _report(payload)


@router.get("/reports/consolidated")
async def get_consolidated(
    start_date: str | None = Query(default=None, alias="startDate"),
    end_date: str | None = Query(default=None, alias="endDate"),
    tenant_id: str = Depends(get_tenant_id),
    db: SQLiteAdapter = Depends(get_db),
):
    """Per-institute rollup across the tenant"""
    try:
        payload = await AccountingService(db).consolidated(tenant_id, start_date, end_date)
    except ReportValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _report(payload)


# =========================================================================
# Administration
# =========================================================================


@router.get("/ledgers")
async def get_ledgers(
    institute_id: str | None = Query(default=None, alias="instituteId"),
    ledger_type: LedgerType | None = Query(default=None, alias="type"),
    tenant_id: str = Depends(get_tenant_id),
    db: SQLiteAdapter = Depends(get_db),
):
    """Ledgers of the tenant"""
    return await AccountingService(db).list_ledgers(
        tenant_id,
        institute_id,
        ledger_type.value if ledger_type else None,
    )


@router.get("/accounts")
async def get_accounts(
    institute_id: str | None = Query(default=None, alias="instituteId"),
    active_only: bool = Query(default=False, alias="activeOnly"),
    tenant_id: str = Depends(get_tenant_id),
    db: SQLiteAdapter = Depends(get_db),
):
    """Institute bank accounts in creation order"""
    return await AccountingService(db).list_accounts(tenant_id, institute_id, active_only)


@router.post("/accounts", status_code=201)
async def create_account(
    request: AccountCreateRequest,
    tenant_id: str = Depends(get_tenant_id),
    db: SQLiteAdapter = Depends(get_db_write),
):
    """Create an institute bank account"""
    return await AccountingService(db).create_account(
        tenant_id,
        request.institute_id,
        request.account_name,
        bank_name=request.bank_name,
        account_number=request.account_number,
        ifsc_code=request.ifsc_code,
        opening_balance=request.opening_balance,
        status=request.status.value,
    )


@router.patch("/accounts/{account_id}/status")
async def update_account_status(
    request: AccountStatusRequest,
    account_id: str = Path(..., description="Account id"),
    tenant_id: str = Depends(get_tenant_id),
    db: SQLiteAdapter = Depends(get_db_write),
):
    """Activate / deactivate an account

    Inactive accounts stop receiving balance deltas.
    """
    account = await AccountingService(db).set_account_status(
        tenant_id, account_id, request.status.value
    )
    if account is None:
        raise HTTPException(status_code=404, detail=f"Account not found: {account_id}")
    return account
