"""
Posting call sites

Hooks the salary and petty-cash workflows call after their own record has
been saved. Each hook returns a PostingOutcome and never raises for
ledger failures, so the payroll / petty-cash operation still succeeds when
the accounting side effect does not.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Iterable

from core.ledger.models import PostingRequest, PostingValidationError, to_money
from core.ledger.posting import (
    PostingEngine,
    PostingOutcome,
    safe_post,
    safe_repost,
    safe_reverse,
)
from core.ledger.types import (
    CASH_PAYMENT,
    PETTY_CASH_EXPENSE_LEDGER,
    PETTY_CASH_FLOAT_LEDGER,
    SALARY_LEDGER,
    LedgerType,
    SalaryStatus,
    SourceTag,
)

logger = logging.getLogger(__name__)


# =========================================================================
# Salary
# =========================================================================


@dataclass
class SalaryPayment:
    """The parts of a payroll record the ledger needs"""

    payment_id: str
    tenant_id: str
    institute_id: str
    month: int
    year: int
    net_amount: Decimal
    payment_date: date
    payment_method: str | None = None
    reference_no: str | None = None
    status: str = SalaryStatus.PAID.value

    @property
    def is_paid(self) -> bool:
        return self.status == SalaryStatus.PAID.value


def salary_posting_request(payment: SalaryPayment) -> PostingRequest | None:
    """Posting for a salary payment (None unless it is paid)"""
    if not payment.is_paid:
        return None
    return PostingRequest(
        tenant_id=payment.tenant_id,
        institute_id=payment.institute_id,
        ledger_name=SALARY_LEDGER,
        ledger_type=LedgerType.EXPENSE,
        amount=payment.net_amount,
        description=f"Salary payment - {payment.month}/{payment.year}",
        entry_date=payment.payment_date,
        source=SourceTag.SALARY,
        source_id=payment.payment_id,
        payment_method=payment.payment_method,
        reference_no=payment.reference_no,
    )


async def post_salary_payment(engine: PostingEngine, payment: SalaryPayment) -> PostingOutcome:
    """After a salary payment is created"""
    try:
        request = salary_posting_request(payment)
    except (PostingValidationError, ArithmeticError) as e:
        logger.error(f"Salary payment {payment.payment_id} cannot be posted: {e}")
        return PostingOutcome.failed(e)
    if request is None:
        return PostingOutcome.succeeded()
    return await safe_post(engine, request)


async def update_salary_payment(engine: PostingEngine, payment: SalaryPayment) -> PostingOutcome:
    """After a salary payment is edited: reverse, then re-post if still paid"""
    try:
        request = salary_posting_request(payment)
    except (PostingValidationError, ArithmeticError) as e:
        logger.error(f"Salary payment {payment.payment_id} cannot be re-posted: {e}")
        return PostingOutcome.failed(e)
    return await safe_repost(
        engine, SourceTag.SALARY, payment.payment_id, request, payment.tenant_id
    )


async def delete_salary_payment(
    engine: PostingEngine,
    payment_id: str,
    tenant_id: str | None = None,
) -> PostingOutcome:
    """Before/after a salary payment is deleted"""
    return await safe_reverse(engine, SourceTag.SALARY, payment_id, tenant_id)


# =========================================================================
# Petty cash
# =========================================================================


@dataclass
class PettyCashExpense:
    """One expense paid out of a petty-cash fund"""

    expense_id: str
    amount: Decimal
    description: str
    expense_date: date
    receipt_no: str | None = None


@dataclass
class PettyCashFund:
    """Imprest fund held by a custodian

    current_balance drops with each expense; replenishment tops it back
    up to float_amount.
    """

    fund_id: str
    tenant_id: str
    institute_id: str
    custodian_name: str
    float_amount: Decimal
    current_balance: Decimal

    @property
    def spent_amount(self) -> Decimal:
        return to_money(self.float_amount) - to_money(self.current_balance)


async def post_petty_cash_float(
    engine: PostingEngine,
    fund: PettyCashFund,
    on_date: date,
) -> PostingOutcome:
    """After a fund is created: the float leaves the bank as an expense"""
    try:
        if to_money(fund.float_amount) <= 0:
            return PostingOutcome.succeeded()
        request = PostingRequest(
            tenant_id=fund.tenant_id,
            institute_id=fund.institute_id,
            ledger_name=PETTY_CASH_FLOAT_LEDGER,
            ledger_type=LedgerType.EXPENSE,
            amount=fund.float_amount,
            description=f"Petty cash float - {fund.custodian_name}",
            entry_date=on_date,
            source=SourceTag.PETTY_CASH,
            source_id=fund.fund_id,
            payment_method=CASH_PAYMENT,
        )
    except (PostingValidationError, ArithmeticError) as e:
        logger.error(f"Petty cash fund {fund.fund_id}: float cannot be posted: {e}")
        return PostingOutcome.failed(e)
    return await safe_post(engine, request)


def replenishment_amount(fund: PettyCashFund) -> Decimal:
    """Amount needed to restore the float

    Raises:
        ValueError: nothing has been spent
    """
    spent = fund.spent_amount
    if spent <= 0:
        raise ValueError("No expenses to replenish")
    return spent


async def post_petty_cash_replenishment(
    engine: PostingEngine,
    fund: PettyCashFund,
    expenses: Iterable[PettyCashExpense],
) -> PostingOutcome:
    """On replenishment: post each expense of the cycle

    Each expense is posted under its own id so it can be reversed on its
    own. The caller validates the replenishment (replenishment_amount)
    before saving it; ledger failures here are only logged.
    """
    try:
        requests = [
            PostingRequest(
                tenant_id=fund.tenant_id,
                institute_id=fund.institute_id,
                ledger_name=PETTY_CASH_EXPENSE_LEDGER,
                ledger_type=LedgerType.EXPENSE,
                amount=expense.amount,
                description=expense.description,
                entry_date=expense.expense_date,
                source=SourceTag.PETTY_CASH,
                source_id=expense.expense_id,
                payment_method=CASH_PAYMENT,
                reference_no=expense.receipt_no,
            )
            for expense in expenses
        ]
    except (PostingValidationError, ArithmeticError) as e:
        logger.error(f"Petty cash fund {fund.fund_id}: invalid expense, nothing posted: {e}")
        return PostingOutcome.failed(e)
    if not requests:
        logger.debug(f"Petty cash fund {fund.fund_id}: no expenses to post")
        return PostingOutcome.succeeded()
    return await safe_post(engine, *requests)


# =========================================================================
# Manual entries
# =========================================================================


async def post_manual_entry(
    engine: PostingEngine,
    *,
    tenant_id: str,
    ledger_name: str,
    ledger_type: LedgerType | str,
    amount: Decimal,
    description: str,
    entry_date: date,
    institute_id: str | None = None,
    category_name: str | None = None,
    payment_method: str | None = None,
    reference_no: str | None = None,
):
    """Post an entry typed in by an accountant

    Unlike the event hooks this is the primary operation, so validation
    and store errors propagate to the caller.
    """
    request = PostingRequest(
        tenant_id=tenant_id,
        institute_id=institute_id,
        ledger_name=ledger_name,
        ledger_type=ledger_type,
        amount=amount,
        description=description,
        entry_date=entry_date,
        source=SourceTag.MANUAL,
        category_name=category_name,
        payment_method=payment_method,
        reference_no=reference_no,
    )
    return await engine.post(request)
