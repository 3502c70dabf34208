"""Posting call site tests (salary, petty cash, manual)"""

from datetime import date
from decimal import Decimal

import pytest

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.ledger.models import PostingValidationError
from core.ledger.posting import PostingEngine
from core.ledger.sources import (
    PettyCashExpense,
    PettyCashFund,
    SalaryPayment,
    delete_salary_payment,
    post_manual_entry,
    post_petty_cash_float,
    post_petty_cash_replenishment,
    post_salary_payment,
    replenishment_amount,
    salary_posting_request,
    update_salary_payment,
)
from core.ledger.types import SalaryStatus


@pytest.fixture
def engine(db: SQLiteAdapter) -> PostingEngine:
    return PostingEngine(db)


def _payment(**overrides) -> SalaryPayment:
    fields = dict(
        payment_id="pay-1",
        tenant_id="t1",
        institute_id="i1",
        month=3,
        year=2024,
        net_amount=Decimal("15000"),
        payment_date=date(2024, 3, 31),
        payment_method="bank",
        reference_no="UTR123",
    )
    fields.update(overrides)
    return SalaryPayment(**fields)


def _fund(**overrides) -> PettyCashFund:
    fields = dict(
        fund_id="fund-1",
        tenant_id="t1",
        institute_id="i1",
        custodian_name="Usthad",
        float_amount=Decimal("1000"),
        current_balance=Decimal("1000"),
    )
    fields.update(overrides)
    return PettyCashFund(**fields)


class TestSalary:
    """Salary call sites"""

    def test_request_for_paid_payment(self) -> None:
        request = salary_posting_request(_payment())

        assert request.ledger_name == "Salary Payments"
        assert request.ledger_type.value == "expense"
        assert request.description == "Salary payment - 3/2024"
        assert request.source_id == "pay-1"
        assert request.reference_no == "UTR123"

    def test_no_request_unless_paid(self) -> None:
        assert salary_posting_request(_payment(status=SalaryStatus.PENDING.value)) is None

    @pytest.mark.asyncio
    async def test_post_moves_balance(self, engine: PostingEngine) -> None:
        account = await engine.store.create_institute_account(
            "t1", "i1", "Main", opening_balance=Decimal("20000")
        )

        outcome = await post_salary_payment(engine, _payment())

        assert outcome.ok and outcome.posted == 1
        assert (await engine.store.get_account(account.account_id)).balance == Decimal("5000.00")

    @pytest.mark.asyncio
    async def test_update_reposts_new_amount(self, engine: PostingEngine) -> None:
        account = await engine.store.create_institute_account("t1", "i1", "Main")
        await post_salary_payment(engine, _payment())

        outcome = await update_salary_payment(engine, _payment(net_amount=Decimal("14000")))

        assert outcome.ok
        assert (outcome.reversed, outcome.posted) == (1, 1)
        assert (await engine.store.get_account(account.account_id)).balance == Decimal("-14000.00")

    @pytest.mark.asyncio
    async def test_update_to_unpaid_only_reverses(self, engine: PostingEngine) -> None:
        await post_salary_payment(engine, _payment())

        outcome = await update_salary_payment(engine, _payment(status=SalaryStatus.CANCELLED.value))

        assert (outcome.reversed, outcome.posted) == (1, 0)
        assert await engine.store.find_items_by_source("salary", "pay-1") == []

    @pytest.mark.asyncio
    async def test_delete_reverses(self, engine: PostingEngine) -> None:
        account = await engine.store.create_institute_account("t1", "i1", "Main")
        await post_salary_payment(engine, _payment())

        outcome = await delete_salary_payment(engine, "pay-1")

        assert outcome.reversed == 1
        assert (await engine.store.get_account(account.account_id)).balance == Decimal("0.00")

    @pytest.mark.asyncio
    async def test_invalid_payment_is_reported_not_raised(self, engine: PostingEngine) -> None:
        outcome = await post_salary_payment(engine, _payment(net_amount=Decimal("-1")))

        assert outcome.ok is False
        assert "PostingValidationError" in outcome.error

    @pytest.mark.asyncio
    async def test_nan_amount_is_reported_not_raised(self, engine: PostingEngine) -> None:
        outcome = await post_salary_payment(engine, _payment(net_amount=float("nan")))

        assert outcome.ok is False
        assert await engine.store.find_items_by_source("salary", "pay-1") == []

    @pytest.mark.asyncio
    async def test_invalid_update_is_reported_not_raised(self, engine: PostingEngine) -> None:
        outcome = await update_salary_payment(engine, _payment(net_amount=Decimal("NaN")))

        assert outcome.ok is False


class TestPettyCash:
    """Petty cash call sites"""

    @pytest.mark.asyncio
    async def test_float_posted_as_expense(self, engine: PostingEngine) -> None:
        outcome = await post_petty_cash_float(engine, _fund(), date(2024, 1, 1))

        assert outcome.posted == 1
        items = await engine.store.find_items_by_source("petty_cash", "fund-1")
        assert items[0].ledger_name == "Petty Cash"
        assert items[0].item_type == "expense"
        assert items[0].payment_method == "cash"
        assert items[0].description == "Petty cash float - Usthad"

    @pytest.mark.asyncio
    async def test_zero_float_posts_nothing(self, engine: PostingEngine) -> None:
        outcome = await post_petty_cash_float(engine, _fund(float_amount=Decimal("0")), date(2024, 1, 1))

        assert outcome.ok and outcome.posted == 0

    @pytest.mark.asyncio
    async def test_float_without_fund_id_is_reported_not_raised(self, engine: PostingEngine) -> None:
        outcome = await post_petty_cash_float(engine, _fund(fund_id=""), date(2024, 1, 1))

        assert outcome.ok is False
        assert "source_id is required" in outcome.error

    @pytest.mark.asyncio
    async def test_missing_float_amount_is_reported_not_raised(self, engine: PostingEngine) -> None:
        outcome = await post_petty_cash_float(engine, _fund(float_amount=None), date(2024, 1, 1))

        assert outcome.ok is False
        assert "Invalid amount" in outcome.error

    def test_replenishment_amount(self) -> None:
        assert replenishment_amount(_fund(current_balance=Decimal("700"))) == Decimal("300.00")

    def test_nothing_to_replenish(self) -> None:
        with pytest.raises(ValueError, match="No expenses"):
            replenishment_amount(_fund())

    @pytest.mark.asyncio
    async def test_replenishment_posts_each_expense(self, engine: PostingEngine) -> None:
        expenses = [
            PettyCashExpense("exp-1", Decimal("120"), "Tea", date(2024, 1, 3), receipt_no="R1"),
            PettyCashExpense("exp-2", Decimal("180"), "Stationery", date(2024, 1, 4)),
        ]

        outcome = await post_petty_cash_replenishment(
            engine, _fund(current_balance=Decimal("700")), expenses
        )

        assert outcome.posted == 2
        first = await engine.store.find_items_by_source("petty_cash", "exp-1")
        assert first[0].ledger_name == "Petty Cash Expenses"
        assert first[0].reference_no == "R1"

    @pytest.mark.asyncio
    async def test_replenishment_without_expenses(self, engine: PostingEngine) -> None:
        outcome = await post_petty_cash_replenishment(engine, _fund(), [])

        assert outcome.ok and outcome.posted == 0

    @pytest.mark.asyncio
    async def test_invalid_expense_posts_nothing(self, engine: PostingEngine) -> None:
        expenses = [
            PettyCashExpense("exp-1", Decimal("120"), "Tea", date(2024, 1, 3)),
            PettyCashExpense("exp-2", Decimal("-5"), "Refund", date(2024, 1, 4)),
        ]

        outcome = await post_petty_cash_replenishment(engine, _fund(), expenses)

        assert outcome.ok is False
        assert await engine.store.find_items_by_source("petty_cash", "exp-1") == []


class TestManualEntry:
    """Manual entries"""

    @pytest.mark.asyncio
    async def test_posts_without_source_id(self, engine: PostingEngine) -> None:
        account = await engine.store.create_institute_account("t1", "i1", "Main")

        item = await post_manual_entry(
            engine,
            tenant_id="t1",
            institute_id="i1",
            ledger_name="Donations",
            ledger_type="income",
            amount=Decimal("250"),
            description="Walk-in donation",
            entry_date=date(2024, 2, 1),
        )

        assert item.source == "manual"
        assert item.source_id is None
        assert (await engine.store.get_account(account.account_id)).balance == Decimal("250.00")

    @pytest.mark.asyncio
    async def test_validation_errors_propagate(self, engine: PostingEngine) -> None:
        with pytest.raises(PostingValidationError):
            await post_manual_entry(
                engine,
                tenant_id="t1",
                ledger_name="Donations",
                ledger_type="income",
                amount=Decimal("-1"),
                description="bad",
                entry_date=date(2024, 2, 1),
            )
