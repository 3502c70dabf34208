"""Report builder tests (pure functions, no database)"""

from datetime import date
from decimal import Decimal

from core.ledger.models import InstituteAccount, Ledger, LedgerItem
from core.ledger.reports import (
    build_balance_sheet,
    build_consolidated,
    build_day_book,
    build_income_expenditure,
    build_ledger_statement,
    build_trial_balance,
)

_seq = 0


def _item(
    ledger_name: str,
    item_type: str,
    amount: str,
    day: int = 1,
    *,
    ledger_id: str | None = None,
    institute_id: str | None = "i1",
    institute_name: str | None = "Juma Masjid",
    category_id: str | None = None,
    category_name: str | None = None,
) -> LedgerItem:
    global _seq
    _seq += 1
    return LedgerItem(
        item_id=f"item-{_seq}",
        seq=_seq,
        tenant_id="t1",
        ledger_id=ledger_id or f"ledger-{ledger_name}",
        item_type=item_type,
        entry_date=date(2024, 1, day),
        amount=Decimal(amount),
        description=f"{ledger_name} {amount}",
        source="manual",
        institute_id=institute_id,
        category_id=category_id,
        ledger_name=ledger_name,
        category_name=category_name,
        institute_name=institute_name,
    )


def _account(account_id: str, institute_id: str, balance: str, seq: int = 1) -> InstituteAccount:
    return InstituteAccount(
        account_id=account_id,
        seq=seq,
        tenant_id="t1",
        institute_id=institute_id,
        account_name=f"Account {account_id}",
        balance=Decimal(balance),
        bank_name="SBI",
        institute_name=f"Institute {institute_id}",
    )


class TestDayBook:
    """build_day_book"""

    def test_worked_example(self) -> None:
        payload = build_day_book([_item("Donations", "income", "500"), _item("Rent", "expense", "200")])

        assert payload["summary"] == {
            "totalIncome": Decimal("500"),
            "totalExpense": Decimal("200"),
            "netBalance": Decimal("300"),
            "totalEntries": 2,
        }

    def test_entries_sorted_by_date_then_creation(self) -> None:
        late = _item("Rent", "expense", "1", day=3)
        first = _item("Donations", "income", "1", day=2)
        second = _item("Zakat", "income", "1", day=2)

        entries = build_day_book([late, second, first])["entries"]

        assert [entry["id"] for entry in entries] == [first.item_id, second.item_id, late.item_id]
        assert entries[0]["ledger"] == "Donations"
        assert entries[0]["institute"] == "Juma Masjid"
        assert entries[0]["date"] == "2024-01-02"

    def test_empty(self) -> None:
        payload = build_day_book([])

        assert payload["entries"] == []
        assert payload["summary"]["totalEntries"] == 0
        assert payload["summary"]["netBalance"] == Decimal("0")


class TestTrialBalance:
    """build_trial_balance"""

    def test_worked_example(self) -> None:
        payload = build_trial_balance([_item("Donations", "income", "500"), _item("Rent", "expense", "200")])

        rows = {row["ledgerName"]: row for row in payload["ledgers"]}
        assert rows["Donations"]["credit"] == Decimal("500")
        assert rows["Donations"]["debit"] == Decimal("0")
        assert rows["Rent"]["debit"] == Decimal("200")
        assert rows["Rent"]["credit"] == Decimal("0")
        assert payload["totals"] == {
            "totalDebit": Decimal("200"),
            "totalCredit": Decimal("500"),
            "difference": Decimal("300"),
        }

    def test_sorted_by_type_then_name(self) -> None:
        payload = build_trial_balance(
            [
                _item("Zakat", "income", "1"),
                _item("Salary Payments", "expense", "1"),
                _item("Donations", "income", "1"),
                _item("Electricity", "expense", "1"),
            ]
        )

        assert [row["ledgerName"] for row in payload["ledgers"]] == [
            "Electricity",
            "Salary Payments",
            "Donations",
            "Zakat",
        ]

    def test_groups_per_ledger(self) -> None:
        payload = build_trial_balance([_item("Rent", "expense", "100"), _item("Rent", "expense", "50")])

        assert len(payload["ledgers"]) == 1
        assert payload["ledgers"][0]["totalAmount"] == Decimal("150")
        assert payload["ledgers"][0]["transactionCount"] == 2

    def test_reconciles_with_signed_sum(self) -> None:
        items = [
            _item("Donations", "income", "120.50"),
            _item("Rent", "expense", "70.25"),
            _item("Zakat", "income", "10"),
        ]
        totals = build_trial_balance(items)["totals"]

        assert totals["totalCredit"] - totals["totalDebit"] == sum(item.signed_amount for item in items)


class TestBalanceSheet:
    """build_balance_sheet"""

    def test_sections(self) -> None:
        accounts = [_account("a1", "i1", "1000"), _account("a2", "i1", "250.50", seq=2)]
        income = [_item("Donations", "income", "500"), _item("Donations", "income", "100"), _item("Zakat", "income", "50")]
        expenses = [_item("Salary Payments", "expense", "300"), _item("Electricity", "expense", "40")]

        payload = build_balance_sheet(accounts, income, expenses)

        assert payload["assets"]["totalBankBalance"] == Decimal("1250.50")
        assert payload["assets"]["bankAccounts"][0]["accountId"] == "a1"
        assert payload["assets"]["bankAccounts"][0]["institute"] == "Institute i1"
        assert [row["ledgerName"] for row in payload["income"]["items"]] == ["Donations", "Zakat"]
        assert payload["income"]["items"][0]["total"] == Decimal("600")
        assert payload["income"]["total"] == Decimal("650")
        assert [row["ledgerName"] for row in payload["expenses"]["items"]] == ["Electricity", "Salary Payments"]
        assert payload["summary"] == {
            "totalAssets": Decimal("1250.50"),
            "totalIncome": Decimal("650"),
            "totalExpenses": Decimal("340"),
            "netBalance": Decimal("310"),
        }

    def test_salary_not_counted_twice(self) -> None:
        payload = build_balance_sheet([], [], [_item("Salary Payments", "expense", "300")])

        assert payload["expenses"]["salaryExpense"] == Decimal("0")
        assert payload["expenses"]["total"] == Decimal("300")


class TestLedgerStatement:
    """build_ledger_statement"""

    def test_opening_running_closing(self) -> None:
        ledger = Ledger(ledger_id="l1", tenant_id="t1", name="Donations", ledger_type="income")
        opening = [_item("Donations", "income", "100", day=1, ledger_id="l1")]
        in_range = [
            _item("Donations", "income", "50", day=5, ledger_id="l1"),
            _item("Donations", "income", "25", day=6, ledger_id="l1"),
        ]

        payload = build_ledger_statement(ledger, opening, in_range)

        assert payload["ledger"]["name"] == "Donations"
        assert payload["openingBalance"] == Decimal("100")
        assert [entry["balance"] for entry in payload["entries"]] == [Decimal("150"), Decimal("175")]
        assert payload["closingBalance"] == Decimal("175")
        assert payload["totalCredit"] == Decimal("75")
        assert payload["totalDebit"] == Decimal("0")

    def test_expense_ledger_goes_negative(self) -> None:
        payload = build_ledger_statement(None, [], [_item("Petty Cash Expenses", "expense", "300")])

        assert payload["ledger"] is None
        assert payload["openingBalance"] == Decimal("0")
        assert payload["entries"][0]["debit"] == Decimal("300")
        assert payload["entries"][0]["credit"] == Decimal("0")
        assert payload["closingBalance"] == Decimal("-300")


class TestIncomeExpenditure:
    """build_income_expenditure"""

    def test_category_breakdown(self) -> None:
        items = [
            _item("Donations", "income", "100", category_id="c2", category_name="Ramadan"),
            _item("Donations", "income", "40"),
            _item("Donations", "income", "60", category_id="c1", category_name="Friday"),
            _item("Donations", "income", "10", category_id="c1", category_name="Friday"),
            _item("Rent", "expense", "30"),
        ]

        payload = build_income_expenditure(items)

        donations = payload["income"][0]
        assert donations["ledgerName"] == "Donations"
        assert donations["total"] == Decimal("210")
        assert [c["categoryName"] for c in donations["categories"]] == ["Friday", "Ramadan", "Uncategorized"]
        assert donations["categories"][0] == {
            "categoryId": "c1",
            "categoryName": "Friday",
            "total": Decimal("70"),
            "count": 2,
        }
        assert donations["categories"][2]["categoryId"] is None
        assert payload["expenses"][0]["categories"][0]["categoryName"] == "Uncategorized"
        assert payload["totalIncome"] == Decimal("210")
        assert payload["totalExpense"] == Decimal("30")
        assert payload["surplus"] == Decimal("180")

    def test_ledgers_sorted_by_name(self) -> None:
        payload = build_income_expenditure(
            [_item("Zakat", "income", "1"), _item("Donations", "income", "1")]
        )

        assert [row["ledgerName"] for row in payload["income"]] == ["Donations", "Zakat"]
        assert payload["expenses"] == []


class TestConsolidated:
    """build_consolidated"""

    def test_rollup_and_bank_merge(self) -> None:
        items = [
            _item("Donations", "income", "500", institute_id="i2", institute_name="Madrasa"),
            _item("Rent", "expense", "200", institute_id="i1", institute_name="Juma Masjid"),
            _item("Zakat", "income", "80", institute_id=None, institute_name=None),
        ]
        accounts = [_account("a1", "i1", "1000"), _account("a2", "i1", "50", seq=2), _account("a3", "i9", "999", seq=3)]

        payload = build_consolidated(items, accounts)

        names = [row["instituteName"] for row in payload["institutes"]]
        assert names == ["Juma Masjid", "Madrasa", "Unassigned"]

        masjid, madrasa, unassigned = payload["institutes"]
        assert masjid["bankBalance"] == Decimal("1050")
        assert masjid["netBalance"] == Decimal("-200")
        assert madrasa["bankBalance"] == Decimal("0")
        assert madrasa["transactionCount"] == 1
        assert unassigned["instituteId"] is None

        assert payload["grandTotals"] == {
            "totalIncome": Decimal("580"),
            "totalExpense": Decimal("200"),
            "netBalance": Decimal("380"),
            "bankBalance": Decimal("1050"),
        }

    def test_no_transactions(self) -> None:
        payload = build_consolidated([], [_account("a1", "i1", "10")])

        assert payload["institutes"] == []
        assert payload["grandTotals"]["bankBalance"] == Decimal("0")
