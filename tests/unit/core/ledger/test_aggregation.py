"""Aggregation primitive tests"""

from datetime import date
from decimal import Decimal

from core.ledger.aggregation import (
    chronological,
    group_by,
    running_balance,
    sum_signed,
    totals_by_type,
)
from core.ledger.models import LedgerItem


def _item(seq: int, item_type: str, amount: str, day: int = 1, ledger_id: str = "l1") -> LedgerItem:
    return LedgerItem(
        item_id=f"i{seq}",
        seq=seq,
        tenant_id="t1",
        ledger_id=ledger_id,
        item_type=item_type,
        entry_date=date(2024, 1, day),
        amount=Decimal(amount),
        description=f"item {seq}",
        source="manual",
    )


class TestChronological:
    """chronological"""

    def test_date_then_insertion_order(self) -> None:
        items = [_item(3, "income", "1", day=2), _item(2, "income", "1", day=1), _item(1, "income", "1", day=2)]

        assert [item.seq for item in chronological(items)] == [2, 1, 3]


class TestGroupBy:
    """group_by"""

    def test_keeps_first_seen_order(self) -> None:
        items = [_item(1, "income", "1", ledger_id="b"), _item(2, "income", "1", ledger_id="a"), _item(3, "income", "1", ledger_id="b")]
        groups = group_by(items, lambda item: item.ledger_id)

        assert list(groups) == ["b", "a"]
        assert [item.seq for item in groups["b"]] == [1, 3]

    def test_none_key(self) -> None:
        groups = group_by([1, 2, 3], lambda value: None if value % 2 else "even")
        assert groups == {None: [1, 3], "even": [2]}


class TestTotals:
    """totals_by_type / sum_signed"""

    def test_totals(self) -> None:
        totals = totals_by_type([_item(1, "income", "500"), _item(2, "expense", "200")])

        assert totals.income == Decimal("500")
        assert totals.expense == Decimal("200")
        assert totals.net == Decimal("300")
        assert totals.count == 2

    def test_empty(self) -> None:
        totals = totals_by_type([])

        assert totals.net == Decimal("0")
        assert totals.count == 0
        assert sum_signed([]) == Decimal("0")


class TestRunningBalance:
    """running_balance fold"""

    def test_fold_from_opening(self) -> None:
        items = [_item(1, "income", "100"), _item(2, "expense", "30"), _item(3, "expense", "20")]
        rows, closing = running_balance(items, Decimal("50"))

        assert [row.balance for row in rows] == [Decimal("150"), Decimal("120"), Decimal("100")]
        assert closing == Decimal("100")
        assert closing == Decimal("50") + sum_signed(items)

    def test_debit_credit_columns(self) -> None:
        rows, _ = running_balance([_item(1, "income", "100"), _item(2, "expense", "30")])

        assert (rows[0].debit, rows[0].credit) == (Decimal("0"), Decimal("100"))
        assert (rows[1].debit, rows[1].credit) == (Decimal("30"), Decimal("0"))

    def test_no_items(self) -> None:
        rows, closing = running_balance([], Decimal("-12.50"))

        assert rows == []
        assert closing == Decimal("-12.50")
