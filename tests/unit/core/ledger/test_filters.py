"""Report filter tests"""

from datetime import date

import pytest

from core.ledger.filters import (
    ConsolidatedFilter,
    DayBookFilter,
    LedgerStatementFilter,
    Period,
    ReportValidationError,
    TrialBalanceFilter,
    parse_report_date,
)


class TestParseReportDate:
    """parse_report_date"""

    def test_empty_means_no_bound(self) -> None:
        assert parse_report_date(None, "startDate") is None
        assert parse_report_date("", "startDate") is None

    def test_iso_date(self) -> None:
        assert parse_report_date("2024-03-01", "startDate") == date(2024, 3, 1)

    def test_malformed(self) -> None:
        with pytest.raises(ReportValidationError, match="endDate"):
            parse_report_date("March 1", "endDate")


class TestPeriod:
    """Period"""

    def test_open_ended(self) -> None:
        period = Period.from_params(None, "2024-01-31")

        assert period.start is None
        assert period.end == date(2024, 1, 31)
        assert Period.from_params("", None) == Period()

    def test_single_day(self) -> None:
        period = Period.from_params("2024-01-31", "2024-01-31")
        assert period.start == period.end

    def test_start_after_end_rejected(self) -> None:
        with pytest.raises(ReportValidationError, match="after"):
            Period.from_params("2024-02-01", "2024-01-01")


class TestScopedFilters:
    """Tenant / institute / period filters"""

    def test_blank_institute_is_none(self) -> None:
        flt = DayBookFilter.from_params("t1", "  ", "2024-01-01")

        assert flt.tenant_id == "t1"
        assert flt.institute_id is None
        assert flt.period.start == date(2024, 1, 1)

    def test_from_params_builds_the_subclass(self) -> None:
        assert type(DayBookFilter.from_params("t1")) is DayBookFilter
        assert type(TrialBalanceFilter.from_params("t1")) is TrialBalanceFilter

    def test_item_query(self) -> None:
        flt = DayBookFilter.from_params("t1", "i1")
        query = flt.item_query("income")

        assert query.tenant_id == "t1"
        assert query.institute_id == "i1"
        assert query.ledger_type == "income"
        assert query.ledger_id is None

    def test_consolidated_has_no_institute(self) -> None:
        query = ConsolidatedFilter.from_params("t1", end_date="2024-12-31").item_query()

        assert query.institute_id is None
        assert query.period.end == date(2024, 12, 31)


class TestLedgerStatementFilter:
    """LedgerStatementFilter"""

    def test_ledger_id_required(self) -> None:
        with pytest.raises(ReportValidationError, match="ledgerId is required"):
            LedgerStatementFilter.from_params(None, "t1")
        with pytest.raises(ReportValidationError):
            LedgerStatementFilter.from_params("", "t1")

    def test_opening_query_needs_start(self) -> None:
        flt = LedgerStatementFilter.from_params("l1", "t1")
        assert flt.opening_query() is None

    def test_opening_query_is_strictly_before_start(self) -> None:
        flt = LedgerStatementFilter.from_params("l1", "t1", None, "2024-02-01", "2024-02-29")
        opening = flt.opening_query()

        assert opening.ledger_id == "l1"
        assert opening.before == date(2024, 2, 1)
        assert opening.period == Period()

        in_range = flt.range_query()
        assert in_range.before is None
        assert in_range.period.start == date(2024, 2, 1)
