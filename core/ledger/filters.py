"""
Report filters

One typed filter per report. Filters are built with `from_params`, which
parses the raw request values and rejects bad input before any query
runs.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, TypeVar

from core.ledger.models import parse_iso_date

_ScopedFilter = TypeVar("_ScopedFilter", bound="ScopedReportFilter")


class ReportValidationError(ValueError):
    """Report request rejected before aggregation"""

    pass


def parse_report_date(value: str | date | None, field_name: str) -> date | None:
    """Parse an optional calendar date parameter

    Args:
        value: "YYYY-MM-DD", a date, or None/"" for no bound
        field_name: parameter name used in the error message

    Raises:
        ReportValidationError: malformed date
    """
    if value is None or value == "":
        return None
    try:
        return parse_iso_date(value)
    except (TypeError, ValueError) as e:
        raise ReportValidationError(
            f"{field_name} must be a calendar date (YYYY-MM-DD), got {value!r}"
        ) from e


def _optional_id(value: Any) -> str | None:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


@dataclass(frozen=True)
class Period:
    """Inclusive calendar date range; a missing bound is open-ended"""

    start: date | None = None
    end: date | None = None

    @classmethod
    def from_params(
        cls,
        start_date: str | date | None = None,
        end_date: str | date | None = None,
    ) -> Period:
        start = parse_report_date(start_date, "startDate")
        end = parse_report_date(end_date, "endDate")
        if start and end and start > end:
            raise ReportValidationError(
                f"startDate {start.isoformat()} is after endDate {end.isoformat()}"
            )
        return cls(start=start, end=end)


@dataclass(frozen=True)
class ItemQuery:
    """Store-level selection of ledger items

    before is an exclusive upper bound used for opening balances.
    """

    tenant_id: str | None = None
    institute_id: str | None = None
    ledger_id: str | None = None
    ledger_type: str | None = None
    period: Period = Period()
    before: date | None = None


@dataclass(frozen=True)
class ScopedReportFilter:
    """Tenant + optional institute + period"""

    tenant_id: str | None = None
    institute_id: str | None = None
    period: Period = Period()

    @classmethod
    def from_params(
        cls: type[_ScopedFilter],
        tenant_id: str | None = None,
        institute_id: str | None = None,
        start_date: str | date | None = None,
        end_date: str | date | None = None,
    ) -> _ScopedFilter:
        return cls(
            tenant_id=_optional_id(tenant_id),
            institute_id=_optional_id(institute_id),
            period=Period.from_params(start_date, end_date),
        )

    def item_query(self, ledger_type: str | None = None) -> ItemQuery:
        return ItemQuery(
            tenant_id=self.tenant_id,
            institute_id=self.institute_id,
            ledger_type=ledger_type,
            period=self.period,
        )


@dataclass(frozen=True)
class DayBookFilter(ScopedReportFilter):
    pass


@dataclass(frozen=True)
class TrialBalanceFilter(ScopedReportFilter):
    pass


@dataclass(frozen=True)
class BalanceSheetFilter(ScopedReportFilter):
    pass


@dataclass(frozen=True)
class IncomeExpenditureFilter(ScopedReportFilter):
    pass


@dataclass(frozen=True)
class ConsolidatedFilter:
    """Consolidated report spans every institute of the tenant"""

    tenant_id: str | None = None
    period: Period = Period()

    @classmethod
    def from_params(
        cls,
        tenant_id: str | None = None,
        start_date: str | date | None = None,
        end_date: str | date | None = None,
    ) -> ConsolidatedFilter:
        return cls(
            tenant_id=_optional_id(tenant_id),
            period=Period.from_params(start_date, end_date),
        )

    def item_query(self) -> ItemQuery:
        return ItemQuery(tenant_id=self.tenant_id, period=self.period)


@dataclass(frozen=True)
class LedgerStatementFilter:
    """Per-ledger statement; ledger_id is mandatory"""

    ledger_id: str
    tenant_id: str | None = None
    institute_id: str | None = None
    period: Period = Period()

    @classmethod
    def from_params(
        cls,
        ledger_id: str | None,
        tenant_id: str | None = None,
        institute_id: str | None = None,
        start_date: str | date | None = None,
        end_date: str | date | None = None,
    ) -> LedgerStatementFilter:
        ledger_id = _optional_id(ledger_id)
        if ledger_id is None:
            raise ReportValidationError("ledgerId is required")
        return cls(
            ledger_id=ledger_id,
            tenant_id=_optional_id(tenant_id),
            institute_id=_optional_id(institute_id),
            period=Period.from_params(start_date, end_date),
        )

    def opening_query(self) -> ItemQuery | None:
        """Items strictly before the start date (None without a start date)"""
        if self.period.start is None:
            return None
        return ItemQuery(
            tenant_id=self.tenant_id,
            institute_id=self.institute_id,
            ledger_id=self.ledger_id,
            before=self.period.start,
        )

    def range_query(self) -> ItemQuery:
        return ItemQuery(
            tenant_id=self.tenant_id,
            institute_id=self.institute_id,
            ledger_id=self.ledger_id,
            period=self.period,
        )
