"""
Mahall accounting core

Posting engine (business events -> ledger items + institute account
balances) and the report engine reading the same transaction log.

Usage:
```python
from core.ledger import PostingEngine, PostingRequest, ReportEngine, DayBookFilter

engine = PostingEngine(db)
await engine.post(PostingRequest(...))

reports = ReportEngine(db)
day_book = await reports.day_book(DayBookFilter.from_params(tenant_id))
```
"""

from core.ledger.catalog import LedgerCatalog
from core.ledger.filters import (
    BalanceSheetFilter,
    ConsolidatedFilter,
    DayBookFilter,
    IncomeExpenditureFilter,
    LedgerStatementFilter,
    ReportValidationError,
    TrialBalanceFilter,
)
from core.ledger.models import (
    InstituteAccount,
    Ledger,
    LedgerItem,
    PostingRequest,
    PostingValidationError,
)
from core.ledger.posting import (
    PostingEngine,
    PostingOutcome,
    safe_post,
    safe_repost,
    safe_reverse,
    select_posting_account,
)
from core.ledger.reports import ReportEngine
from core.ledger.store import LedgerStore
from core.ledger.types import AccountStatus, LedgerType, SourceTag

__all__ = [
    # Engines
    "PostingEngine",
    "ReportEngine",
    "LedgerStore",
    "LedgerCatalog",
    "select_posting_account",
    # Failure channel
    "PostingOutcome",
    "safe_post",
    "safe_reverse",
    "safe_repost",
    # Records
    "Ledger",
    "LedgerItem",
    "InstituteAccount",
    "PostingRequest",
    # Filters
    "DayBookFilter",
    "TrialBalanceFilter",
    "BalanceSheetFilter",
    "LedgerStatementFilter",
    "IncomeExpenditureFilter",
    "ConsolidatedFilter",
    # Errors
    "PostingValidationError",
    "ReportValidationError",
    # Enums
    "LedgerType",
    "SourceTag",
    "AccountStatus",
]
