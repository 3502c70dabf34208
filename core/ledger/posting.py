"""
Posting engine

Turns business events into ledger items and keeps the institute bank
account balance in step with them.

Usage:
```python
engine = PostingEngine(db)

item = await engine.post(PostingRequest(...))
reversed_count = await engine.reverse(SourceTag.SALARY, payment_id)

# From a call site whose primary operation has already committed
outcome = await safe_post(engine, request)
if not outcome.ok:
    ...  # logged; the primary operation still succeeds
```
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING, Awaitable, Callable

from core.ledger.catalog import LedgerCatalog
from core.ledger.models import InstituteAccount, LedgerItem, PostingRequest, PostingValidationError
from core.ledger.store import LedgerStore
from core.ledger.types import SourceTag

if TYPE_CHECKING:
    from adapters.db.sqlite_adapter import SQLiteAdapter

logger = logging.getLogger(__name__)


AccountPolicy = Callable[[LedgerStore, str, str], Awaitable["InstituteAccount | None"]]


async def select_posting_account(
    store: LedgerStore,
    tenant_id: str,
    institute_id: str,
) -> InstituteAccount | None:
    """Account that receives an institute's balance deltas

    Policy: the earliest-created active account of the institute.
    Inactive accounts never receive postings.
    """
    return await store.find_earliest_active_account(tenant_id, institute_id)


class PostingEngine:
    """Posting engine

    Args:
        db: SQLite adapter (writable)
        account_policy: picks the account a delta lands on
    """

    def __init__(
        self,
        db: SQLiteAdapter,
        account_policy: AccountPolicy = select_posting_account,
    ):
        self.db = db
        self.store = LedgerStore(db)
        self.catalog = LedgerCatalog(self.store)
        self.account_policy = account_policy

    async def post(self, request: PostingRequest) -> LedgerItem:
        """Post one transaction

        1. resolve (or create) the ledger
        2. append the ledger item and commit it
        3. apply +amount (income) / -amount (expense) to the institute's
           posting account, if the request names an institute

        A failure in step 3 does not undo step 2.

        Returns:
            The appended item
        """
        ledger = await self.catalog.resolve_ledger(
            tenant_id=request.tenant_id,
            name=request.ledger_name,
            ledger_type=request.ledger_type,
            institute_id=request.institute_id,
        )
        category_id = await self._resolve_category_id(request)

        async with self.db.transaction():
            item = await self.store.insert_item(
                tenant_id=request.tenant_id,
                institute_id=request.institute_id,
                ledger_id=ledger.ledger_id,
                item_type=ledger.ledger_type,
                entry_date=request.entry_date,
                amount=request.amount,
                description=request.description,
                category_id=category_id,
                payment_method=request.payment_method,
                reference_no=request.reference_no,
                source=request.source.value,
                source_id=request.source_id,
            )
        item.ledger_name = ledger.name

        if request.institute_id:
            async with self.db.transaction():
                await self._apply_balance_delta(
                    request.tenant_id,
                    request.institute_id,
                    request.balance_delta,
                )

        logger.info(
            f"Posted {request.ledger_type.value} {request.amount} to '{ledger.name}' "
            f"(source={request.source.value}/{request.source_id}, item={item.item_id})"
        )
        return item

    async def reverse(
        self,
        source: SourceTag | str,
        source_id: str,
        tenant_id: str | None = None,
    ) -> int:
        """Undo every item posted for (source, source_id)

        tenant_id, when given, limits the match to that tenant.

        Applies the inverse balance delta for each item that has an
        institute, then deletes the items. No match is a no-op, so a second
        call changes nothing.

        Returns:
            Number of items removed
        """
        try:
            source = SourceTag(source).value
        except ValueError as e:
            raise PostingValidationError(f"Invalid source: {source!r}") from e
        if not source_id:
            raise PostingValidationError("source_id is required for reversal")

        async with self.db.transaction():
            items = await self.store.find_items_by_source(source, source_id, tenant_id)
            for item in items:
                if item.institute_id:
                    await self._apply_balance_delta(
                        item.tenant_id,
                        item.institute_id,
                        -item.signed_amount,
                    )
            removed = await self.store.delete_items([item.item_id for item in items])

        if removed:
            logger.info(f"Reversed {removed} ledger item(s) for {source}/{source_id}")
        else:
            logger.debug(f"Nothing to reverse for {source}/{source_id}")
        return removed

    async def _apply_balance_delta(
        self,
        tenant_id: str,
        institute_id: str,
        delta: Decimal,
    ) -> bool:
        """Apply a delta to the account chosen by the policy

        Returns:
            False when the institute has no active account (silently skipped)
        """
        account = await self.account_policy(self.store, tenant_id, institute_id)
        if account is None:
            logger.debug(
                f"No active account for institute {institute_id}; balance unchanged"
            )
            return False
        return await self.store.increment_account_balance(account.account_id, delta)

    async def _resolve_category_id(self, request: PostingRequest) -> str | None:
        if not request.category_name:
            return None
        category = await self.store.find_category(
            request.tenant_id,
            request.category_name,
            request.ledger_type.value,
        )
        if category is None:
            logger.debug(f"Unknown category '{request.category_name}'; posting uncategorized")
            return None
        return category.category_id


# =========================================================================
# Failure channel for call sites
# =========================================================================


@dataclass(frozen=True)
class PostingOutcome:
    """Result of a ledger side effect run after the primary operation

    ok=False means the primary operation committed but the ledger did not
    follow; the error has already been logged.
    """

    ok: bool
    posted: int = 0
    reversed: int = 0
    error: str | None = None

    @classmethod
    def succeeded(cls, posted: int = 0, reversed: int = 0) -> PostingOutcome:
        return cls(ok=True, posted=posted, reversed=reversed)

    @classmethod
    def failed(cls, error: BaseException, posted: int = 0, reversed: int = 0) -> PostingOutcome:
        return cls(ok=False, posted=posted, reversed=reversed, error=f"{type(error).__name__}: {error}")


async def safe_post(engine: PostingEngine, *requests: PostingRequest) -> PostingOutcome:
    """Post requests in order; never raises

    Stops at the first failure; earlier postings stay in place.
    """
    posted = 0
    for request in requests:
        try:
            await engine.post(request)
        except Exception as e:
            logger.exception(
                f"Ledger posting failed for {request.source.value}/{request.source_id}: {e}"
            )
            return PostingOutcome.failed(e, posted=posted)
        posted += 1
    return PostingOutcome.succeeded(posted=posted)


async def safe_reverse(
    engine: PostingEngine,
    source: SourceTag | str,
    source_id: str,
    tenant_id: str | None = None,
) -> PostingOutcome:
    """Reverse a posting episode; never raises"""
    try:
        removed = await engine.reverse(source, source_id, tenant_id)
    except Exception as e:
        logger.exception(f"Ledger reversal failed for {source}/{source_id}: {e}")
        return PostingOutcome.failed(e)
    return PostingOutcome.succeeded(reversed=removed)


async def safe_repost(
    engine: PostingEngine,
    source: SourceTag | str,
    source_id: str,
    request: PostingRequest | None,
    tenant_id: str | None = None,
) -> PostingOutcome:
    """Reverse the previous episode, then post the replacement (if any)

    Never raises. A failed reversal skips the re-post so the old items
    are not doubled.
    """
    reversal = await safe_reverse(engine, source, source_id, tenant_id)
    if not reversal.ok or request is None:
        return reversal

    posting = await safe_post(engine, request)
    if not posting.ok:
        return PostingOutcome(
            ok=False,
            posted=posting.posted,
            reversed=reversal.reversed,
            error=posting.error,
        )
    return PostingOutcome.succeeded(posted=posting.posted, reversed=reversal.reversed)
