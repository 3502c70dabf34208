"""
Ledger catalog

Resolves (tenant, institute, name, type) to a ledger, creating it on first
use so business events can post without pre-configured ledgers.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from core.ledger.models import Ledger
from core.ledger.store import new_id
from core.ledger.types import LedgerType

if TYPE_CHECKING:
    from core.ledger.store import LedgerStore

logger = logging.getLogger(__name__)


def auto_ledger_description(name: str, ledger_type: str) -> str:
    return f"Auto-created ledger for {ledger_type} - {name}"


class LedgerCatalog:
    """Find-or-create access to ledgers

    Creation goes through INSERT OR IGNORE on the ledger identity index and
    re-reads afterwards, so two concurrent first-time postings end up on the
    same ledger.
    """

    def __init__(self, store: LedgerStore):
        self.store = store

    async def resolve_ledger(
        self,
        tenant_id: str,
        name: str,
        ledger_type: LedgerType | str,
        institute_id: str | None = None,
    ) -> Ledger:
        """Return the matching ledger, creating it when absent

        Args:
            tenant_id: tenant
            name: ledger name
            ledger_type: income / expense
            institute_id: narrows the match when given; stored on creation

        Returns:
            The existing or newly created ledger
        """
        ledger_type = LedgerType(ledger_type).value

        ledger = await self.store.find_ledger(tenant_id, name, ledger_type, institute_id)
        if ledger is not None:
            return ledger

        candidate = Ledger(
            ledger_id=new_id(),
            tenant_id=tenant_id,
            name=name,
            ledger_type=ledger_type,
            institute_id=institute_id,
            description=auto_ledger_description(name, ledger_type),
        )
        created = await self.store.insert_ledger_if_absent(candidate)
        if created:
            logger.info(
                f"Auto-created {ledger_type} ledger '{name}' "
                f"(tenant={tenant_id}, institute={institute_id})"
            )
            return candidate

        # Lost a race with another first-time posting; use the winner
        ledger = await self.store.find_ledger(tenant_id, name, ledger_type, institute_id)
        if ledger is None:
            raise RuntimeError(f"Ledger '{name}' vanished after concurrent creation")
        return ledger
