"""
Institute balance check

Prints, per institute, the sum of its account balances next to the signed
sum of the ledger items posted against it. Read-only; nothing is
corrected.

The two can legitimately differ by opening balances and by postings made
while the institute had no active account.

Usage:
    python -m scripts.check_balances --tenant TENANT_ID
    python -m scripts.check_balances --tenant TENANT_ID --environment production

Without --environment the database configured in settings.yaml is read,
including any database.path override.
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

# Put the project root on the import path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.config.loader import get_db_path, get_settings
from core.ledger.aggregation import group_by, sum_balances
from core.ledger.store import LedgerStore
from core.logging import setup_logging

logger = logging.getLogger(__name__)


def resolve_db_path(environment: str | None = None) -> Path:
    """The service's configured DB, or the default DB of an explicit environment"""
    if environment is None:
        return get_settings().db_path
    return get_db_path(environment)


async def main(tenant_id: str, environment: str | None = None) -> None:
    db_path = resolve_db_path(environment)
    logger.info(f"Checking balances for tenant {tenant_id} ({db_path})")

    async with SQLiteAdapter(db_path, readonly=True) as db:
        store = LedgerStore(db)
        accounts = await store.list_accounts(tenant_id=tenant_id)
        names = await store.get_institute_names(tenant_id)

        print("=" * 72)
        print(f"{'Institute':30} | {'Accounts':>12} | {'Postings':>12} | {'Diff':>10}")
        print("=" * 72)
        for institute_id, institute_accounts in group_by(
            accounts, lambda account: account.institute_id
        ).items():
            balance = sum_balances(institute_accounts)
            posted = await store.sum_signed_amounts(tenant_id, institute_id)
            name = names.get(institute_id, institute_id)
            print(f"{name[:30]:30} | {balance:>12} | {posted:>12} | {balance - posted:>10}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Compare account balances with posted items")
    parser.add_argument("--tenant", required=True, help="Tenant id")
    parser.add_argument(
        "--environment",
        choices=["development", "production"],
        default=None,
        help="Read this environment's default DB instead of the one in settings.yaml",
    )
    args = parser.parse_args()

    setup_logging("worker")
    asyncio.run(main(args.tenant, args.environment))
