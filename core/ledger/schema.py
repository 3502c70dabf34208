"""
Ledger schema initialisation

Creates the ledger tables on web start-up.
CREATE ... IF NOT EXISTS throughout, so calling it repeatedly is safe.
"""

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from adapters.db.sqlite_adapter import SQLiteAdapter

logger = logging.getLogger(__name__)


async def init_ledger_schema(db: "SQLiteAdapter") -> None:
    """Create all ledger tables and indexes

    Args:
        db: connected SQLiteAdapter
    """
    await _create_ledger_tables(db)
    await _create_ledger_indexes(db)
    await db.commit()
    logger.info("Ledger schema initialised")


async def _create_ledger_tables(db: "SQLiteAdapter") -> None:
    """Create the ledger tables"""

    # institute (display names only; owned by the institute CRUD layer)
    await db.execute("""
        CREATE TABLE IF NOT EXISTS institute (
            institute_id     TEXT PRIMARY KEY,
            tenant_id        TEXT NOT NULL,
            name             TEXT NOT NULL,
            created_at       TEXT NOT NULL DEFAULT (datetime('now'))
        )
    """)

    # ledger
    await db.execute("""
        CREATE TABLE IF NOT EXISTS ledger (
            seq              INTEGER PRIMARY KEY AUTOINCREMENT,
            ledger_id        TEXT NOT NULL UNIQUE,
            tenant_id        TEXT NOT NULL,
            institute_id     TEXT,
            name             TEXT NOT NULL,
            ledger_type      TEXT NOT NULL CHECK (ledger_type IN ('income', 'expense')),
            description      TEXT,
            created_at       TEXT NOT NULL DEFAULT (datetime('now'))
        )
    """)

    # category
    await db.execute("""
        CREATE TABLE IF NOT EXISTS category (
            category_id      TEXT PRIMARY KEY,
            tenant_id        TEXT NOT NULL,
            name             TEXT NOT NULL,
            category_type    TEXT NOT NULL CHECK (category_type IN ('income', 'expense')),
            description      TEXT,
            created_at       TEXT NOT NULL DEFAULT (datetime('now'))
        )
    """)

    # ledger_item (append-only transaction log)
    await db.execute("""
        CREATE TABLE IF NOT EXISTS ledger_item (
            seq              INTEGER PRIMARY KEY AUTOINCREMENT,
            item_id          TEXT NOT NULL UNIQUE,
            tenant_id        TEXT NOT NULL,
            institute_id     TEXT,
            ledger_id        TEXT NOT NULL,
            item_type        TEXT NOT NULL CHECK (item_type IN ('income', 'expense')),
            entry_date       TEXT NOT NULL,
            amount_minor     INTEGER NOT NULL CHECK (amount_minor >= 0),
            description      TEXT NOT NULL,
            category_id      TEXT,
            payment_method   TEXT,
            reference_no     TEXT,
            source           TEXT NOT NULL,
            source_id        TEXT,
            created_at       TEXT NOT NULL DEFAULT (datetime('now')),
            FOREIGN KEY (ledger_id) REFERENCES ledger(ledger_id)
        )
    """)

    # institute_account (bank balances)
    await db.execute("""
        CREATE TABLE IF NOT EXISTS institute_account (
            seq              INTEGER PRIMARY KEY AUTOINCREMENT,
            account_id       TEXT NOT NULL UNIQUE,
            tenant_id        TEXT NOT NULL,
            institute_id     TEXT NOT NULL,
            account_name     TEXT NOT NULL,
            account_number   TEXT,
            bank_name        TEXT,
            ifsc_code        TEXT,
            balance_minor    INTEGER NOT NULL DEFAULT 0,
            status           TEXT NOT NULL DEFAULT 'active' CHECK (status IN ('active', 'inactive')),
            created_at       TEXT NOT NULL DEFAULT (datetime('now')),
            updated_at       TEXT NOT NULL DEFAULT (datetime('now'))
        )
    """)

    logger.debug("Ledger tables created")


async def _create_ledger_indexes(db: "SQLiteAdapter") -> None:
    """Create indexes

    ux_ledger_identity makes ledger find-or-create converge under
    concurrent first use (institute NULL is folded to '').
    """
    await db.execute("""
        CREATE UNIQUE INDEX IF NOT EXISTS ux_ledger_identity
        ON ledger(tenant_id, COALESCE(institute_id, ''), name, ledger_type)
    """)
    await db.execute("CREATE INDEX IF NOT EXISTS idx_ledger_tenant ON ledger(tenant_id)")
    await db.execute("CREATE INDEX IF NOT EXISTS idx_category_tenant ON category(tenant_id, name)")
    await db.execute("CREATE INDEX IF NOT EXISTS idx_ledger_item_tenant_date ON ledger_item(tenant_id, entry_date)")
    await db.execute("CREATE INDEX IF NOT EXISTS idx_ledger_item_institute ON ledger_item(institute_id)")
    await db.execute("CREATE INDEX IF NOT EXISTS idx_ledger_item_ledger ON ledger_item(ledger_id)")
    await db.execute("CREATE INDEX IF NOT EXISTS idx_ledger_item_source ON ledger_item(source, source_id)")
    await db.execute("""
        CREATE INDEX IF NOT EXISTS idx_institute_account_scope
        ON institute_account(tenant_id, institute_id, status)
    """)

    logger.debug("Ledger indexes created")
