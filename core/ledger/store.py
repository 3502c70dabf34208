"""
Ledger store

Persistence for ledgers, categories, ledger items (the transaction log) and
institute bank accounts. Reads return model records; aggregation happens
in core.ledger.reports.
"""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING, Any
from uuid import uuid4

from core.ledger.filters import ItemQuery
from core.ledger.models import (
    Category,
    Institute,
    InstituteAccount,
    Ledger,
    LedgerItem,
    from_minor,
    to_minor,
)
from core.ledger.types import AccountStatus, LedgerType

if TYPE_CHECKING:
    from adapters.db.sqlite_adapter import SQLiteAdapter

logger = logging.getLogger(__name__)


def new_id() -> str:
    """Random record id"""
    return uuid4().hex


_LEDGER_COLUMNS = """
    l.ledger_id, l.tenant_id, l.name, l.ledger_type,
    l.institute_id, l.description, l.created_at
"""

_ITEM_COLUMNS = """
    li.item_id, li.seq, li.tenant_id, li.ledger_id, li.item_type,
    li.entry_date, li.amount_minor, li.description, li.source,
    li.institute_id, li.category_id, li.payment_method, li.reference_no,
    li.source_id, li.created_at,
    l.name, c.name, i.name
"""

_ITEM_JOINS = """
    FROM ledger_item li
    JOIN ledger l ON l.ledger_id = li.ledger_id
    LEFT JOIN category c ON c.category_id = li.category_id
    LEFT JOIN institute i ON i.institute_id = li.institute_id
"""

_ACCOUNT_COLUMNS = """
    a.account_id, a.seq, a.tenant_id, a.institute_id, a.account_name,
    a.balance_minor, a.status, a.account_number, a.bank_name, a.ifsc_code,
    a.created_at, i.name
"""


def _row_to_ledger(row: tuple[Any, ...]) -> Ledger:
    return Ledger(
        ledger_id=row[0],
        tenant_id=row[1],
        name=row[2],
        ledger_type=row[3],
        institute_id=row[4],
        description=row[5],
        created_at=row[6],
    )


def _row_to_item(row: tuple[Any, ...]) -> LedgerItem:
    return LedgerItem(
        item_id=row[0],
        seq=row[1],
        tenant_id=row[2],
        ledger_id=row[3],
        item_type=row[4],
        entry_date=date.fromisoformat(row[5]),
        amount=from_minor(row[6]),
        description=row[7],
        source=row[8],
        institute_id=row[9],
        category_id=row[10],
        payment_method=row[11],
        reference_no=row[12],
        source_id=row[13],
        created_at=row[14],
        ledger_name=row[15],
        category_name=row[16],
        institute_name=row[17],
    )


def _row_to_account(row: tuple[Any, ...]) -> InstituteAccount:
    return InstituteAccount(
        account_id=row[0],
        seq=row[1],
        tenant_id=row[2],
        institute_id=row[3],
        account_name=row[4],
        balance=from_minor(row[5]),
        status=row[6],
        account_number=row[7],
        bank_name=row[8],
        ifsc_code=row[9],
        created_at=row[10],
        institute_name=row[11],
    )


class LedgerStore:
    """Ledger store

    Item and balance writes do not commit; the posting engine decides the
    transaction boundaries. Administrative helpers commit themselves.

    Args:
        db: SQLite adapter
    """

    def __init__(self, db: SQLiteAdapter):
        self.db = db

    # =========================================================================
    # Institutes
    # =========================================================================

    async def create_institute(
        self,
        tenant_id: str,
        name: str,
        institute_id: str | None = None,
    ) -> Institute:
        """Register an institute name (normally owned by the institute CRUD layer)"""
        institute = Institute(
            institute_id=institute_id or new_id(),
            tenant_id=tenant_id,
            name=name,
        )
        await self.db.execute(
            "INSERT INTO institute (institute_id, tenant_id, name) VALUES (?, ?, ?)",
            (institute.institute_id, institute.tenant_id, institute.name),
        )
        await self.db.commit()
        return institute

    async def get_institute_names(self, tenant_id: str | None = None) -> dict[str, str]:
        """institute_id -> name"""
        if tenant_id:
            rows = await self.db.fetchall(
                "SELECT institute_id, name FROM institute WHERE tenant_id = ?",
                (tenant_id,),
            )
        else:
            rows = await self.db.fetchall("SELECT institute_id, name FROM institute")
        return {row[0]: row[1] for row in rows}

    # =========================================================================
    # Ledgers
    # =========================================================================

    async def find_ledger(
        self,
        tenant_id: str,
        name: str,
        ledger_type: str,
        institute_id: str | None = None,
    ) -> Ledger | None:
        """Find a ledger by identity

        The institute only narrows the match when given; without it any
        ledger of that tenant/name/type matches (earliest first).
        """
        sql = f"""
            SELECT {_LEDGER_COLUMNS}
            FROM ledger l
            WHERE l.tenant_id = ? AND l.name = ? AND l.ledger_type = ?
        """
        params: list[Any] = [tenant_id, name, ledger_type]
        if institute_id:
            sql += " AND l.institute_id = ?"
            params.append(institute_id)
        sql += " ORDER BY l.seq LIMIT 1"

        row = await self.db.fetchone(sql, tuple(params))
        return _row_to_ledger(row) if row else None

    async def insert_ledger_if_absent(self, ledger: Ledger) -> bool:
        """INSERT OR IGNORE against the ledger identity index

        Returns:
            True when this call created the row
        """
        cursor = await self.db.execute(
            """
            INSERT OR IGNORE INTO ledger (
                ledger_id, tenant_id, institute_id, name, ledger_type, description
            ) VALUES (?, ?, ?, ?, ?, ?)
            """,
            (
                ledger.ledger_id,
                ledger.tenant_id,
                ledger.institute_id,
                ledger.name,
                ledger.ledger_type,
                ledger.description,
            ),
        )
        await self.db.commit()
        return cursor.rowcount == 1

    async def get_ledger(self, ledger_id: str, tenant_id: str | None = None) -> Ledger | None:
        """Single ledger by id, optionally only within one tenant"""
        sql = f"SELECT {_LEDGER_COLUMNS} FROM ledger l WHERE l.ledger_id = ?"
        params: list[Any] = [ledger_id]
        if tenant_id:
            sql += " AND l.tenant_id = ?"
            params.append(tenant_id)
        row = await self.db.fetchone(sql, tuple(params))
        return _row_to_ledger(row) if row else None

    async def list_ledgers(
        self,
        tenant_id: str | None = None,
        institute_id: str | None = None,
        ledger_type: str | None = None,
    ) -> list[Ledger]:
        """Ledgers ordered by type then name"""
        sql = f"SELECT {_LEDGER_COLUMNS} FROM ledger l WHERE 1 = 1"
        params: list[Any] = []
        if tenant_id:
            sql += " AND l.tenant_id = ?"
            params.append(tenant_id)
        if institute_id:
            sql += " AND l.institute_id = ?"
            params.append(institute_id)
        if ledger_type:
            sql += " AND l.ledger_type = ?"
            params.append(ledger_type)
        sql += " ORDER BY l.ledger_type, l.name"

        rows = await self.db.fetchall(sql, tuple(params))
        return [_row_to_ledger(row) for row in rows]

    # =========================================================================
    # Categories
    # =========================================================================

    async def create_category(
        self,
        tenant_id: str,
        name: str,
        category_type: str,
    ) -> Category:
        """Create a category (configuration layer helper)"""
        category = Category(
            category_id=new_id(),
            tenant_id=tenant_id,
            name=name,
            category_type=LedgerType(category_type).value,
        )
        await self.db.execute(
            """
            INSERT INTO category (category_id, tenant_id, name, category_type)
            VALUES (?, ?, ?, ?)
            """,
            (category.category_id, category.tenant_id, category.name, category.category_type),
        )
        await self.db.commit()
        return category

    async def find_category(
        self,
        tenant_id: str,
        name: str,
        category_type: str,
    ) -> Category | None:
        """Category by tenant, name and type"""
        row = await self.db.fetchone(
            """
            SELECT category_id, tenant_id, name, category_type
            FROM category
            WHERE tenant_id = ? AND name = ? AND category_type = ?
            ORDER BY created_at
            LIMIT 1
            """,
            (tenant_id, name, category_type),
        )
        if not row:
            return None
        return Category(category_id=row[0], tenant_id=row[1], name=row[2], category_type=row[3])

    # =========================================================================
    # Ledger items (transaction log)
    # =========================================================================

    async def insert_item(
        self,
        *,
        tenant_id: str,
        ledger_id: str,
        item_type: str,
        entry_date: date,
        amount: Decimal,
        description: str,
        source: str,
        source_id: str | None = None,
        institute_id: str | None = None,
        category_id: str | None = None,
        payment_method: str | None = None,
        reference_no: str | None = None,
    ) -> LedgerItem:
        """Append one ledger item (caller commits)"""
        item_id = new_id()
        cursor = await self.db.execute(
            """
            INSERT INTO ledger_item (
                item_id, tenant_id, institute_id, ledger_id, item_type,
                entry_date, amount_minor, description, category_id,
                payment_method, reference_no, source, source_id
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                item_id,
                tenant_id,
                institute_id,
                ledger_id,
                item_type,
                entry_date.isoformat(),
                to_minor(amount),
                description,
                category_id,
                payment_method,
                reference_no,
                source,
                source_id,
            ),
        )

        logger.debug(f"Inserted ledger item: {item_id} ({source}/{source_id})")

        return LedgerItem(
            item_id=item_id,
            seq=cursor.lastrowid or 0,
            tenant_id=tenant_id,
            ledger_id=ledger_id,
            item_type=item_type,
            entry_date=entry_date,
            amount=amount,
            description=description,
            source=source,
            institute_id=institute_id,
            category_id=category_id,
            payment_method=payment_method,
            reference_no=reference_no,
            source_id=source_id,
        )

    async def fetch_items(self, query: ItemQuery) -> list[LedgerItem]:
        """Items matching a query, in (date, insertion) order"""
        sql = f"SELECT {_ITEM_COLUMNS} {_ITEM_JOINS} WHERE 1 = 1"
        params: list[Any] = []

        if query.tenant_id:
            sql += " AND li.tenant_id = ?"
            params.append(query.tenant_id)
        if query.institute_id:
            sql += " AND li.institute_id = ?"
            params.append(query.institute_id)
        if query.ledger_id:
            sql += " AND li.ledger_id = ?"
            params.append(query.ledger_id)
        if query.ledger_type:
            sql += " AND l.ledger_type = ?"
            params.append(query.ledger_type)
        if query.period.start:
            sql += " AND li.entry_date >= ?"
            params.append(query.period.start.isoformat())
        if query.period.end:
            sql += " AND li.entry_date <= ?"
            params.append(query.period.end.isoformat())
        if query.before:
            sql += " AND li.entry_date < ?"
            params.append(query.before.isoformat())

        sql += " ORDER BY li.entry_date, li.seq"

        rows = await self.db.fetchall(sql, tuple(params))
        return [_row_to_item(row) for row in rows]

    async def find_items_by_source(
        self,
        source: str,
        source_id: str,
        tenant_id: str | None = None,
    ) -> list[LedgerItem]:
        """Items posted for one source event (optionally within one tenant)"""
        sql = f"SELECT {_ITEM_COLUMNS} {_ITEM_JOINS} WHERE li.source = ? AND li.source_id = ?"
        params: list[Any] = [source, source_id]
        if tenant_id:
            sql += " AND li.tenant_id = ?"
            params.append(tenant_id)
        sql += " ORDER BY li.seq"

        rows = await self.db.fetchall(sql, tuple(params))
        return [_row_to_item(row) for row in rows]

    async def delete_items(self, item_ids: list[str]) -> int:
        """Delete items by id (caller commits)

        Returns:
            number of rows deleted
        """
        if not item_ids:
            return 0
        placeholders = ", ".join("?" for _ in item_ids)
        cursor = await self.db.execute(
            f"DELETE FROM ledger_item WHERE item_id IN ({placeholders})",
            tuple(item_ids),
        )
        return cursor.rowcount

    async def sum_signed_amounts(self, tenant_id: str, institute_id: str) -> Decimal:
        """Signed sum of every item posted for an institute

        Lets an operator compare the incrementally maintained account
        balance with the transaction history.
        """
        row = await self.db.fetchone(
            """
            SELECT
                COALESCE(SUM(CASE WHEN item_type = 'income' THEN amount_minor ELSE 0 END), 0),
                COALESCE(SUM(CASE WHEN item_type = 'expense' THEN amount_minor ELSE 0 END), 0)
            FROM ledger_item
            WHERE tenant_id = ? AND institute_id = ?
            """,
            (tenant_id, institute_id),
        )
        if not row:
            return from_minor(0)
        return from_minor(row[0]) - from_minor(row[1])

    # =========================================================================
    # Institute accounts
    # =========================================================================

    async def create_institute_account(
        self,
        tenant_id: str,
        institute_id: str,
        account_name: str,
        *,
        bank_name: str | None = None,
        account_number: str | None = None,
        ifsc_code: str | None = None,
        opening_balance: Decimal = Decimal("0"),
        status: str = AccountStatus.ACTIVE.value,
    ) -> InstituteAccount:
        """Create a bank account for an institute"""
        account_id = new_id()
        status = AccountStatus(status).value
        cursor = await self.db.execute(
            """
            INSERT INTO institute_account (
                account_id, tenant_id, institute_id, account_name,
                account_number, bank_name, ifsc_code, balance_minor, status
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                account_id,
                tenant_id,
                institute_id,
                account_name,
                account_number,
                bank_name,
                ifsc_code,
                to_minor(opening_balance),
                status,
            ),
        )
        await self.db.commit()

        logger.info(f"Created institute account {account_id} for institute {institute_id}")

        return InstituteAccount(
            account_id=account_id,
            seq=cursor.lastrowid or 0,
            tenant_id=tenant_id,
            institute_id=institute_id,
            account_name=account_name,
            balance=from_minor(to_minor(opening_balance)),
            status=status,
            account_number=account_number,
            bank_name=bank_name,
            ifsc_code=ifsc_code,
        )

    async def get_account(self, account_id: str) -> InstituteAccount | None:
        """Single account by id"""
        row = await self.db.fetchone(
            f"""
            SELECT {_ACCOUNT_COLUMNS}
            FROM institute_account a
            LEFT JOIN institute i ON i.institute_id = a.institute_id
            WHERE a.account_id = ?
            """,
            (account_id,),
        )
        return _row_to_account(row) if row else None

    async def set_account_status(self, account_id: str, status: str) -> bool:
        """Activate / deactivate an account

        Returns:
            False when the account does not exist
        """
        cursor = await self.db.execute(
            """
            UPDATE institute_account
            SET status = ?, updated_at = datetime('now')
            WHERE account_id = ?
            """,
            (AccountStatus(status).value, account_id),
        )
        await self.db.commit()
        return cursor.rowcount == 1

    async def list_accounts(
        self,
        tenant_id: str | None = None,
        institute_id: str | None = None,
        active_only: bool = False,
    ) -> list[InstituteAccount]:
        """Accounts in creation order"""
        sql = f"""
            SELECT {_ACCOUNT_COLUMNS}
            FROM institute_account a
            LEFT JOIN institute i ON i.institute_id = a.institute_id
            WHERE 1 = 1
        """
        params: list[Any] = []
        if tenant_id:
            sql += " AND a.tenant_id = ?"
            params.append(tenant_id)
        if institute_id:
            sql += " AND a.institute_id = ?"
            params.append(institute_id)
        if active_only:
            sql += " AND a.status = ?"
            params.append(AccountStatus.ACTIVE.value)
        sql += " ORDER BY a.seq"

        rows = await self.db.fetchall(sql, tuple(params))
        return [_row_to_account(row) for row in rows]

    async def find_earliest_active_account(
        self,
        tenant_id: str,
        institute_id: str,
    ) -> InstituteAccount | None:
        """Earliest-created active account of an institute"""
        row = await self.db.fetchone(
            f"""
            SELECT {_ACCOUNT_COLUMNS}
            FROM institute_account a
            LEFT JOIN institute i ON i.institute_id = a.institute_id
            WHERE a.tenant_id = ? AND a.institute_id = ? AND a.status = ?
            ORDER BY a.seq
            LIMIT 1
            """,
            (tenant_id, institute_id, AccountStatus.ACTIVE.value),
        )
        return _row_to_account(row) if row else None

    async def increment_account_balance(self, account_id: str, delta: Decimal) -> bool:
        """Apply a signed balance delta (caller commits)

        Single UPDATE with balance_minor = balance_minor + ?, so
        concurrent postings cannot lose each other's updates.

        Returns:
            False when the account does not exist
        """
        cursor = await self.db.execute(
            """
            UPDATE institute_account
            SET balance_minor = balance_minor + ?, updated_at = datetime('now')
            WHERE account_id = ?
            """,
            (to_minor(delta), account_id),
        )
        return cursor.rowcount == 1
