"""SQLAlchemy-backed balance store for accounts and balance observations."""

from datetime import date
from decimal import Decimal

from sqlalchemy import text

from src.application.ports.balance_store import BalanceStorePort
from src.application.ports.database import DatabaseEnginePort
from src.domain.constants import DEFAULT_CATEGORIES
from src.domain.models import (
    Account,
    AccountKind,
    BalanceRow,
    Category,
    OwnerType,
)
from src.domain.services.months import parse_local_date
from src.utils.decimal_utils import coerce_decimal


CREATE_CATEGORIES_SQL = """
CREATE TABLE IF NOT EXISTS categories (
    key TEXT PRIMARY KEY,
    label TEXT NOT NULL,
    kind TEXT NOT NULL
)
"""

CREATE_ACCOUNTS_SQL = """
CREATE TABLE IF NOT EXISTS accounts (
    id {id_column},
    name TEXT NOT NULL,
    bank TEXT NOT NULL,
    category TEXT NOT NULL REFERENCES categories (key),
    owner TEXT NOT NULL,
    notes TEXT,
    deleted_on DATE
)
"""

CREATE_BALANCES_SQL = """
CREATE TABLE IF NOT EXISTS balances (
    account_id INTEGER NOT NULL REFERENCES accounts (id),
    entry_date DATE NOT NULL,
    value TEXT NOT NULL,
    PRIMARY KEY (account_id, entry_date)
)
"""

SEED_CATEGORY_SQL = text(
    """
    INSERT INTO categories (key, label, kind)
    VALUES (:key, :label, :kind)
    ON CONFLICT (key) DO NOTHING
    """
)

SELECT_ACCOUNTS_SQL = """
SELECT id, name, bank, category, owner, notes, deleted_on
FROM accounts
"""

SELECT_BALANCES_SQL = text(
    """
    SELECT account_id, entry_date, value
    FROM balances
    WHERE account_id = :account_id
    ORDER BY entry_date
    """
)

SELECT_CATEGORIES_SQL = text(
    """
    SELECT key, label, kind
    FROM categories
    ORDER BY key
    """
)

INSERT_ACCOUNT_SQL = text(
    """
    INSERT INTO accounts (name, bank, category, owner, notes)
    VALUES (:name, :bank, :category, :owner, :notes)
    RETURNING id
    """
)

UPDATE_ACCOUNT_SQL = text(
    """
    UPDATE accounts
    SET name = :name,
        bank = :bank,
        category = :category,
        owner = :owner,
        notes = :notes
    WHERE id = :id
    """
)

SOFT_DELETE_ACCOUNT_SQL = text(
    """
    UPDATE accounts
    SET deleted_on = :deleted_on
    WHERE id = :id
    """
)

UPSERT_BALANCE_SQL = text(
    """
    INSERT INTO balances (account_id, entry_date, value)
    VALUES (:account_id, :entry_date, :value)
    ON CONFLICT (account_id, entry_date)
    DO UPDATE SET value = excluded.value
    """
)


class SqlAlchemyBalanceStore(BalanceStorePort):
    """Balance store backed by SQLAlchemy.

    Accounts are soft-deleted: ``deleted_on`` is set and balances are kept.
    Balance values are stored as decimal strings so they read back exactly.
    """

    def __init__(self, db_port: DatabaseEnginePort) -> None:
        """Initialize the store.

        Args:
            db_port: Port providing access to the net worth engine.
        """
        self._db_port = db_port

    def prepare(self) -> None:
        """Create the tables when missing and seed default categories."""
        engine = self._db_port.get_networth_engine()
        dialect = engine.dialect.name
        id_column = (
            "INTEGER PRIMARY KEY AUTOINCREMENT"
            if dialect == "sqlite"
            else "SERIAL PRIMARY KEY"
        )
        with engine.begin() as conn:
            conn.exec_driver_sql(CREATE_CATEGORIES_SQL)
            conn.exec_driver_sql(CREATE_ACCOUNTS_SQL.format(id_column=id_column))
            conn.exec_driver_sql(CREATE_BALANCES_SQL)
            conn.execute(
                SEED_CATEGORY_SQL,
                [
                    {
                        "key": category.key,
                        "label": category.label,
                        "kind": category.kind.value,
                    }
                    for category in DEFAULT_CATEGORIES.values()
                ],
            )

    def list_accounts(self, include_deleted: bool = False) -> list[Account]:
        sql = SELECT_ACCOUNTS_SQL
        if not include_deleted:
            sql += " WHERE deleted_on IS NULL"
        sql += " ORDER BY id"
        engine = self._db_port.get_networth_engine()
        with engine.connect() as conn:
            rows = conn.execute(text(sql)).all()
        return [self._to_account(row) for row in rows]

    def get_account(self, account_id: int) -> Account | None:
        engine = self._db_port.get_networth_engine()
        with engine.connect() as conn:
            row = conn.execute(
                text(SELECT_ACCOUNTS_SQL + " WHERE id = :id"),
                {"id": account_id},
            ).first()
        if row is None:
            return None
        return self._to_account(row)

    def list_balances(self, account_id: int) -> list[BalanceRow]:
        engine = self._db_port.get_networth_engine()
        with engine.connect() as conn:
            rows = conn.execute(
                SELECT_BALANCES_SQL,
                {"account_id": account_id},
            ).all()
        return [
            BalanceRow(
                account_id=row.account_id,
                entry_date=row.entry_date,
                value=row.value,
            )
            for row in rows
        ]

    def list_categories(self) -> list[Category]:
        engine = self._db_port.get_networth_engine()
        with engine.connect() as conn:
            rows = conn.execute(SELECT_CATEGORIES_SQL).all()
        return [
            Category(key=row.key, label=row.label, kind=AccountKind(row.kind))
            for row in rows
        ]

    def add_account(
        self,
        name: str,
        bank: str,
        category: str,
        owner: OwnerType,
        notes: str | None = None,
        initial_balance: Decimal | None = None,
        entry_date: date | None = None,
    ) -> int:
        engine = self._db_port.get_networth_engine()
        with engine.begin() as conn:
            account_id = conn.execute(
                INSERT_ACCOUNT_SQL,
                {
                    "name": name,
                    "bank": bank,
                    "category": category,
                    "owner": OwnerType(owner).value,
                    "notes": notes,
                },
            ).scalar_one()
            if initial_balance is not None and entry_date is not None:
                conn.execute(
                    UPSERT_BALANCE_SQL,
                    self._balance_params(
                        account_id,
                        entry_date,
                        initial_balance,
                    ),
                )
        return int(account_id)

    def update_account(
        self,
        account_id: int,
        name: str,
        bank: str,
        category: str,
        owner: OwnerType,
        notes: str | None = None,
    ) -> None:
        engine = self._db_port.get_networth_engine()
        with engine.begin() as conn:
            result = conn.execute(
                UPDATE_ACCOUNT_SQL,
                {
                    "id": account_id,
                    "name": name,
                    "bank": bank,
                    "category": category,
                    "owner": OwnerType(owner).value,
                    "notes": notes,
                },
            )
        if result.rowcount == 0:
            raise RuntimeError(f"Missing account in accounts: {account_id}")

    def soft_delete_account(self, account_id: int, deleted_on: date) -> None:
        engine = self._db_port.get_networth_engine()
        with engine.begin() as conn:
            result = conn.execute(
                SOFT_DELETE_ACCOUNT_SQL,
                {"id": account_id, "deleted_on": deleted_on.isoformat()},
            )
        if result.rowcount == 0:
            raise RuntimeError(f"Missing account in accounts: {account_id}")

    def upsert_balance(
        self,
        account_id: int,
        entry_date: date,
        value: Decimal,
    ) -> None:
        engine = self._db_port.get_networth_engine()
        with engine.begin() as conn:
            conn.execute(
                UPSERT_BALANCE_SQL,
                self._balance_params(account_id, entry_date, value),
            )

    @staticmethod
    def _balance_params(
        account_id: int,
        entry_date: date,
        value: Decimal,
    ) -> dict[str, object]:
        return {
            "account_id": account_id,
            "entry_date": entry_date.isoformat(),
            "value": str(coerce_decimal(value)),
        }

    @staticmethod
    def _to_account(row) -> Account:
        return Account(
            id=int(row.id),
            name=row.name,
            bank=row.bank,
            category=row.category,
            owner=OwnerType(row.owner),
            notes=row.notes,
            deleted_on=parse_local_date(row.deleted_on),
        )


__all__ = [
    "SqlAlchemyBalanceStore",
    "CREATE_CATEGORIES_SQL",
    "CREATE_ACCOUNTS_SQL",
    "CREATE_BALANCES_SQL",
]
