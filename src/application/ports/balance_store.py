"""Port for the durable account and balance store."""

from datetime import date
from decimal import Decimal
from typing import Protocol

from src.domain.models import Account, BalanceRow, Category, OwnerType


class BalanceStorePort(Protocol):
    """Port exposing read and write primitives over accounts and balances.

    Deletion is soft: deleted accounts keep their balance history and are
    returned by ``list_accounts(include_deleted=True)``.
    """

    def prepare(self) -> None:
        """Ensure the storage schema exists."""

    def list_accounts(self, include_deleted: bool = False) -> list[Account]:
        """Return accounts ordered by id."""

    def get_account(self, account_id: int) -> Account | None:
        """Return an account, deleted or not, or None when unknown."""

    def list_balances(self, account_id: int) -> list[BalanceRow]:
        """Return raw balance rows of an account ordered by date."""

    def list_categories(self) -> list[Category]:
        """Return the category table."""

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
        """Create an account and return its id.

        When ``initial_balance`` and ``entry_date`` are given, the first
        balance is written in the same transaction as the account.
        """

    def update_account(
        self,
        account_id: int,
        name: str,
        bank: str,
        category: str,
        owner: OwnerType,
        notes: str | None = None,
    ) -> None:
        """Update the descriptive attributes of an account."""

    def soft_delete_account(self, account_id: int, deleted_on: date) -> None:
        """Mark an account as deleted from ``deleted_on``."""

    def upsert_balance(
        self,
        account_id: int,
        entry_date: date,
        value: Decimal,
    ) -> None:
        """Record the balance of an account on a day, replacing any entry."""


__all__ = ["BalanceStorePort"]
