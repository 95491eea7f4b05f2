"""Shared pytest fixtures.

Application tests run against an in-memory balance store and a fixed
clock. The process-wide snapshot cache is reset around every test so no
state leaks between them.
"""

from dataclasses import replace
from datetime import date
from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from src.domain.constants import DEFAULT_CATEGORIES
from src.domain.models import Account, BalanceRow, Category, OwnerType
from src.infrastructure import container


TODAY = date(2024, 3, 15)


class InMemoryBalanceStore:
    """BalanceStorePort implementation keeping everything in dictionaries."""

    def __init__(self, categories: list[Category] | None = None) -> None:
        self.accounts: dict[int, Account] = {}
        self.balances: dict[int, dict[date, Decimal]] = {}
        self.categories = list(categories or DEFAULT_CATEGORIES.values())
        self.fail_reads = False
        self.fail_balance_writes = False
        self.read_count = 0
        self._next_id = 1

    def prepare(self) -> None:
        return None

    def list_accounts(self, include_deleted: bool = False) -> list[Account]:
        if self.fail_reads:
            raise RuntimeError("store unavailable")
        self.read_count += 1
        return [
            account
            for _, account in sorted(self.accounts.items())
            if include_deleted or not account.is_deleted
        ]

    def get_account(self, account_id: int) -> Account | None:
        return self.accounts.get(account_id)

    def list_balances(self, account_id: int) -> list[BalanceRow]:
        return [
            BalanceRow(account_id=account_id, entry_date=day, value=value)
            for day, value in sorted(self.balances.get(account_id, {}).items())
        ]

    def list_categories(self) -> list[Category]:
        return list(self.categories)

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
        account_id = self._next_id
        account = Account(
            id=account_id,
            name=name,
            bank=bank,
            category=category,
            owner=OwnerType(owner),
            notes=notes,
        )
        if initial_balance is not None and entry_date is not None:
            self._check_balance_write()
            self.balances[account_id] = {entry_date: initial_balance}
        self._next_id += 1
        self.accounts[account_id] = account
        return account_id

    def update_account(
        self,
        account_id: int,
        name: str,
        bank: str,
        category: str,
        owner: OwnerType,
        notes: str | None = None,
    ) -> None:
        self.accounts[account_id] = replace(
            self.accounts[account_id],
            name=name,
            bank=bank,
            category=category,
            owner=OwnerType(owner),
            notes=notes,
        )

    def soft_delete_account(self, account_id: int, deleted_on: date) -> None:
        self.accounts[account_id] = replace(
            self.accounts[account_id],
            deleted_on=deleted_on,
        )

    def upsert_balance(
        self,
        account_id: int,
        entry_date: date,
        value: Decimal,
    ) -> None:
        self._check_balance_write()
        self.balances.setdefault(account_id, {})[entry_date] = value

    def _check_balance_write(self) -> None:
        if self.fail_balance_writes:
            raise RuntimeError("disk full")


@pytest.fixture(autouse=True)
def _reset_snapshot_cache():
    """Drop the process-wide snapshot cache before and after each test."""
    container.reset_snapshot_cache()
    yield
    container.reset_snapshot_cache()


@pytest.fixture
def store() -> InMemoryBalanceStore:
    return InMemoryBalanceStore()


@pytest.fixture
def logger() -> MagicMock:
    return MagicMock()


@pytest.fixture
def today() -> date:
    return TODAY
