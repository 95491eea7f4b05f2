"""Use case wrapping account and balance mutations with snapshot refresh.

Every mutation is written to the balance store first and then awaits a
snapshot rebuild, so the cache reflects the mutation once the call returns.
"""

import asyncio
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date
from decimal import Decimal, InvalidOperation

from src.application.ports.balance_store import BalanceStorePort
from src.application.snapshot_cache import SnapshotCache
from src.domain.constants import DEFAULT_CATEGORIES
from src.domain.models import Account, BalanceEntry, OwnerType
from src.domain.policies import is_valid_account_name, parse_account_id
from src.domain.services.months import parse_local_date
from src.domain.services.snapshots import normalize_balance_rows
from src.infrastructure.logging.logger import get_app_logger
from src.utils.decimal_utils import coerce_decimal


@dataclass(frozen=True)
class AccountInput:
    """Data needed to open an account with its first balance."""

    name: str
    bank: str
    category: str
    owner: OwnerType | str
    initial_balance: Decimal | int | float | str
    notes: str | None = None
    balance_date: date | str | None = None


@dataclass(frozen=True)
class AccountUpdate:
    """Editable attributes of an account."""

    name: str
    bank: str
    category: str
    owner: OwnerType | str
    notes: str | None = None


class ManageAccountsUseCase:
    """Apply account and balance mutations, then refresh snapshots."""

    def __init__(
        self,
        store: BalanceStorePort,
        cache: SnapshotCache,
        logger=None,
        clock: Callable[[], date] = date.today,
    ) -> None:
        """Initialize the use case.

        Args:
            store: Balance store receiving the mutations.
            cache: Snapshot cache invalidated after each mutation.
            logger: Optional logger compatible with logging.Logger-like API.
            clock: Returns the current local day.
        """
        self._store = store
        self._cache = cache
        self._logger = logger or get_app_logger()
        self._clock = clock

    async def get_balance_history(
        self,
        account_id: int | str,
    ) -> list[BalanceEntry]:
        """Return the balance history of an account, oldest first.

        Unknown or malformed identifiers yield an empty history.
        """
        numeric_id = parse_account_id(account_id)
        if numeric_id is None:
            self._logger.error(f"Invalid account ID: {account_id!r}")
            return []
        rows = await asyncio.to_thread(self._store.list_balances, numeric_id)
        return normalize_balance_rows(numeric_id, rows, logger=self._logger)

    async def add_account(self, account: AccountInput) -> int:
        """Create an account with its initial balance.

        Returns:
            int: Identifier assigned by the store.

        Raises:
            ValueError: If the name, owner, category, amount or date is
                invalid.
            SnapshotRebuildError: If the account was stored but snapshots
                could not be rebuilt.
        """
        owner = await self._validate_details(
            account.name,
            account.category,
            account.owner,
        )
        amount = self._parse_amount(account.initial_balance)
        entry_date = self._resolve_date(account.balance_date)
        account_id = await asyncio.to_thread(
            self._store.add_account,
            account.name.strip(),
            account.bank.strip(),
            account.category,
            owner,
            account.notes,
            amount,
            entry_date,
        )
        self._logger.info(
            f"Added account id={account_id} category={account.category} "
            f"initial_balance={amount} on {entry_date.isoformat()}"
        )
        await self._cache.invalidate()
        return account_id

    async def update_account(
        self,
        account_id: int | str,
        data: AccountUpdate,
    ) -> None:
        """Update descriptive attributes of an account.

        A category change reclassifies the account for its whole history.
        """
        existing = await self._resolve_account(account_id)
        if existing is None:
            return
        owner = await self._validate_details(data.name, data.category, data.owner)
        await asyncio.to_thread(
            self._store.update_account,
            existing.id,
            data.name.strip(),
            data.bank.strip(),
            data.category,
            owner,
            data.notes,
        )
        if existing.category != data.category:
            self._logger.info(
                f"Recategorized account id={existing.id}: "
                f"{existing.category} -> {data.category}"
            )
        await self._cache.invalidate()

    async def update_balance(
        self,
        account_id: int | str,
        amount: Decimal | int | float | str,
        entry_date: date | str | None = None,
    ) -> None:
        """Record the balance of an account, replacing any entry that day."""
        existing = await self._resolve_account(account_id)
        if existing is None:
            return
        if existing.is_deleted:
            self._logger.warning(
                f"Ignoring balance update for deleted account id={existing.id}"
            )
            return
        value = self._parse_amount(amount)
        resolved_date = self._resolve_date(entry_date)
        await asyncio.to_thread(
            self._store.upsert_balance,
            existing.id,
            resolved_date,
            value,
        )
        self._logger.info(
            f"Recorded balance {value} for account id={existing.id} "
            f"on {resolved_date.isoformat()}"
        )
        await self._cache.invalidate()

    async def delete_account(self, account_id: int | str) -> None:
        """Soft-delete an account as of today.

        Its history stays in the store and keeps counting for months that
        ended before today.
        """
        existing = await self._resolve_account(account_id)
        if existing is None:
            return
        if existing.is_deleted:
            self._logger.warning(
                f"Account id={existing.id} already deleted on "
                f"{existing.deleted_on.isoformat()}"
            )
            return
        deleted_on = self._clock()
        await asyncio.to_thread(
            self._store.soft_delete_account,
            existing.id,
            deleted_on,
        )
        self._logger.info(
            f"Deleted account id={existing.id} on {deleted_on.isoformat()}"
        )
        await self._cache.invalidate()

    async def _resolve_account(self, account_id: int | str) -> Account | None:
        numeric_id = parse_account_id(account_id)
        if numeric_id is None:
            self._logger.error(f"Invalid account ID: {account_id!r}")
            return None
        account = await asyncio.to_thread(self._store.get_account, numeric_id)
        if account is None:
            self._logger.error(f"Unknown account ID: {numeric_id}")
        return account

    async def _validate_details(
        self,
        name: str,
        category: str,
        owner: OwnerType | str,
    ) -> OwnerType:
        if not is_valid_account_name(name):
            raise ValueError(f"Invalid account name: {name!r}")
        try:
            resolved_owner = OwnerType(owner)
        except ValueError as exc:
            raise ValueError(
                f"Invalid owner: {owner!r}. Expected me, spouse or joint."
            ) from exc
        categories = await asyncio.to_thread(self._store.list_categories)
        known = {item.key for item in categories} or set(DEFAULT_CATEGORIES)
        if category not in known:
            raise ValueError(f"Unknown category: {category!r}")
        return resolved_owner

    def _resolve_date(self, raw: date | str | None) -> date:
        if raw is None:
            return self._clock()
        resolved = parse_local_date(raw)
        if resolved is None:
            raise ValueError(f"Invalid balance date: {raw!r}")
        return resolved

    @staticmethod
    def _parse_amount(raw: Decimal | int | float | str) -> Decimal:
        try:
            value = coerce_decimal(raw)
        except (InvalidOperation, ValueError, TypeError) as exc:
            raise ValueError(f"Invalid balance amount: {raw!r}") from exc
        if raw is None or not value.is_finite():
            raise ValueError(f"Invalid balance amount: {raw!r}")
        return value


__all__ = ["AccountInput", "AccountUpdate", "ManageAccountsUseCase"]
