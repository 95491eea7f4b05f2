"""Process-wide holder of the materialized monthly snapshots."""

import asyncio
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date

from src.application.errors import SnapshotRebuildError
from src.application.mutation_coordinator import MutationCoordinator
from src.application.ports.balance_store import BalanceStorePort
from src.domain.constants import DEFAULT_CATEGORIES
from src.domain.models import (
    Account,
    BalanceRow,
    Category,
    MonthlySnapshot,
    SnapshotDiagnostic,
)
from src.domain.services.snapshots import build_monthly_snapshots
from src.infrastructure.logging.logger import get_app_logger


SnapshotListener = Callable[[tuple[MonthlySnapshot, ...]], None]


@dataclass(frozen=True)
class StoreState:
    """Everything read from the balance store for one rebuild."""

    accounts: list[Account]
    balances_by_account: dict[int, list[BalanceRow]]
    categories: dict[str, Category]


@dataclass(frozen=True)
class _CacheState:
    snapshots: tuple[MonthlySnapshot, ...] = ()
    diagnostics: tuple[SnapshotDiagnostic, ...] = ()
    version: int = 0


class SnapshotCache:
    """Hold the last fully built snapshot sequence.

    Readers call ``current()`` and never wait. Rebuilds go through a
    ``MutationCoordinator`` and replace the whole cache state with a single
    assignment once the new sequence is complete, so readers see either the
    previous sequence or the new one.
    """

    def __init__(
        self,
        store: BalanceStorePort,
        logger=None,
        include_breakdown: bool = True,
        clock: Callable[[], date] = date.today,
    ) -> None:
        """Initialize the cache.

        Args:
            store: Balance store the snapshots are built from.
            logger: Optional logger compatible with logging.Logger-like API.
            include_breakdown: Whether snapshots carry per-account values.
            clock: Returns the current local day.
        """
        self._store = store
        self._logger = logger or get_app_logger()
        self._include_breakdown = include_breakdown
        self._clock = clock
        self._state = _CacheState()
        self._listeners: list[SnapshotListener] = []
        self._coordinator = MutationCoordinator(
            load=self._load_state,
            apply=self._install,
            logger=self._logger,
        )

    @property
    def version(self) -> int:
        """Number of sequences installed so far."""
        return self._state.version

    @property
    def diagnostics(self) -> tuple[SnapshotDiagnostic, ...]:
        """Data-quality warnings of the last successful build."""
        return self._state.diagnostics

    @property
    def store(self) -> BalanceStorePort:
        """Balance store the snapshots are built from."""
        return self._store

    @property
    def coordinator(self) -> MutationCoordinator:
        return self._coordinator

    def current(self) -> tuple[MonthlySnapshot, ...]:
        """Return the last fully built sequence, empty before the first."""
        return self._state.snapshots

    async def invalidate(self) -> tuple[MonthlySnapshot, ...]:
        """Rebuild from the store and wait until the result is installed.

        Returns:
            tuple[MonthlySnapshot, ...]: The sequence installed by the rebuild.

        Raises:
            SnapshotRebuildError: If reading the store or building failed.
        """
        try:
            return await self._coordinator.after_mutation()
        except Exception as exc:
            raise SnapshotRebuildError(
                f"Failed to rebuild monthly snapshots: {exc}"
            ) from exc

    async def ensure_loaded(self) -> tuple[MonthlySnapshot, ...]:
        """Build on first use, otherwise return the cached sequence."""
        if self._state.version == 0:
            return await self.invalidate()
        return self._state.snapshots

    def subscribe(self, listener: SnapshotListener) -> Callable[[], None]:
        """Register a listener called with every newly installed sequence.

        Returns:
            Callable[[], None]: Function removing the listener.
        """
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    async def _load_state(self) -> StoreState:
        return await asyncio.to_thread(self._read_store)

    def _read_store(self) -> StoreState:
        categories = {
            category.key: category
            for category in self._store.list_categories()
        }
        if not categories:
            categories = dict(DEFAULT_CATEGORIES)
        accounts = self._store.list_accounts(include_deleted=True)
        balances = {
            account.id: self._store.list_balances(account.id)
            for account in accounts
        }
        return StoreState(
            accounts=accounts,
            balances_by_account=balances,
            categories=categories,
        )

    def _install(self, state: StoreState) -> tuple[MonthlySnapshot, ...]:
        diagnostics: list[SnapshotDiagnostic] = []
        snapshots = tuple(
            build_monthly_snapshots(
                state.accounts,
                state.balances_by_account,
                categories=state.categories,
                today=self._clock(),
                include_breakdown=self._include_breakdown,
                diagnostics=diagnostics,
                logger=self._logger,
            )
        )
        self._state = _CacheState(
            snapshots=snapshots,
            diagnostics=tuple(diagnostics),
            version=self._state.version + 1,
        )
        self._logger.info(
            f"Installed {len(snapshots)} monthly snapshots "
            f"(version={self._state.version}, "
            f"warnings={len(diagnostics)})"
        )
        for listener in list(self._listeners):
            try:
                listener(snapshots)
            except Exception as exc:
                self._logger.error(f"Snapshot listener failed: {exc}")
        return snapshots


__all__ = ["SnapshotCache", "StoreState"]
