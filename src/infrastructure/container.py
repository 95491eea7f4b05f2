"""Composition root for wiring infrastructure adapters."""

from typing import Optional

from src.application.ports.balance_store import BalanceStorePort
from src.application.ports.database import DatabaseEnginePort
from src.application.snapshot_cache import SnapshotCache
from src.application.use_cases.get_category_breakdown import (
    GetCategoryBreakdownUseCase,
)
from src.application.use_cases.get_growth import GetGrowthUseCase
from src.application.use_cases.get_monthly_snapshots import (
    GetMonthlySnapshotsUseCase,
)
from src.application.use_cases.manage_accounts import ManageAccountsUseCase
from src.infrastructure.balance_store import SqlAlchemyBalanceStore
from src.infrastructure.db import SqlAlchemyDatabaseEngineAdapter
from src.infrastructure.logging.logger import get_app_logger
from src.infrastructure.settings import NetWorthSettings


_snapshot_cache: Optional[SnapshotCache] = None


def build_database_adapter() -> DatabaseEnginePort:
    """Return the database adapter instance."""
    return SqlAlchemyDatabaseEngineAdapter()


def build_balance_store(
    db_port: DatabaseEnginePort | None = None,
) -> BalanceStorePort:
    """Return the balance store with its schema prepared."""
    resolved_db = db_port or build_database_adapter()
    store = SqlAlchemyBalanceStore(resolved_db)
    store.prepare()
    return store


def get_snapshot_cache(
    store: BalanceStorePort | None = None,
) -> SnapshotCache:
    """Return the process-wide snapshot cache, creating it on first use.

    The balance store is built and prepared only when the cache is created.

    Args:
        store: Balance store used when the cache is created; ignored once
            the cache exists.
    """
    global _snapshot_cache
    if _snapshot_cache is None:
        settings = NetWorthSettings.from_env()
        _snapshot_cache = SnapshotCache(
            store or build_balance_store(),
            logger=get_app_logger(),
            include_breakdown=settings.include_breakdown,
        )
    return _snapshot_cache


def reset_snapshot_cache() -> None:
    """Drop the process-wide snapshot cache."""
    global _snapshot_cache
    _snapshot_cache = None


def build_manage_accounts_use_case(
    store: BalanceStorePort | None = None,
) -> ManageAccountsUseCase:
    """Return the account mutation use case sharing the global cache.

    Mutations go to the cache's own store so that writes and rebuilds
    always see the same data.

    Args:
        store: Balance store used when the shared cache is created; ignored
            once the cache exists.
    """
    cache = get_snapshot_cache(store)
    return ManageAccountsUseCase(
        store=cache.store,
        cache=cache,
        logger=get_app_logger(),
    )


def build_monthly_snapshots_use_case() -> GetMonthlySnapshotsUseCase:
    """Return the snapshot query use case."""
    return GetMonthlySnapshotsUseCase(get_snapshot_cache())


def build_growth_use_case() -> GetGrowthUseCase:
    """Return the growth query use case."""
    return GetGrowthUseCase(get_snapshot_cache(), logger=get_app_logger())


def build_category_breakdown_use_case() -> GetCategoryBreakdownUseCase:
    """Return the breakdown query use case."""
    return GetCategoryBreakdownUseCase(
        get_snapshot_cache(),
        logger=get_app_logger(),
    )


__all__ = [
    "build_database_adapter",
    "build_balance_store",
    "get_snapshot_cache",
    "reset_snapshot_cache",
    "build_manage_accounts_use_case",
    "build_monthly_snapshots_use_case",
    "build_growth_use_case",
    "build_category_breakdown_use_case",
]
