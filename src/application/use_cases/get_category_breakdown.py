"""Use case to group the per-account values of a month."""

from decimal import Decimal

from src.application.snapshot_cache import SnapshotCache
from src.domain.services.snapshots import group_breakdown
from src.infrastructure.logging.logger import get_app_logger


class GetCategoryBreakdownUseCase:
    """Group a monthly snapshot by category, kind or owner."""

    def __init__(self, cache: SnapshotCache, logger=None) -> None:
        """Initialize the use case.

        Args:
            cache: Snapshot cache read by the computation.
            logger: Optional logger compatible with logging.Logger-like API.
        """
        self._cache = cache
        self._logger = logger or get_app_logger()

    async def execute(
        self,
        by: str = "category",
        month: str | None = None,
    ) -> dict[str, Decimal]:
        """Return totals for ``month`` (``YYYY-MM``), latest month by default.

        Unknown months or groupings yield an empty mapping.
        """
        snapshots = await self._cache.ensure_loaded()
        if not snapshots:
            return {}
        if month is None:
            snapshot = snapshots[-1]
        else:
            snapshot = next(
                (item for item in snapshots if item.month == month),
                None,
            )
            if snapshot is None:
                self._logger.warning(f"No snapshot for month {month!r}")
                return {}
        try:
            return group_breakdown(snapshot, by)
        except ValueError as exc:
            self._logger.warning(str(exc))
            return {}


__all__ = ["GetCategoryBreakdownUseCase"]
