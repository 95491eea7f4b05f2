"""Use case to read the materialized monthly snapshots."""

from src.application.snapshot_cache import SnapshotCache
from src.domain.models import MonthlySnapshot


class GetMonthlySnapshotsUseCase:
    """Return the cached monthly snapshot sequence."""

    def __init__(self, cache: SnapshotCache) -> None:
        """Initialize the use case with the snapshot cache."""
        self._cache = cache

    async def execute(self) -> list[MonthlySnapshot]:
        """Return snapshots ordered by month, building them on first use."""
        return list(await self._cache.ensure_loaded())


__all__ = ["GetMonthlySnapshotsUseCase"]
