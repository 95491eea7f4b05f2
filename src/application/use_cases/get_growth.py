"""Use case to compute growth of a snapshot aggregate over a period."""

from datetime import date
from decimal import Decimal

from src.application.snapshot_cache import SnapshotCache
from src.domain.models import GrowthResult, SnapshotField
from src.domain.services.growth import compute_growth, resolve_period_start
from src.infrastructure.logging.logger import get_app_logger


class GetGrowthUseCase:
    """Compute growth figures from the cached snapshots."""

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
        field: SnapshotField | str = SnapshotField.NET_WORTH,
        start_date: date | str | None = None,
        current_value_fallback: Decimal | int = 0,
    ) -> GrowthResult:
        """Return growth of ``field`` since ``start_date`` (None = all time).

        Invalid fields or dates yield zero growth.
        """
        snapshots = await self._cache.ensure_loaded()
        return compute_growth(
            snapshots,
            field,
            start_date,
            current_value_fallback,
            logger=self._logger,
        )

    async def execute_for_period(
        self,
        period: str,
        field: SnapshotField | str = SnapshotField.NET_WORTH,
        today: date | None = None,
    ) -> GrowthResult:
        """Return growth of ``field`` for a dashboard period preset."""
        start_date = resolve_period_start(
            period,
            today or date.today(),
            logger=self._logger,
        )
        return await self.execute(field, start_date)


__all__ = ["GetGrowthUseCase"]
