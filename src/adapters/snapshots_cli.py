"""CLI adapter printing monthly net worth snapshots and growth.

The growth period comes from NETWORTH_GROWTH_PERIOD (``All Time``, ``MTD``,
``QTD``, ``YTD``, ``1M``, ``3M``, ``6M`` or ``1Y``).
"""

import asyncio
from datetime import date

from src.domain.models import SnapshotField
from src.domain.services.growth import resolve_period_start
from src.infrastructure.container import (
    build_growth_use_case,
    build_monthly_snapshots_use_case,
)
from src.infrastructure.logging.logger import get_app_logger, get_usage_logger
from src.infrastructure.settings import NetWorthSettings


async def _run(period: str, logger) -> None:
    snapshots = await build_monthly_snapshots_use_case().execute()
    if not snapshots:
        print("No balances recorded yet.")
        return

    print(f"{'Month':<8} {'Assets':>14} {'Liabilities':>14} {'Net worth':>14}")
    for snapshot in snapshots:
        print(
            f"{snapshot.month:<8} "
            f"{snapshot.assets_total:>14,.2f} "
            f"{snapshot.liabilities_total:>14,.2f} "
            f"{snapshot.net_worth:>14,.2f}"
        )

    start_date = resolve_period_start(period, date.today(), logger=logger)
    growth_use_case = build_growth_use_case()
    print(f"Growth ({period}):")
    for field in SnapshotField:
        result = await growth_use_case.execute(field, start_date)
        sign = "+" if result.growth >= 0 else ""
        print(
            f"  {field.value}: {sign}{result.growth:,.2f} "
            f"({sign}{result.percentage:.2f}%)"
        )


def main() -> None:
    """Print the snapshot table and growth for the configured period."""
    logger = get_app_logger()
    settings = NetWorthSettings.from_env()
    get_usage_logger().info(
        f"snapshots_cli run with period={settings.growth_period}"
    )
    asyncio.run(_run(settings.growth_period, logger))


if __name__ == "__main__":  # pragma: no cover
    main()
