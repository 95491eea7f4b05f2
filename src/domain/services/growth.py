"""Growth analytics over a monthly snapshot sequence."""

from collections.abc import Sequence
from datetime import date
from decimal import Decimal
from logging import Logger

from src.domain.models import GrowthResult, MonthlySnapshot, SnapshotField
from src.domain.services.months import add_months, month_key, parse_local_date
from src.utils.decimal_utils import coerce_decimal


ALL_TIME = "All Time"

_FIELD_ALIASES = {
    "netWorth": SnapshotField.NET_WORTH,
    "assetsTotal": SnapshotField.ASSETS_TOTAL,
    "liabilitiesTotal": SnapshotField.LIABILITIES_TOTAL,
}

_TRAILING_PERIODS = {
    "1M": 1,
    "3M": 3,
    "6M": 6,
    "1Y": 12,
}


def resolve_field(field: SnapshotField | str) -> SnapshotField | None:
    """Map a field name (snake_case or camelCase) to a ``SnapshotField``."""
    if isinstance(field, SnapshotField):
        return field
    if field in _FIELD_ALIASES:
        return _FIELD_ALIASES[field]
    try:
        return SnapshotField(field)
    except ValueError:
        return None


def compute_growth(
    snapshots: Sequence[MonthlySnapshot],
    field: SnapshotField | str,
    start_date: date | str | None = None,
    current_value_fallback: Decimal | int | float = 0,
    logger: Logger | None = None,
) -> GrowthResult:
    """Compute absolute and percentage growth of an aggregate.

    The current value is the aggregate on the last snapshot. Without a start
    date the baseline is the first snapshot, and at least two snapshots are
    needed. With a start date the baseline is the first snapshot of the
    start month or later, falling back to the first snapshot when the start
    date lies after the whole history.

    The percentage divides by the absolute baseline, so a baseline that
    changes sign (a liability total crossing zero) keeps the direction of the
    change.

    Args:
        snapshots: Monthly snapshots ordered by month.
        field: Aggregate to compare.
        start_date: Start of the period, None for all time.
        current_value_fallback: Current value used when no snapshot exists.
        logger: Optional logger for rejected inputs.

    Returns:
        GrowthResult: Zero growth when the inputs cannot support a delta.
    """
    zero = GrowthResult(growth=Decimal("0"), percentage=Decimal("0"))
    if not snapshots:
        return zero

    resolved_field = resolve_field(field)
    if resolved_field is None:
        if logger is not None:
            logger.warning(f"Unknown snapshot field for growth: {field!r}")
        return zero

    current = snapshots[-1].value_of(resolved_field)
    if current is None:
        current = coerce_decimal(current_value_fallback)

    if start_date is None:
        if len(snapshots) < 2:
            return zero
        baseline = snapshots[0]
    else:
        start_day = parse_local_date(start_date)
        if start_day is None:
            if logger is not None:
                logger.warning(f"Invalid growth start date: {start_date!r}")
            return zero
        start_month = month_key(start_day)
        baseline = next(
            (item for item in snapshots if item.month >= start_month),
            snapshots[0],
        )

    start_value = baseline.value_of(resolved_field)
    growth = current - start_value
    if start_value == 0:
        percentage = Decimal("0")
    else:
        percentage = growth / abs(start_value) * 100
    return GrowthResult(growth=growth, percentage=percentage)


def net_worth_growth(
    snapshots: Sequence[MonthlySnapshot],
    start_date: date | None,
    current_net_worth: Decimal | int = 0,
) -> GrowthResult:
    return compute_growth(
        snapshots,
        SnapshotField.NET_WORTH,
        start_date,
        current_net_worth,
    )


def assets_growth(
    snapshots: Sequence[MonthlySnapshot],
    start_date: date | None,
    current_assets: Decimal | int = 0,
) -> GrowthResult:
    return compute_growth(
        snapshots,
        SnapshotField.ASSETS_TOTAL,
        start_date,
        current_assets,
    )


def liabilities_growth(
    snapshots: Sequence[MonthlySnapshot],
    start_date: date | None,
    current_liabilities: Decimal | int = 0,
) -> GrowthResult:
    return compute_growth(
        snapshots,
        SnapshotField.LIABILITIES_TOTAL,
        start_date,
        current_liabilities,
    )


def resolve_period_start(
    period: str,
    today: date,
    logger: Logger | None = None,
) -> date | None:
    """Return the start date of a dashboard period preset.

    Args:
        period: ``All Time``, ``MTD``, ``QTD``, ``YTD``, ``1M``, ``3M``,
            ``6M`` or ``1Y``.
        today: Reference day.
        logger: Optional logger for unknown presets.

    Returns:
        date | None: Period start, None for all time or unknown presets.
    """
    if period == ALL_TIME:
        return None
    if period == "YTD":
        return date(today.year, 1, 1)
    if period == "MTD":
        return date(today.year, today.month, 1)
    if period == "QTD":
        quarter = (today.month - 1) // 3
        return date(today.year, quarter * 3 + 1, 1)
    if period in _TRAILING_PERIODS:
        return add_months(today, -_TRAILING_PERIODS[period])
    if logger is not None:
        logger.warning(f"Unknown growth period '{period}', using all time")
    return None


__all__ = [
    "ALL_TIME",
    "resolve_field",
    "compute_growth",
    "net_worth_growth",
    "assets_growth",
    "liabilities_growth",
    "resolve_period_start",
]
