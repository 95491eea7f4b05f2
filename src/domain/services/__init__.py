"""Domain services package."""

from .growth import (
    compute_growth,
    resolve_field,
    resolve_period_start,
)
from .months import month_end, month_key, parse_local_date
from .snapshots import (
    build_monthly_snapshots,
    group_breakdown,
    normalize_balance_rows,
)

__all__ = [
    "build_monthly_snapshots",
    "compute_growth",
    "group_breakdown",
    "month_end",
    "month_key",
    "normalize_balance_rows",
    "parse_local_date",
    "resolve_field",
    "resolve_period_start",
]
