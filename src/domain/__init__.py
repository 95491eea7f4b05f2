"""Domain package for business rules and core models."""

from .constants import DEFAULT_CATEGORIES
from .models import (
    Account,
    AccountKind,
    AccountMonthValue,
    BalanceEntry,
    BalanceRow,
    Category,
    GrowthResult,
    MonthlySnapshot,
    OwnerType,
    SnapshotDiagnostic,
    SnapshotField,
)
from .policies import is_valid_account_name, parse_account_id
from .services import (
    build_monthly_snapshots,
    compute_growth,
    group_breakdown,
    normalize_balance_rows,
    resolve_period_start,
)

__all__ = [
    "Account",
    "AccountKind",
    "AccountMonthValue",
    "BalanceEntry",
    "BalanceRow",
    "Category",
    "GrowthResult",
    "MonthlySnapshot",
    "OwnerType",
    "SnapshotDiagnostic",
    "SnapshotField",
    "DEFAULT_CATEGORIES",
    "build_monthly_snapshots",
    "compute_growth",
    "group_breakdown",
    "normalize_balance_rows",
    "resolve_period_start",
    "is_valid_account_name",
    "parse_account_id",
]
