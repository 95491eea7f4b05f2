"""Domain models package."""

from .accounts import (
    Account,
    AccountKind,
    BalanceEntry,
    BalanceRow,
    Category,
    OwnerType,
)
from .snapshots import (
    AccountMonthValue,
    GrowthResult,
    MonthlySnapshot,
    SnapshotDiagnostic,
    SnapshotField,
)

__all__ = [
    "Account",
    "AccountKind",
    "BalanceEntry",
    "BalanceRow",
    "Category",
    "OwnerType",
    "AccountMonthValue",
    "GrowthResult",
    "MonthlySnapshot",
    "SnapshotDiagnostic",
    "SnapshotField",
]
