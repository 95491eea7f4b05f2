"""Domain models for monthly aggregates and growth figures."""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from .accounts import AccountKind, OwnerType


class SnapshotField(str, Enum):
    """Aggregate of a monthly snapshot that growth can be computed for."""

    NET_WORTH = "net_worth"
    ASSETS_TOTAL = "assets_total"
    LIABILITIES_TOTAL = "liabilities_total"


@dataclass(frozen=True)
class AccountMonthValue:
    """Resolved carry-forward value of one account for one month."""

    account_id: int
    value: Decimal
    category: str
    kind: AccountKind
    owner: OwnerType


@dataclass(frozen=True)
class MonthlySnapshot:
    """Aggregate of every account balance at the end of a calendar month.

    Attributes:
        month: Month key in ``YYYY-MM`` format.
        assets_total: Sum of asset balances.
        liabilities_total: Sum of liability balances, as stored (a credit
            balance lowers it).
        net_worth: Assets minus liabilities.
        breakdown: Per-account values, ordered by account id.
    """

    month: str
    assets_total: Decimal
    liabilities_total: Decimal
    net_worth: Decimal
    breakdown: tuple[AccountMonthValue, ...] = ()

    def value_of(self, field: SnapshotField) -> Decimal:
        """Return the aggregate named by ``field``."""
        return getattr(self, field.value)


@dataclass(frozen=True)
class GrowthResult:
    """Absolute and relative change of an aggregate over a period."""

    growth: Decimal
    percentage: Decimal


@dataclass(frozen=True)
class SnapshotDiagnostic:
    """Data-quality warning raised while building snapshots.

    Attributes:
        account_id: Account the offending record belongs to, when known.
        reason: Short machine-friendly reason.
        detail: Human-readable description.
    """

    account_id: int | None
    reason: str
    detail: str


__all__ = [
    "SnapshotField",
    "AccountMonthValue",
    "MonthlySnapshot",
    "GrowthResult",
    "SnapshotDiagnostic",
]
