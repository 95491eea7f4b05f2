"""Monthly snapshot construction from per-account balance histories.

Balances follow a carry-forward rule: the latest observation dated on or
before the last day of a month is the account's value for that month, and it
keeps that value in every later month until a newer observation supersedes
it. Accounts with no observation yet contribute nothing.

Deleted accounts are soft-deleted by the balance store, so their history is
still available here. A deleted account keeps contributing to every month
that ends before its deletion date and contributes nothing from the month of
deletion onwards.
"""

from bisect import bisect_right
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from datetime import date
from decimal import Decimal, InvalidOperation
from enum import Enum
from logging import Logger

from src.domain.constants import DEFAULT_CATEGORIES
from src.domain.models import (
    Account,
    AccountKind,
    AccountMonthValue,
    BalanceEntry,
    BalanceRow,
    Category,
    MonthlySnapshot,
    SnapshotDiagnostic,
)
from src.domain.services.months import (
    iter_months,
    month_end,
    month_key,
    parse_local_date,
)
from src.utils.decimal_utils import coerce_decimal


BREAKDOWN_GROUPS = ("category", "kind", "owner")


@dataclass(frozen=True)
class _AccountSeries:
    account: Account
    kind: AccountKind
    dates: list[date]
    values: list[Decimal]

    def value_at(self, as_of: date) -> Decimal | None:
        deleted_on = self.account.deleted_on
        if deleted_on is not None and as_of >= deleted_on:
            return None
        index = bisect_right(self.dates, as_of) - 1
        if index < 0:
            return None
        return self.values[index]


class _DiagnosticsSink:
    def __init__(
        self,
        diagnostics: list[SnapshotDiagnostic] | None,
        logger: Logger | None,
    ) -> None:
        self._diagnostics = diagnostics
        self._logger = logger

    def report(self, account_id: int | None, reason: str, detail: str) -> None:
        if self._diagnostics is not None:
            self._diagnostics.append(
                SnapshotDiagnostic(
                    account_id=account_id,
                    reason=reason,
                    detail=detail,
                )
            )
        if self._logger is not None:
            self._logger.warning(
                f"Snapshot data-quality warning ({reason}) "
                f"for account_id={account_id}: {detail}"
            )


def build_monthly_snapshots(
    accounts: Sequence[Account],
    balances_by_account: Mapping[int, Sequence[BalanceRow]],
    *,
    categories: Mapping[str, Category] = DEFAULT_CATEGORIES,
    today: date | None = None,
    include_breakdown: bool = True,
    diagnostics: list[SnapshotDiagnostic] | None = None,
    logger: Logger | None = None,
) -> list[MonthlySnapshot]:
    """Build the ordered, gap-free sequence of monthly snapshots.

    Args:
        accounts: Every account known to the store, soft-deleted ones
            included.
        balances_by_account: Raw balance rows keyed by account id.
        categories: Category table used to resolve account kinds.
        today: Reference day for the last month; defaults to the local date.
        include_breakdown: Whether to attach per-account values.
        diagnostics: Optional list receiving data-quality warnings.
        logger: Optional logger receiving the same warnings.

    Returns:
        list[MonthlySnapshot]: One snapshot per month from the month of the
        earliest balance to the current month, or an empty list when there
        is no usable balance.
    """
    sink = _DiagnosticsSink(diagnostics, logger)
    series = _build_series(accounts, balances_by_account, categories, sink)
    first_dates = [item.dates[0] for item in series if item.dates]
    if not first_dates:
        return []

    start = min(first_dates)
    end = today or date.today()
    if month_key(start) > month_key(end):
        sink.report(
            None,
            "future_history",
            f"Earliest balance {start.isoformat()} is after the current "
            f"month {month_key(end)}",
        )
        return []

    return [
        _build_month(month, series, include_breakdown)
        for month in iter_months(start, end)
    ]


def normalize_balance_rows(
    account_id: int,
    rows: Sequence[BalanceRow],
    *,
    diagnostics: list[SnapshotDiagnostic] | None = None,
    logger: Logger | None = None,
) -> list[BalanceEntry]:
    """Normalize raw rows of one account into date-ordered entries.

    Rows with an unparsable date or a missing or non-numeric value are
    skipped and reported. When two rows share a date the later one wins.

    Args:
        account_id: Account the rows belong to.
        rows: Raw rows as read from storage.
        diagnostics: Optional list receiving data-quality warnings.
        logger: Optional logger receiving the same warnings.

    Returns:
        list[BalanceEntry]: Entries sorted by date ascending.
    """
    return _normalize_rows(
        account_id,
        rows,
        _DiagnosticsSink(diagnostics, logger),
    )


def group_breakdown(
    snapshot: MonthlySnapshot,
    by: str = "category",
) -> dict[str, Decimal]:
    """Sum the per-account values of a snapshot by category, kind or owner.

    Args:
        snapshot: Snapshot built with ``include_breakdown=True``.
        by: Grouping attribute, one of ``BREAKDOWN_GROUPS``.

    Returns:
        dict[str, Decimal]: Totals keyed by group, in key order.

    Raises:
        ValueError: If ``by`` is not a supported grouping.
    """
    if by not in BREAKDOWN_GROUPS:
        raise ValueError(
            f"Unsupported breakdown grouping: {by}. "
            f"Expected one of {', '.join(BREAKDOWN_GROUPS)}."
        )
    totals: dict[str, Decimal] = {}
    for item in snapshot.breakdown:
        key = getattr(item, by)
        if isinstance(key, Enum):
            key = key.value
        totals[key] = totals.get(key, Decimal("0")) + item.value
    return dict(sorted(totals.items()))


def _build_series(
    accounts: Sequence[Account],
    balances_by_account: Mapping[int, Sequence[BalanceRow]],
    categories: Mapping[str, Category],
    sink: _DiagnosticsSink,
) -> list[_AccountSeries]:
    series = []
    for account in sorted(accounts, key=lambda item: item.id):
        category = categories.get(account.category)
        if category is None:
            sink.report(
                account.id,
                "unknown_category",
                f"Category '{account.category}' is not in the category table",
            )
            continue
        entries = _normalize_rows(
            account.id,
            balances_by_account.get(account.id, ()),
            sink,
        )
        series.append(
            _AccountSeries(
                account=account,
                kind=category.kind,
                dates=[entry.date for entry in entries],
                values=[entry.value for entry in entries],
            )
        )
    return series


def _normalize_rows(
    account_id: int,
    rows: Sequence[BalanceRow],
    sink: _DiagnosticsSink,
) -> list[BalanceEntry]:
    by_date: dict[date, Decimal] = {}
    for row in rows:
        entry_date = parse_local_date(row.entry_date)
        if entry_date is None:
            sink.report(
                account_id,
                "invalid_date",
                f"Balance date {row.entry_date!r} is not a calendar date",
            )
            continue
        value = _parse_value(row.value)
        if value is None:
            sink.report(
                account_id,
                "invalid_value",
                f"Balance value {row.value!r} on {entry_date.isoformat()} "
                "is missing or not numeric",
            )
            continue
        if entry_date in by_date:
            sink.report(
                account_id,
                "duplicate_date",
                f"Several balances recorded on {entry_date.isoformat()}; "
                "keeping the last one",
            )
        by_date[entry_date] = value
    return [
        BalanceEntry(date=entry_date, value=value)
        for entry_date, value in sorted(by_date.items())
    ]


def _parse_value(raw: object) -> Decimal | None:
    if raw is None or isinstance(raw, bool):
        return None
    try:
        value = coerce_decimal(raw)
    except (InvalidOperation, ValueError, TypeError):
        return None
    if not value.is_finite():
        return None
    return value


def _build_month(
    month: date,
    series: Sequence[_AccountSeries],
    include_breakdown: bool,
) -> MonthlySnapshot:
    as_of = month_end(month)
    assets_total = Decimal("0")
    liabilities_total = Decimal("0")
    breakdown = []
    for item in series:
        value = item.value_at(as_of)
        if value is None:
            continue
        if item.kind is AccountKind.ASSET:
            assets_total += value
        else:
            liabilities_total += value
        if include_breakdown:
            breakdown.append(
                AccountMonthValue(
                    account_id=item.account.id,
                    value=value,
                    category=item.account.category,
                    kind=item.kind,
                    owner=item.account.owner,
                )
            )
    return MonthlySnapshot(
        month=month_key(month),
        assets_total=assets_total,
        liabilities_total=liabilities_total,
        net_worth=assets_total - liabilities_total,
        breakdown=tuple(breakdown),
    )


__all__ = [
    "BREAKDOWN_GROUPS",
    "build_monthly_snapshots",
    "normalize_balance_rows",
    "group_breakdown",
]
