"""Tests for the ManageAccountsUseCase mutation wrapper."""

import asyncio
from datetime import date
from decimal import Decimal

import pytest

from src.application.errors import SnapshotRebuildError
from src.application.snapshot_cache import SnapshotCache
from src.application.use_cases.manage_accounts import (
    AccountInput,
    AccountUpdate,
    ManageAccountsUseCase,
)
from src.domain.models import OwnerType


def _build(store, logger, today) -> tuple[ManageAccountsUseCase, SnapshotCache]:
    cache = SnapshotCache(store, logger=logger, clock=lambda: today)
    use_case = ManageAccountsUseCase(
        store=store,
        cache=cache,
        logger=logger,
        clock=lambda: today,
    )
    return use_case, cache


def _input(**overrides) -> AccountInput:
    values = {
        "name": "Checking",
        "bank": "First Bank",
        "category": "checking",
        "owner": "me",
        "initial_balance": "1000",
        "balance_date": "2024-01-10",
    }
    values.update(overrides)
    return AccountInput(**values)


@pytest.mark.asyncio
async def test_add_account_is_visible_in_cache_when_awaited(
    store,
    logger,
    today,
) -> None:
    """The cache reflects the new account once the call returns."""
    use_case, cache = _build(store, logger, today)

    account_id = await use_case.add_account(_input())

    assert store.accounts[account_id].owner is OwnerType.ME
    assert store.balances[account_id] == {date(2024, 1, 10): Decimal("1000")}
    assert [s.net_worth for s in cache.current()] == [Decimal("1000")] * 3


@pytest.mark.asyncio
async def test_add_account_defaults_balance_date_to_today(
    store,
    logger,
    today,
) -> None:
    """Without a date the initial balance is recorded today."""
    use_case, cache = _build(store, logger, today)

    account_id = await use_case.add_account(_input(balance_date=None))

    assert list(store.balances[account_id]) == [today]
    assert [s.month for s in cache.current()] == ["2024-03"]


@pytest.mark.asyncio
async def test_end_to_end_scenario_through_mutations(
    store,
    logger,
    today,
) -> None:
    """Asset and liability mutations produce the expected snapshots."""
    use_case, cache = _build(store, logger, today)

    asset_id = await use_case.add_account(_input())
    await use_case.update_balance(str(asset_id), "1200", "2024-03-05")
    await use_case.add_account(
        _input(
            name="Visa",
            category="credit_card",
            initial_balance=200,
            balance_date=date(2024, 2, 20),
        )
    )

    assert [
        (s.month, s.assets_total, s.liabilities_total, s.net_worth)
        for s in cache.current()
    ] == [
        ("2024-01", Decimal("1000"), Decimal("0"), Decimal("1000")),
        ("2024-02", Decimal("1000"), Decimal("200"), Decimal("800")),
        ("2024-03", Decimal("1200"), Decimal("200"), Decimal("1000")),
    ]


@pytest.mark.asyncio
async def test_update_balance_overwrites_same_day(store, logger, today) -> None:
    """One entry per account and day; the latest write wins."""
    use_case, cache = _build(store, logger, today)
    account_id = await use_case.add_account(_input())

    await use_case.update_balance(account_id, 1500, date(2024, 1, 10))
    history = await use_case.get_balance_history(account_id)

    assert [(e.date, e.value) for e in history] == [
        (date(2024, 1, 10), Decimal("1500")),
    ]
    assert cache.current()[0].assets_total == Decimal("1500")


@pytest.mark.asyncio
async def test_invalid_identifiers_are_logged_and_ignored(
    store,
    logger,
    today,
) -> None:
    """Malformed or unknown ids do nothing and return empty results."""
    use_case, cache = _build(store, logger, today)

    await use_case.update_balance("abc", 10)
    await use_case.update_account("42", AccountUpdate("X", "B", "savings", "me"))
    await use_case.delete_account(-3)
    history = await use_case.get_balance_history("not-a-number")

    assert history == []
    assert cache.version == 0
    assert logger.error.call_count == 4


@pytest.mark.asyncio
async def test_delete_account_keeps_past_months(store, logger, today) -> None:
    """Deletion removes the account from the current month only onwards."""
    use_case, cache = _build(store, logger, today)
    keep_id = await use_case.add_account(_input())
    drop_id = await use_case.add_account(
        _input(name="Brokerage", category="investment", initial_balance=500)
    )

    await use_case.delete_account(str(drop_id))

    assert store.accounts[drop_id].deleted_on == today
    assert [s.assets_total for s in cache.current()] == [
        Decimal("1500"),
        Decimal("1500"),
        Decimal("1000"),
    ]
    assert store.accounts[keep_id].deleted_on is None

    await use_case.update_balance(drop_id, 1)
    assert store.balances[drop_id] == {date(2024, 1, 10): Decimal("500")}
    logger.warning.assert_called()


@pytest.mark.asyncio
async def test_recategorization_reclassifies_whole_history(
    store,
    logger,
    today,
) -> None:
    """Moving an account to a liability category flips its kind everywhere."""
    use_case, cache = _build(store, logger, today)
    account_id = await use_case.add_account(_input(initial_balance=300))

    await use_case.update_account(
        account_id,
        AccountUpdate(
            name="Car loan",
            bank="First Bank",
            category="loan",
            owner=OwnerType.JOINT,
        ),
    )

    for snapshot in cache.current():
        assert snapshot.assets_total == Decimal("0")
        assert snapshot.liabilities_total == Decimal("300")
        assert snapshot.net_worth == Decimal("-300")
    assert store.accounts[account_id].owner is OwnerType.JOINT


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "overrides",
    [
        {"name": "   "},
        {"owner": "cousin"},
        {"category": "lottery"},
        {"initial_balance": "lots"},
        {"balance_date": "2024-13-01"},
    ],
)
async def test_add_account_rejects_invalid_input(
    store,
    logger,
    today,
    overrides,
) -> None:
    """Invalid account data raises ValueError before anything is stored."""
    use_case, cache = _build(store, logger, today)

    with pytest.raises(ValueError):
        await use_case.add_account(_input(**overrides))

    assert store.accounts == {}
    assert cache.version == 0


@pytest.mark.asyncio
async def test_add_account_leaves_nothing_when_balance_write_fails(
    store,
    logger,
    today,
) -> None:
    """The account and its first balance are stored together or not at all."""
    use_case, cache = _build(store, logger, today)
    store.fail_balance_writes = True

    with pytest.raises(RuntimeError, match="disk full"):
        await use_case.add_account(_input())

    assert store.list_accounts(include_deleted=True) == []
    assert store.balances == {}
    assert cache.version == 0

    store.fail_balance_writes = False
    account_id = await use_case.add_account(_input())

    assert account_id == 1
    assert cache.current()[0].assets_total == Decimal("1000")


@pytest.mark.asyncio
async def test_rebuild_failure_after_write_is_actionable(
    store,
    logger,
    today,
) -> None:
    """The write stays stored and a retried invalidate recovers."""
    use_case, cache = _build(store, logger, today)
    account_id = await use_case.add_account(_input())
    store.fail_reads = True

    with pytest.raises(SnapshotRebuildError):
        await use_case.update_balance(account_id, 900, "2024-02-01")

    assert store.balances[account_id][date(2024, 2, 1)] == Decimal("900")
    assert cache.current()[1].assets_total == Decimal("1000")

    store.fail_reads = False
    await cache.invalidate()
    assert cache.current()[1].assets_total == Decimal("900")


@pytest.mark.asyncio
async def test_concurrent_mutations_end_in_consistent_cache(
    store,
    logger,
    today,
) -> None:
    """Every awaited mutation is reflected once all of them return."""
    use_case, cache = _build(store, logger, today)
    account_id = await use_case.add_account(_input())

    await asyncio.gather(
        use_case.update_balance(account_id, 1100, "2024-02-01"),
        use_case.update_balance(account_id, 1200, "2024-03-01"),
        use_case.update_balance(account_id, 900, "2024-01-20"),
    )

    assert [s.assets_total for s in cache.current()] == [
        Decimal("900"),
        Decimal("1100"),
        Decimal("1200"),
    ]
    assert cache.coordinator.build_count <= 4
