"""Tests for the SQLAlchemy balance store against SQLite."""

from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy import create_engine, text
from sqlalchemy.exc import OperationalError

from src.application.snapshot_cache import SnapshotCache
from src.application.use_cases.manage_accounts import (
    AccountInput,
    ManageAccountsUseCase,
)
from src.domain.models import AccountKind, OwnerType
from src.domain.services.months import parse_local_date
from src.infrastructure import balance_store as balance_store_module
from src.infrastructure.balance_store import SqlAlchemyBalanceStore
from src.utils.decimal_utils import coerce_decimal


class _FakeDatabasePort:
    def __init__(self, engine) -> None:
        self._engine = engine

    def get_networth_engine(self):
        return self._engine


@pytest.fixture
def sqlite_store(tmp_path) -> SqlAlchemyBalanceStore:
    engine = create_engine(f"sqlite:///{tmp_path / 'networth.db'}")
    store = SqlAlchemyBalanceStore(_FakeDatabasePort(engine))
    store.prepare()
    yield store
    engine.dispose()


def _history(store, account_id):
    return [
        (parse_local_date(row.entry_date), coerce_decimal(row.value))
        for row in store.list_balances(account_id)
    ]


def test_prepare_seeds_default_categories_once(sqlite_store) -> None:
    """prepare is idempotent and seeds asset and liability categories."""
    sqlite_store.prepare()

    categories = {item.key: item for item in sqlite_store.list_categories()}

    assert categories["checking"].kind is AccountKind.ASSET
    assert categories["mortgage"].kind is AccountKind.LIABILITY
    assert len(categories) == 12


def test_add_and_get_account(sqlite_store) -> None:
    """Accounts get sequential ids and round-trip their attributes."""
    first = sqlite_store.add_account(
        "Checking",
        "First Bank",
        "checking",
        OwnerType.ME,
        "daily spending",
    )
    second = sqlite_store.add_account("Visa", "Card Co", "credit_card", "joint")

    account = sqlite_store.get_account(first)

    assert second == first + 1
    assert account.name == "Checking"
    assert account.bank == "First Bank"
    assert account.owner is OwnerType.ME
    assert account.notes == "daily spending"
    assert account.deleted_on is None
    assert sqlite_store.get_account(999) is None
    assert [a.id for a in sqlite_store.list_accounts()] == [first, second]


def test_upsert_balance_replaces_same_day(sqlite_store) -> None:
    """One row per account and day; later writes win."""
    account_id = sqlite_store.add_account("Savings", "Bank", "savings", "me")

    sqlite_store.upsert_balance(account_id, date(2024, 2, 1), Decimal("50"))
    sqlite_store.upsert_balance(account_id, date(2024, 1, 10), Decimal("10.25"))
    sqlite_store.upsert_balance(account_id, date(2024, 2, 1), Decimal("75"))

    assert _history(sqlite_store, account_id) == [
        (date(2024, 1, 10), Decimal("10.25")),
        (date(2024, 2, 1), Decimal("75")),
    ]


def test_soft_delete_keeps_history(sqlite_store) -> None:
    """Deleted accounts are hidden by default but keep their balances."""
    account_id = sqlite_store.add_account("Car loan", "Bank", "loan", "spouse")
    sqlite_store.upsert_balance(account_id, date(2024, 1, 5), Decimal("9000"))

    sqlite_store.soft_delete_account(account_id, date(2024, 3, 15))

    assert sqlite_store.list_accounts() == []
    deleted = sqlite_store.list_accounts(include_deleted=True)
    assert [a.deleted_on for a in deleted] == [date(2024, 3, 15)]
    assert sqlite_store.get_account(account_id).is_deleted is True
    assert _history(sqlite_store, account_id) == [
        (date(2024, 1, 5), Decimal("9000")),
    ]


def test_update_account_changes_category(sqlite_store) -> None:
    """Updates overwrite every descriptive attribute."""
    account_id = sqlite_store.add_account("Broker", "Bank", "savings", "me")

    sqlite_store.update_account(
        account_id,
        "Broker",
        "Other Bank",
        "investment",
        OwnerType.JOINT,
        None,
    )

    account = sqlite_store.get_account(account_id)
    assert account.category == "investment"
    assert account.bank == "Other Bank"
    assert account.owner is OwnerType.JOINT


def test_mutations_on_unknown_accounts_raise(sqlite_store) -> None:
    """Updating or deleting a missing id is an error."""
    with pytest.raises(RuntimeError):
        sqlite_store.update_account(42, "X", "Y", "checking", "me")
    with pytest.raises(RuntimeError):
        sqlite_store.soft_delete_account(42, date(2024, 1, 1))


def test_balance_values_read_back_exactly(sqlite_store) -> None:
    """Amounts beyond float precision are not rounded by the store."""
    account_id = sqlite_store.add_account("Trust", "Bank", "investment", "me")
    amount = Decimal("12345678901234567.89")

    sqlite_store.upsert_balance(account_id, date(2024, 1, 10), amount)

    assert _history(sqlite_store, account_id) == [(date(2024, 1, 10), amount)]


def test_add_account_writes_initial_balance(sqlite_store) -> None:
    """The first balance is stored with the account."""
    account_id = sqlite_store.add_account(
        "Savings",
        "Bank",
        "savings",
        OwnerType.ME,
        None,
        Decimal("250.10"),
        date(2024, 2, 29),
    )

    assert _history(sqlite_store, account_id) == [
        (date(2024, 2, 29), Decimal("250.10")),
    ]


def test_add_account_rolls_back_when_balance_insert_fails(
    sqlite_store,
    monkeypatch,
) -> None:
    """A failing balance insert leaves no account behind."""
    monkeypatch.setattr(
        balance_store_module,
        "UPSERT_BALANCE_SQL",
        text("INSERT INTO missing_balances (value) VALUES (:value)"),
    )

    with pytest.raises(OperationalError):
        sqlite_store.add_account(
            "Savings",
            "Bank",
            "savings",
            OwnerType.ME,
            None,
            Decimal("10"),
            date(2024, 1, 1),
        )

    assert sqlite_store.list_accounts(include_deleted=True) == []


@pytest.mark.asyncio
async def test_snapshots_from_store_keep_exact_totals(sqlite_store) -> None:
    """Totals built from stored rows keep every digit of the amounts."""
    today = date(2024, 2, 15)
    cache = SnapshotCache(sqlite_store, clock=lambda: today)
    use_case = ManageAccountsUseCase(
        store=sqlite_store,
        cache=cache,
        clock=lambda: today,
    )

    account_id = await use_case.add_account(
        AccountInput(
            name="Trust",
            bank="Bank",
            category="checking",
            owner="me",
            initial_balance="12345678901234567.89",
            balance_date="2024-01-10",
        )
    )
    await use_case.update_balance(account_id, "0.01", "2024-02-01")

    snapshots = cache.current()
    assert snapshots[0].assets_total == Decimal("12345678901234567.89")
    assert snapshots[1].net_worth == Decimal("0.01")
