"""Domain models for accounts, categories and balance observations."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum


class AccountKind(str, Enum):
    """Whether an account adds to or subtracts from net worth."""

    ASSET = "asset"
    LIABILITY = "liability"


class OwnerType(str, Enum):
    """Owner tier of an account."""

    ME = "me"
    SPOUSE = "spouse"
    JOINT = "joint"


@dataclass(frozen=True)
class Category:
    """Entry of the category table.

    Attributes:
        key: Stable identifier referenced by accounts.
        label: Display label.
        kind: Asset or liability classification inherited by accounts.
    """

    key: str
    label: str
    kind: AccountKind


@dataclass(frozen=True)
class Account:
    """Account as stored in the balance store.

    Attributes:
        id: Integer identity assigned by the store.
        name: Display name.
        bank: Institution holding the account.
        category: Key into the category table.
        owner: Owner tier.
        notes: Optional free text.
        deleted_on: Soft deletion date, None while the account is active.
    """

    id: int
    name: str
    bank: str
    category: str
    owner: OwnerType
    notes: str | None = None
    deleted_on: date | None = None

    @property
    def is_deleted(self) -> bool:
        return self.deleted_on is not None


@dataclass(frozen=True)
class BalanceRow:
    """Raw balance observation read from storage, not yet normalized."""

    account_id: int
    entry_date: object
    value: object


@dataclass(frozen=True)
class BalanceEntry:
    """Normalized balance observation for one account on one day."""

    date: date
    value: Decimal


__all__ = [
    "AccountKind",
    "OwnerType",
    "Category",
    "Account",
    "BalanceRow",
    "BalanceEntry",
]
