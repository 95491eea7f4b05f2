"""Application use cases package."""

from .get_category_breakdown import GetCategoryBreakdownUseCase
from .get_growth import GetGrowthUseCase
from .get_monthly_snapshots import GetMonthlySnapshotsUseCase
from .manage_accounts import (
    AccountInput,
    AccountUpdate,
    ManageAccountsUseCase,
)

__all__ = [
    "AccountInput",
    "AccountUpdate",
    "GetCategoryBreakdownUseCase",
    "GetGrowthUseCase",
    "GetMonthlySnapshotsUseCase",
    "ManageAccountsUseCase",
]
