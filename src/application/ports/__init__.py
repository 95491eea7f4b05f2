"""Application ports package."""

from .balance_store import BalanceStorePort
from .database import DatabaseEnginePort

__all__ = [
    "BalanceStorePort",
    "DatabaseEnginePort",
]
