"""Domain policies package."""

from .account_filters import is_valid_account_name, parse_account_id

__all__ = ["is_valid_account_name", "parse_account_id"]
