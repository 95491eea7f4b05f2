"""Domain constants for net worth tracking."""

from .models.accounts import AccountKind, Category


_ASSET_CATEGORIES = (
    ("checking", "Checking"),
    ("savings", "Savings"),
    ("investment", "Investment"),
    ("retirement", "Retirement"),
    ("real_estate", "Real Estate"),
    ("vehicle", "Vehicle"),
    ("crypto", "Crypto"),
    ("other_asset", "Other Asset"),
)

_LIABILITY_CATEGORIES = (
    ("credit_card", "Credit Card"),
    ("loan", "Loan"),
    ("mortgage", "Mortgage"),
    ("other_liability", "Other Liability"),
)

DEFAULT_CATEGORIES = {
    key: Category(key=key, label=label, kind=AccountKind.ASSET)
    for key, label in _ASSET_CATEGORIES
} | {
    key: Category(key=key, label=label, kind=AccountKind.LIABILITY)
    for key, label in _LIABILITY_CATEGORIES
}


__all__ = ["DEFAULT_CATEGORIES"]
