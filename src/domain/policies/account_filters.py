"""Account naming and identifier policies."""


_HEX_CHARS = set("0123456789abcdef")


def is_valid_account_name(name: str) -> bool:
    """Return True when the account name is usable for display.

    Args:
        name: Account name to evaluate.

    Returns:
        bool: False for blank names and opaque 32-char hex identifiers.
    """
    candidate = name.strip()
    if not candidate:
        return False
    if len(candidate) == 32:
        lowered = candidate.lower()
        if all(char in _HEX_CHARS for char in lowered):
            return False
    return True


def parse_account_id(raw: object) -> int | None:
    """Parse an account identifier coming from a caller.

    Args:
        raw: Identifier as an int or a decimal string.

    Returns:
        int | None: Positive integer id, or None when the value is not one.
    """
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw if raw > 0 else None
    if not isinstance(raw, str):
        return None
    text = raw.strip()
    if not (text.isascii() and text.isdigit()):
        return None
    value = int(text)
    return value if value > 0 else None
