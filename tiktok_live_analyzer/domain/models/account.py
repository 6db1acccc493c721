"""Account name normalization."""

import re

from .errors import InvalidAccountError

_UNSAFE_FILENAME_CHARS = re.compile(r'[\\/:*?"<>|\s]')


def normalize_account(raw) -> str:
    """Normalize a user supplied account handle.

    Strips surrounding whitespace and a single leading ``@``.

    Args:
        raw: Account handle as supplied by the caller

    Returns:
        Normalized account name

    Raises:
        InvalidAccountError: If the handle is missing or empty
    """
    if not isinstance(raw, str):
        raise InvalidAccountError("Missing or invalid username")

    account = raw.strip()
    if account.startswith("@"):
        account = account[1:]
    account = account.strip()

    if not account:
        raise InvalidAccountError("Missing or invalid username")
    return account


def account_key(raw) -> str:
    """Case-insensitive key for caches, logs and listener registries."""
    return normalize_account(raw).lower()


def filename_component(account: str) -> str:
    """Make a normalized account safe to embed in a file name."""
    return _UNSAFE_FILENAME_CHARS.sub("_", account)
