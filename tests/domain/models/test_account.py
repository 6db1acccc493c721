"""Tests for account normalization."""

import pytest

from tiktok_live_analyzer.domain.models.account import (
    account_key,
    filename_component,
    normalize_account,
)
from tiktok_live_analyzer.domain.models.errors import FailureReason, InvalidAccountError


def test_normalization_shares_cache_key():
    """Test handle variants map to the same key."""
    assert account_key("@Foo ") == account_key("foo") == account_key("FOO") == "foo"


def test_normalize_strips_at_and_whitespace():
    assert normalize_account("  @alice  ") == "alice"
    assert normalize_account("@ alice") == "alice"
    assert normalize_account("Alice") == "Alice"


def test_normalize_is_idempotent():
    once = normalize_account("@Foo ")
    assert normalize_account(once) == once


@pytest.mark.parametrize("raw", [None, "", "   ", "@", " @ ", 42])
def test_invalid_accounts(raw):
    with pytest.raises(InvalidAccountError) as exc_info:
        normalize_account(raw)
    assert exc_info.value.reason == FailureReason.INVALID_INPUT


def test_filename_component():
    assert filename_component("some.user") == "some.user"
    assert filename_component("../evil") == ".._evil"
