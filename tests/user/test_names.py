"""Tests for idstore/user/names.py - reserved name validation."""

import pytest
from hypothesis import given
from hypothesis import settings as hypothesis_settings
from hypothesis import strategies as st

from idstore.user.exceptions import NameNotAllowedError
from idstore.user.names import (
    RESERVED_USERNAMES,
    ensure_name_allowed,
    normalize_email,
    normalize_name,
)


@hypothesis_settings(max_examples=100)
@given(
    name=st.sampled_from(sorted(RESERVED_USERNAMES)),
    data=st.data(),
)
def test_reserved_names_rejected_in_any_case(name, data):
    """Property: reserved names are rejected regardless of letter case."""
    flips = data.draw(st.lists(st.booleans(), min_size=len(name), max_size=len(name)))
    variant = "".join(c.upper() if f else c for c, f in zip(name, flips, strict=True))

    with pytest.raises(NameNotAllowedError) as exc_info:
        ensure_name_allowed(variant)

    assert exc_info.value.details == {"reason": "reserved", "name": variant}


@hypothesis_settings(max_examples=100)
@given(
    name=st.text(
        alphabet=st.characters(whitelist_categories=("Ll", "Lu", "Nd")),
        min_size=1,
        max_size=30,
    )
)
def test_ordinary_names_allowed(name):
    """Property: alphanumeric names outside the reserved set pass."""
    if normalize_name(name) in RESERVED_USERNAMES:
        return
    ensure_name_allowed(name)


def test_empty_name_rejected():
    with pytest.raises(NameNotAllowedError) as exc_info:
        ensure_name_allowed("   ")

    assert exc_info.value.details["reason"] == "empty"


@pytest.mark.parametrize(
    ("name", "pattern"),
    [("alice.keys", "*.keys"), ("ALICE.GPG", "*.gpg")],
)
def test_reserved_patterns_rejected(name, pattern):
    with pytest.raises(NameNotAllowedError) as exc_info:
        ensure_name_allowed(name)

    assert exc_info.value.details["reason"] == "reserved_pattern"
    assert exc_info.value.details["pattern"] == pattern


def test_normalize():
    assert normalize_name("  Alice ") == "alice"
    assert normalize_email(" Alice@Example.COM") == "alice@example.com"
