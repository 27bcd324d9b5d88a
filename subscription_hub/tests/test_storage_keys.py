"""
Tests for order-preserving key encodings.
"""
import pytest

from subscription_hub.core.errors import ValidationError
from subscription_hub.features.storage.keys import (
    ADDRESS,
    PairKey,
    U32,
    U64,
    increment,
    length_prefixed,
    successor,
)


def test_integer_keys_sort_numerically():
    """Big-endian fixed width keeps byte order equal to numeric order."""
    values = [1, 2, 9, 10, 255, 256, 70_000]
    encoded = [U64.encode(v) for v in values]
    assert encoded == sorted(encoded)
    assert [U64.decode(e) for e in encoded] == values


def test_u32_rejects_out_of_range():
    with pytest.raises(ValidationError):
        U32.encode(2**32)
    with pytest.raises(ValidationError):
        U32.encode(-1)
    with pytest.raises(ValidationError):
        U32.encode(True)


def test_pair_key_prefix_does_not_bleed_into_longer_address():
    """Scanning 'user' must not pick up keys for 'user2'."""
    key = PairKey(ADDRESS, U64)
    prefix = key.prefix("user")
    other = key.encode(("user2", 1))
    assert not other.startswith(prefix)
    assert key.encode(("user", 7)).startswith(prefix)


def test_pair_key_round_trips_through_decode():
    key = PairKey(U64, ADDRESS)
    raw = key.encode((42, "alice"))
    assert key.decode(raw) == (42, "alice")


def test_increment_and_successor_bounds():
    assert increment(b"\x00\x04user") == b"\x00\x04uses"
    assert increment(b"ab\xff") == b"ac"
    assert increment(b"\xff\xff") is None
    assert increment(b"") is None
    assert successor(b"abc") > b"abc"
    assert successor(b"abc") < b"abd"


def test_length_prefix_limit():
    with pytest.raises(ValidationError):
        length_prefixed(b"x" * 70_000)


def test_empty_address_key_is_rejected():
    with pytest.raises(ValidationError):
        ADDRESS.encode("")


def test_oversized_compound_part_is_a_validation_error():
    key = PairKey(ADDRESS, U64)
    with pytest.raises(ValidationError) as exc:
        key.encode(("a" * 70_000, 1))
    assert exc.value.status_code == 400
    assert exc.value.code == "validation_error"
