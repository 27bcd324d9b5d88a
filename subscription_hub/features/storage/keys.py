"""
subscription_hub/features/storage/keys.py

Order-preserving key encodings.

Stored keys are compared bytewise, so every encoding here must sort the
same way its decoded value does:
- integers are fixed-width big-endian (u32 -> 4 bytes, u64 -> 8 bytes)
- addresses are raw UTF-8
- in a compound key each non-final part carries a 2-byte big-endian length,
  so scanning the prefix for one component never bleeds into another value
  that merely starts with the same bytes
"""

from typing import Any, Optional, Tuple

from subscription_hub.core.errors import ValidationError

MAX_PART_LENGTH = 0xFFFF


def increment(prefix: bytes) -> Optional[bytes]:
    """Smallest byte string greater than every string starting with ``prefix``.

    Returns None when no such bound exists (empty or all 0xff).
    """
    trimmed = prefix.rstrip(b"\xff")
    if not trimmed:
        return None
    return trimmed[:-1] + bytes([trimmed[-1] + 1])


def successor(key: bytes) -> bytes:
    """Smallest byte string strictly greater than ``key``."""
    return key + b"\x00"


def length_prefixed(part: bytes) -> bytes:
    if len(part) > MAX_PART_LENGTH:
        raise ValidationError(f"key part too long ({len(part)} bytes, max {MAX_PART_LENGTH})")
    return len(part).to_bytes(2, "big") + part


class UIntKey:
    """Fixed-width unsigned integer key."""

    def __init__(self, width: int):
        self.width = width
        self.max_value = 2 ** (8 * width) - 1

    def encode(self, value: int) -> bytes:
        if not isinstance(value, int) or isinstance(value, bool) or not 0 <= value <= self.max_value:
            raise ValidationError(f"key {value!r} does not fit in {self.width * 8} unsigned bits")
        return value.to_bytes(self.width, "big")

    def decode(self, raw: bytes) -> int:
        if len(raw) != self.width:
            raise ValueError(f"expected {self.width} key bytes, got {len(raw)}")
        return int.from_bytes(raw, "big")


class AddressKey:
    def encode(self, value: str) -> bytes:
        if not value:
            raise ValidationError("address key must not be empty")
        return value.encode("utf-8")

    def decode(self, raw: bytes) -> str:
        return raw.decode("utf-8")


class PairKey:
    """Compound (first, second) key; scans can be prefixed by ``first``."""

    def __init__(self, first, second):
        self.first = first
        self.second = second

    def encode(self, value: Tuple[Any, Any]) -> bytes:
        first, second = value
        return self.prefix(first) + self.second.encode(second)

    def prefix(self, first: Any) -> bytes:
        return length_prefixed(self.first.encode(first))

    @property
    def suffix(self):
        return self.second

    def decode(self, raw: bytes) -> Tuple[Any, Any]:
        size = int.from_bytes(raw[:2], "big")
        return self.first.decode(raw[2:2 + size]), self.second.decode(raw[2 + size:])


U32 = UIntKey(4)
U64 = UIntKey(8)
ADDRESS = AddressKey()
