"""
Tests for typed Item/Map collections over a store transaction.
"""
from typing import List

import pytest

from subscription_hub.core.errors import NotFoundError, StorageError
from subscription_hub.features.storage.collections import Item, Map
from subscription_hub.features.storage.keys import ADDRESS, PairKey, U64

COUNTER = Item("test_counter", int)
NAMES = Map("test_names", U64, str, kind="name")
LISTS = Map("test_lists", ADDRESS, List[int])
PAIRS = Map("test_pairs", PairKey(U64, ADDRESS), int)


def test_item_defaults_to_absent(any_store):
    with any_store.transaction() as txn:
        assert COUNTER.may_load(txn) is None
        with pytest.raises(NotFoundError):
            COUNTER.load(txn)
        COUNTER.save(txn, 3)
        assert COUNTER.load(txn) == 3


def test_map_load_missing_raises_not_found(any_store):
    with any_store.transaction() as txn:
        with pytest.raises(NotFoundError) as exc:
            NAMES.load(txn, 9)
    assert exc.value.kind == "name"
    assert exc.value.record_id == "9"
    assert exc.value.code == "not_found"


def test_map_save_overwrites_and_remove_is_idempotent(any_store):
    with any_store.transaction() as txn:
        NAMES.save(txn, 1, "first")
        NAMES.save(txn, 1, "second")
        assert NAMES.load(txn, 1) == "second"
        NAMES.remove(txn, 1)
        NAMES.remove(txn, 1)
        assert not NAMES.has(txn, 1)


def test_list_values_round_trip(any_store):
    with any_store.transaction() as txn:
        LISTS.save(txn, "owner", [3, 1, 2])
    with any_store.transaction() as txn:
        assert LISTS.load(txn, "owner") == [3, 1, 2]


def test_prefixed_range_with_cursor_and_limit(any_store):
    with any_store.transaction() as txn:
        for address, value in [("carol", 3), ("alice", 1), ("bob", 2), ("dave", 4)]:
            PAIRS.save(txn, (7, address), value)
        PAIRS.save(txn, (8, "aaron"), 99)
        PAIRS.save(txn, (6, "zed"), 98)

    with any_store.transaction() as txn:
        assert PAIRS.range(txn, prefix=7) == [("alice", 1), ("bob", 2), ("carol", 3), ("dave", 4)]
        assert PAIRS.range(txn, prefix=7, limit=2) == [("alice", 1), ("bob", 2)]
        assert PAIRS.range(txn, prefix=7, start_after="bob") == [("carol", 3), ("dave", 4)]
        # Cursor need not be an existing key
        assert PAIRS.range(txn, prefix=7, start_after="bz") == [("carol", 3), ("dave", 4)]
        assert PAIRS.range(txn, prefix=7, start_after="dave") == []
        assert PAIRS.range(txn, prefix=5) == []


def test_unprefixed_range_decodes_full_keys(any_store):
    with any_store.transaction() as txn:
        NAMES.save(txn, 10, "ten")
        NAMES.save(txn, 2, "two")
        NAMES.save(txn, 300, "three hundred")
        assert NAMES.range(txn) == [(2, "two"), (10, "ten"), (300, "three hundred")]
        assert NAMES.range(txn, start_after=2, limit=1) == [(10, "ten")]


def test_corrupted_record_is_storage_failure(any_store):
    with any_store.transaction() as txn:
        txn.set(NAMES.namespace, U64.encode(1), "{not json")
        with pytest.raises(StorageError):
            NAMES.load(txn, 1)
