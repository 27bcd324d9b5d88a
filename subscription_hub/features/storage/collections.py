"""
subscription_hub/features/storage/collections.py

Typed views over a store transaction.

Item: a single value under a fixed namespace (counters, config).
Map: keyed records in one namespace, with point access and ordered,
cursor-paginated range scans.

Values are JSON encoded with pydantic TypeAdapters. A stored value that no
longer validates is reported as a storage failure, not a missing record.
"""

from typing import Any, Generic, List, Optional, Tuple, Type, TypeVar

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from subscription_hub.core.errors import NotFoundError, StorageError
from subscription_hub.features.storage.keys import increment, successor

T = TypeVar("T")

_ITEM_KEY = b""


class _Codec(Generic[T]):
    def __init__(self, namespace: str, value_type: Type[T]):
        self.namespace = namespace
        self._adapter = TypeAdapter(value_type)

    def _dump(self, value: T) -> str:
        return self._adapter.dump_json(value).decode("utf-8")

    def _parse(self, raw: str) -> T:
        try:
            return self._adapter.validate_json(raw)
        except PydanticValidationError as e:
            raise StorageError(f"corrupted record in {self.namespace}: {e}") from e


class Item(_Codec[T]):
    def may_load(self, txn) -> Optional[T]:
        raw = txn.get(self.namespace, _ITEM_KEY)
        return None if raw is None else self._parse(raw)

    def load(self, txn) -> T:
        value = self.may_load(txn)
        if value is None:
            raise NotFoundError(self.namespace, "item")
        return value

    def save(self, txn, value: T) -> None:
        txn.set(self.namespace, _ITEM_KEY, self._dump(value))


class Map(_Codec[T]):
    """
    Keyed collection.

    Args:
        namespace: storage namespace, unique per collection
        key: key codec from ``keys`` (U32, U64, ADDRESS, PairKey)
        value_type: anything pydantic can adapt
        kind: record name used in NotFoundError messages
    """

    def __init__(self, namespace: str, key, value_type: Type[T], kind: Optional[str] = None):
        super().__init__(namespace, value_type)
        self.key = key
        self.kind = kind or namespace

    def may_load(self, txn, key: Any) -> Optional[T]:
        raw = txn.get(self.namespace, self.key.encode(key))
        return None if raw is None else self._parse(raw)

    def load(self, txn, key: Any) -> T:
        value = self.may_load(txn, key)
        if value is None:
            raise NotFoundError(self.kind, self._display(key))
        return value

    def has(self, txn, key: Any) -> bool:
        return txn.get(self.namespace, self.key.encode(key)) is not None

    def save(self, txn, key: Any, value: T) -> None:
        txn.set(self.namespace, self.key.encode(key), self._dump(value))

    def remove(self, txn, key: Any) -> None:
        # Removing an absent key is a no-op.
        txn.delete(self.namespace, self.key.encode(key))

    def range(
        self,
        txn,
        prefix: Any = None,
        start_after: Any = None,
        limit: Optional[int] = None,
    ) -> List[Tuple[Any, T]]:
        """
        Ascending scan, optionally restricted to one key prefix.

        With a prefix the returned keys are the suffixes under it and
        ``start_after`` is a suffix; without one both are full keys.
        ``start_after`` is exclusive. The scan re-reads the store on every
        call, so a page boundary is just the last key seen.
        """
        if prefix is not None:
            base = self.key.prefix(prefix)
            codec = self.key.suffix
        else:
            base = b""
            codec = self.key

        lower = base
        if start_after is not None:
            lower = successor(base + codec.encode(start_after))
        upper = increment(base) if base else None

        rows = txn.scan(self.namespace, lower, upper, limit)
        return [(codec.decode(raw_key[len(base):]), self._parse(raw)) for raw_key, raw in rows]

    @staticmethod
    def _display(key: Any) -> str:
        if isinstance(key, tuple):
            return "/".join(str(part) for part in key)
        return str(key)
