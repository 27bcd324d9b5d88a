"""
subscription_hub/features/storage/store.py

Transactional key-value stores backing the registry.

Two implementations with the same interface:
- MemoryStore: process-local dicts, used when no database is configured
- SqlStore: the registry_entries table through SQLAlchemy

A store hands out one transaction per request. Writes made inside the
transaction are visible to its own reads and become durable only when the
``with`` block exits cleanly; any exception discards all of them.
"""

import logging
from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional, Tuple

from sqlalchemy import and_, delete, insert, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from subscription_hub.core.database import (
    build_engine,
    check_connection,
    create_all_tables,
    get_database_url,
    get_db_session,
    registry_entries,
)
from subscription_hub.core.errors import StorageError

logger = logging.getLogger("subscription_hub")

Row = Tuple[bytes, str]


class MemoryTransaction:
    """Write overlay on top of a MemoryStore snapshot."""

    def __init__(self, data: Dict[str, Dict[bytes, str]]):
        self._data = data
        # None marks a staged delete
        self._staged: Dict[Tuple[str, bytes], Optional[str]] = {}

    def get(self, namespace: str, key: bytes) -> Optional[str]:
        if (namespace, key) in self._staged:
            return self._staged[(namespace, key)]
        return self._data.get(namespace, {}).get(key)

    def set(self, namespace: str, key: bytes, value: str) -> None:
        self._staged[(namespace, key)] = value

    def delete(self, namespace: str, key: bytes) -> None:
        self._staged[(namespace, key)] = None

    def scan(
        self,
        namespace: str,
        lower: bytes,
        upper: Optional[bytes] = None,
        limit: Optional[int] = None,
    ) -> List[Row]:
        merged = {
            key: value
            for key, value in self._data.get(namespace, {}).items()
            if key >= lower and (upper is None or key < upper)
        }
        for (ns, key), value in self._staged.items():
            if ns != namespace or key < lower or (upper is not None and key >= upper):
                continue
            if value is None:
                merged.pop(key, None)
            else:
                merged[key] = value
        rows = sorted(merged.items())
        return rows if limit is None else rows[:limit]

    def commit(self) -> None:
        for (namespace, key), value in self._staged.items():
            if value is None:
                self._data.get(namespace, {}).pop(key, None)
            else:
                self._data.setdefault(namespace, {})[key] = value
        self._staged.clear()


class MemoryStore:
    """
    In-memory store.

    Not durable across restarts; intended for development and tests.
    """

    def __init__(self):
        self._data: Dict[str, Dict[bytes, str]] = {}

    @contextmanager
    def transaction(self) -> Iterator[MemoryTransaction]:
        txn = MemoryTransaction(self._data)
        yield txn
        txn.commit()

    def clear(self) -> None:
        """FOR TESTING ONLY."""
        self._data.clear()

    def count(self, namespace: Optional[str] = None) -> int:
        if namespace is not None:
            return len(self._data.get(namespace, {}))
        return sum(len(bucket) for bucket in self._data.values())


class SqlTransaction:
    """Reads and writes through one open session."""

    def __init__(self, session: Session):
        self._session = session

    def get(self, namespace: str, key: bytes) -> Optional[str]:
        try:
            row = self._session.execute(
                select(registry_entries.c.value).where(
                    and_(
                        registry_entries.c.namespace == namespace,
                        registry_entries.c.key == key,
                    )
                )
            ).first()
        except SQLAlchemyError as e:
            raise StorageError(f"failed to read {namespace}: {e}") from e
        return row.value if row else None

    def set(self, namespace: str, key: bytes, value: str) -> None:
        try:
            result = self._session.execute(
                update(registry_entries)
                .where(
                    and_(
                        registry_entries.c.namespace == namespace,
                        registry_entries.c.key == key,
                    )
                )
                .values(value=value)
            )
            if result.rowcount == 0:
                self._session.execute(
                    insert(registry_entries).values(namespace=namespace, key=key, value=value)
                )
        except SQLAlchemyError as e:
            raise StorageError(f"failed to write {namespace}: {e}") from e

    def delete(self, namespace: str, key: bytes) -> None:
        try:
            self._session.execute(
                delete(registry_entries).where(
                    and_(
                        registry_entries.c.namespace == namespace,
                        registry_entries.c.key == key,
                    )
                )
            )
        except SQLAlchemyError as e:
            raise StorageError(f"failed to delete from {namespace}: {e}") from e

    def scan(
        self,
        namespace: str,
        lower: bytes,
        upper: Optional[bytes] = None,
        limit: Optional[int] = None,
    ) -> List[Row]:
        filters = [
            registry_entries.c.namespace == namespace,
            registry_entries.c.key >= lower,
        ]
        if upper is not None:
            filters.append(registry_entries.c.key < upper)

        query = (
            select(registry_entries.c.key, registry_entries.c.value)
            .where(and_(*filters))
            .order_by(registry_entries.c.key)
        )
        if limit is not None:
            query = query.limit(limit)

        try:
            result = self._session.execute(query)
            return [(bytes(row.key), row.value) for row in result]
        except SQLAlchemyError as e:
            raise StorageError(f"failed to scan {namespace}: {e}") from e


class SqlStore:
    """
    SQL-backed store.

    Maintains identical interface to MemoryStore.
    """

    def __init__(self, engine):
        self.engine = engine
        self._session_factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
        try:
            create_all_tables(engine)
        except SQLAlchemyError as e:
            raise StorageError(f"failed to prepare registry schema: {e}") from e

    @classmethod
    def from_url(cls, url: str) -> "SqlStore":
        return cls(build_engine(url))

    @contextmanager
    def transaction(self) -> Iterator[SqlTransaction]:
        try:
            with get_db_session(self._session_factory) as session:
                yield SqlTransaction(session)
        except SQLAlchemyError as e:
            raise StorageError(f"transaction failed: {e}") from e

    def clear(self) -> None:
        """FOR TESTING ONLY."""
        with self.transaction() as txn:
            txn._session.execute(delete(registry_entries))

    def count(self, namespace: Optional[str] = None) -> int:
        query = select(registry_entries.c.key)
        if namespace is not None:
            query = query.where(registry_entries.c.namespace == namespace)
        with self.transaction() as txn:
            return len(txn._session.execute(query).all())


def get_registry_store():
    """
    Pick the store implementation.

    - SQL store when a database URL is configured and reachable
    - Falls back to in-memory otherwise
    """
    url = get_database_url()
    if url:
        try:
            store = SqlStore.from_url(url)
            if check_connection(store.engine):
                return store
            logger.warning("[store] database unavailable, falling back to in-memory")
        except Exception as e:
            logger.warning(f"[store] failed to initialize SQL store: {e}")
            logger.warning("[store] falling back to in-memory")

    return MemoryStore()


# Global store instance (lazy initialization)
_store_instance = None


def get_store():
    """
    Get the singleton store instance.

    This is the primary API that all consumers should use.
    """
    global _store_instance
    if _store_instance is None:
        _store_instance = get_registry_store()
    return _store_instance


def reset_store():
    """
    Reset the store instance.

    FOR TESTING ONLY - forces re-initialization on next get_store() call.
    """
    global _store_instance
    _store_instance = None
