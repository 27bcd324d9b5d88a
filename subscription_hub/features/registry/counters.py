"""
subscription_hub/features/registry/counters.py

Identifier allocation. Ids start at 1, increase by one, and are never reused.
The counter write is staged in the caller's transaction, so a request that
fails after allocating leaves the counter untouched.
"""

from subscription_hub.core.errors import StorageError
from subscription_hub.features.storage.collections import Item


def next_id(txn, counter: Item, max_value: int) -> int:
    current = counter.may_load(txn) or 0
    if current >= max_value:
        raise StorageError(f"{counter.namespace} exhausted at {current}")
    allocated = current + 1
    counter.save(txn, allocated)
    return allocated
