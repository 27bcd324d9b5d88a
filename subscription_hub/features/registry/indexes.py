"""
subscription_hub/features/registry/indexes.py

Secondary indexes over the primary records.

ListIndex: owner -> organization ids, organization -> plan ids. Append-only,
insertion order, no dedup.

SubscriptionIndex: the (user, plan) -> subscription id map and its
(plan, user) mirror, kept behind one interface so the two sides are always
written together.
- user side: the current subscription for the pair. Survives cancellation,
  replaced on re-subscription.
- plan side: live subscribers only. Dropped on cancellation, restored on
  re-subscription.
"""

from typing import List, Optional, Tuple

from subscription_hub.features.storage.collections import Map
from subscription_hub.features.registry.state import (
    ORGANIZATION_PLANS,
    OWNER_ORGANIZATIONS,
    PLAN_SUBSCRIBERS,
    USER_PLAN_SUBSCRIPTION,
)


class ListIndex:
    def __init__(self, collection: Map):
        self.collection = collection

    def ids(self, txn, key) -> List[int]:
        return self.collection.may_load(txn, key) or []

    def append(self, txn, key, record_id: int) -> None:
        ids = self.ids(txn, key)
        ids.append(record_id)
        self.collection.save(txn, key, ids)


class SubscriptionIndex:
    def __init__(self, by_user: Map = USER_PLAN_SUBSCRIPTION, by_plan: Map = PLAN_SUBSCRIBERS):
        self.by_user = by_user
        self.by_plan = by_plan

    def current(self, txn, user: str, plan_id: int) -> Optional[int]:
        """Subscription id currently reachable for (user, plan), if any."""
        return self.by_user.may_load(txn, (user, plan_id))

    def point(self, txn, user: str, plan_id: int, subscription_id: int) -> None:
        """Make ``subscription_id`` the current subscription on both sides."""
        self.by_user.save(txn, (user, plan_id), subscription_id)
        self.by_plan.save(txn, (plan_id, user), subscription_id)

    def release(self, txn, user: str, plan_id: int, subscription_id: int) -> None:
        """Drop the plan-side entry if it still points at ``subscription_id``.

        The user-side entry stays so a later subscribe sees the canceled record.
        """
        if self.by_plan.may_load(txn, (plan_id, user)) == subscription_id:
            self.by_plan.remove(txn, (plan_id, user))

    def scan_by_user(
        self, txn, user: str, start_after: Optional[int], limit: int
    ) -> List[Tuple[int, int]]:
        """(plan_id, subscription_id) pairs for ``user`` in plan id order."""
        return self.by_user.range(txn, prefix=user, start_after=start_after, limit=limit)

    def scan_by_plan(
        self, txn, plan_id: int, start_after: Optional[str], limit: int
    ) -> List[Tuple[str, int]]:
        """(address, subscription_id) pairs for ``plan_id`` in address order."""
        return self.by_plan.range(txn, prefix=plan_id, start_after=start_after, limit=limit)


owner_organizations = ListIndex(OWNER_ORGANIZATIONS)
organization_plans = ListIndex(ORGANIZATION_PLANS)
subscriptions_index = SubscriptionIndex()
