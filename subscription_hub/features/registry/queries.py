"""
subscription_hub/features/registry/queries.py

Read-only registry queries.

Point lookups raise NotFoundError; listings return an empty list when
nothing is indexed under the requested key.
"""

from datetime import datetime
from typing import List, Optional

from subscription_hub.core.config import settings
from subscription_hub.features.registry.indexes import (
    organization_plans,
    owner_organizations,
    subscriptions_index,
)
from subscription_hub.features.registry.state import (
    CONFIG,
    ORGANIZATIONS,
    PLANS,
    SUBSCRIPTIONS,
)
from subscription_hub.models.organization import OrganizationResponse
from subscription_hub.models.plan import SubscriptionPlanResponse
from subscription_hub.models.registry import RegistryConfig
from subscription_hub.models.subscription import (
    SubscriptionResponse,
    SubscriptionStatus,
    subscription_status,
)


def page_limit(limit: Optional[int]) -> int:
    return settings.DEFAULT_PAGE_LIMIT if limit is None else limit


def get_config(txn) -> RegistryConfig:
    return CONFIG.may_load(txn) or RegistryConfig()


def get_organization(txn, organization_id: int) -> OrganizationResponse:
    return OrganizationResponse(
        id=organization_id,
        data=ORGANIZATIONS.load(txn, organization_id),
    )


def get_organizations_by_owner(txn, owner: str) -> List[OrganizationResponse]:
    return [get_organization(txn, org_id) for org_id in owner_organizations.ids(txn, owner)]


def get_plan(txn, plan_id: int) -> SubscriptionPlanResponse:
    return SubscriptionPlanResponse(id=plan_id, data=PLANS.load(txn, plan_id))


def get_plans_by_organization(txn, organization_id: int) -> List[SubscriptionPlanResponse]:
    return [get_plan(txn, plan_id) for plan_id in organization_plans.ids(txn, organization_id)]


def get_subscription(txn, subscription_id: int) -> SubscriptionResponse:
    return SubscriptionResponse(
        id=subscription_id,
        data=SUBSCRIPTIONS.load(txn, subscription_id),
    )


def get_subscriptions_by_user(
    txn,
    user: str,
    start_after: Optional[int] = None,
    limit: Optional[int] = None,
) -> List[SubscriptionResponse]:
    """
    Current subscription per plan for ``user``, ordered by plan id.

    Canceled subscriptions are included until replaced. Page with the last
    returned ``data.plan_id`` as ``start_after``.
    """
    entries = subscriptions_index.scan_by_user(txn, user, start_after, page_limit(limit))
    return [get_subscription(txn, subscription_id) for _, subscription_id in entries]


def get_subscriptions_by_plan(
    txn,
    plan_id: int,
    start_after: Optional[str] = None,
    limit: Optional[int] = None,
) -> List[SubscriptionResponse]:
    """
    Live (not canceled) subscriptions to ``plan_id``, ordered by subscriber.

    Page with the last returned ``data.subscriber`` as ``start_after``.
    """
    entries = subscriptions_index.scan_by_plan(txn, plan_id, start_after, page_limit(limit))
    return [get_subscription(txn, subscription_id) for _, subscription_id in entries]


def is_subscribed(txn, user: str, plan_id: int, now: datetime) -> bool:
    subscription_id = subscriptions_index.current(txn, user, plan_id)
    if subscription_id is None:
        return False
    subscription = SUBSCRIPTIONS.load(txn, subscription_id)
    return subscription_status(subscription, now) is SubscriptionStatus.ACTIVE
