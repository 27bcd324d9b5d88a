"""
subscription_hub/features/registry/lifecycle.py

Mutating registry operations.

Handles:
- Organization creation (any caller becomes owner)
- Plan creation (organization owner only)
- Subscribe / cancel state machine per (user, plan)

Every function runs inside the request's transaction and raises on the
first failed guard; the caller discards the transaction, so nothing a
failed command staged is ever committed.
"""

from subscription_hub.core.errors import (
    AlreadyCanceledError,
    AlreadyExpiredError,
    AlreadySubscribedError,
    NotCancelableError,
    UnauthorizedError,
)
from subscription_hub.features.registry.context import RequestScope
from subscription_hub.features.registry.counters import next_id
from subscription_hub.features.registry.indexes import (
    organization_plans,
    owner_organizations,
    subscriptions_index,
)
from subscription_hub.features.registry.state import (
    CONFIG,
    ORGANIZATION_ID_COUNTER,
    ORGANIZATIONS,
    PLAN_ID_COUNTER,
    PLANS,
    REGISTRY_INFO,
    SUBSCRIPTION_ID_COUNTER,
    SUBSCRIPTIONS,
)
from subscription_hub.features.storage.keys import U32, U64
from subscription_hub.models.messages import (
    CancelPlan,
    CreateOrganization,
    CreateSubscriptionPlan,
    ExecuteResult,
    SubscribePlan,
)
from subscription_hub.models.organization import Organization
from subscription_hub.models.plan import SubscriptionPlan
from subscription_hub.models.registry import RegistryConfig, RegistryInfo
from subscription_hub.models.subscription import (
    Subscription,
    SubscriptionStatus,
    subscription_status,
)


def initialize_registry(txn, admin) -> bool:
    """Record config and registry info once. Returns False if already done."""
    if REGISTRY_INFO.may_load(txn) is not None:
        return False
    CONFIG.save(txn, RegistryConfig(admin=admin))
    REGISTRY_INFO.save(txn, RegistryInfo())
    return True


def create_organization(scope: RequestScope, msg: CreateOrganization) -> ExecuteResult:
    organization_id = next_id(scope.txn, ORGANIZATION_ID_COUNTER, U32.max_value)
    organization = Organization(
        owner=scope.caller,
        name=msg.name,
        description=msg.description,
        website=msg.website,
        metadata=msg.metadata,
    )
    ORGANIZATIONS.save(scope.txn, organization_id, organization)
    owner_organizations.append(scope.txn, scope.caller, organization_id)

    return ExecuteResult(
        action="create_organization",
        attributes={
            "owner": scope.caller,
            "organization_id": str(organization_id),
        },
    )


def create_subscription_plan(scope: RequestScope, msg: CreateSubscriptionPlan) -> ExecuteResult:
    organization = ORGANIZATIONS.load(scope.txn, msg.organization_id)
    if organization.owner != scope.caller:
        raise UnauthorizedError()

    plan_id = next_id(scope.txn, PLAN_ID_COUNTER, U64.max_value)
    plan = SubscriptionPlan(
        organization_id=msg.organization_id,
        name=msg.name,
        description=msg.description,
        price=msg.price,
        duration=msg.duration,
        duration_unit=msg.duration_unit,
        features=msg.features,
        metadata=msg.metadata,
        cancelable=msg.cancelable,
        refundable=msg.refundable,
    )
    PLANS.save(scope.txn, plan_id, plan)
    organization_plans.append(scope.txn, msg.organization_id, plan_id)

    return ExecuteResult(
        action="create_subscription_plan",
        attributes={
            "owner": scope.caller,
            "organization_id": str(msg.organization_id),
            "plan_id": str(plan_id),
        },
    )


def subscribe_plan(scope: RequestScope, msg: SubscribePlan) -> ExecuteResult:
    plan = PLANS.load(scope.txn, msg.plan_id)

    current_id = subscriptions_index.current(scope.txn, scope.caller, msg.plan_id)
    current = SUBSCRIPTIONS.load(scope.txn, current_id) if current_id is not None else None
    if subscription_status(current, scope.now) is SubscriptionStatus.ACTIVE:
        raise AlreadySubscribedError()

    subscription_id = next_id(scope.txn, SUBSCRIPTION_ID_COUNTER, U64.max_value)
    subscription = Subscription(
        subscriber=scope.caller,
        plan_id=msg.plan_id,
        expiration=scope.now + plan.period,
        canceled=False,
    )
    SUBSCRIPTIONS.save(scope.txn, subscription_id, subscription)
    # A canceled or expired predecessor stays stored but is no longer indexed.
    subscriptions_index.point(scope.txn, scope.caller, msg.plan_id, subscription_id)

    attributes = {
        "subscriber": scope.caller,
        "plan_id": str(msg.plan_id),
        "subscription_id": str(subscription_id),
        "expiration": subscription.expiration.isoformat(),
    }
    if current_id is not None:
        attributes["replaced_subscription_id"] = str(current_id)
    return ExecuteResult(action="subscribe_plan", attributes=attributes)


def cancel_plan(scope: RequestScope, msg: CancelPlan) -> ExecuteResult:
    subscription = SUBSCRIPTIONS.load(scope.txn, msg.subscription_id)
    if subscription.subscriber != scope.caller:
        raise UnauthorizedError()

    plan = PLANS.load(scope.txn, subscription.plan_id)
    if not plan.cancelable:
        raise NotCancelableError()
    if subscription.canceled:
        raise AlreadyCanceledError()
    if scope.now > subscription.expiration:
        raise AlreadyExpiredError()

    SUBSCRIPTIONS.save(
        scope.txn,
        msg.subscription_id,
        subscription.model_copy(update={"canceled": True}),
    )
    subscriptions_index.release(
        scope.txn, subscription.subscriber, subscription.plan_id, msg.subscription_id
    )

    return ExecuteResult(
        action="cancel_plan",
        attributes={
            "subscriber": scope.caller,
            "plan_id": str(subscription.plan_id),
            "subscription_id": str(msg.subscription_id),
        },
    )
