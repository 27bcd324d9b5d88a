"""
subscription_hub/features/registry/dispatch.py

Closed dispatch tables from message type to handler.

The tables are checked against the ExecuteMsg/QueryMsg unions at import
time, so a message added to a union without a handler fails loudly.
"""

from typing import Any, Callable, Dict, Type, get_args

from subscription_hub.core.errors import ValidationError
from subscription_hub.features.registry import lifecycle, queries
from subscription_hub.features.registry.context import RequestScope
from subscription_hub.models.messages import (
    CancelPlan,
    ConfigQuery,
    CreateOrganization,
    CreateSubscriptionPlan,
    ExecuteMsg,
    ExecuteResult,
    IsSubscribedQuery,
    OrganizationQuery,
    OrganizationSubscriptionPlansQuery,
    QueryMsg,
    SubscribePlan,
    SubscriptionPlanQuery,
    SubscriptionPlanSubscriptionsQuery,
    SubscriptionQuery,
    UserOrganizationsQuery,
    UserSubscriptionsQuery,
)

COMMAND_HANDLERS: Dict[Type, Callable[[RequestScope, Any], ExecuteResult]] = {
    CreateOrganization: lifecycle.create_organization,
    CreateSubscriptionPlan: lifecycle.create_subscription_plan,
    SubscribePlan: lifecycle.subscribe_plan,
    CancelPlan: lifecycle.cancel_plan,
}

QUERY_HANDLERS: Dict[Type, Callable[[RequestScope, Any], Any]] = {
    OrganizationQuery: lambda scope, msg: queries.get_organization(scope.txn, msg.organization_id),
    UserOrganizationsQuery: lambda scope, msg: queries.get_organizations_by_owner(scope.txn, msg.user_address),
    SubscriptionPlanQuery: lambda scope, msg: queries.get_plan(scope.txn, msg.plan_id),
    OrganizationSubscriptionPlansQuery: lambda scope, msg: queries.get_plans_by_organization(scope.txn, msg.organization_id),
    SubscriptionQuery: lambda scope, msg: queries.get_subscription(scope.txn, msg.subscription_id),
    UserSubscriptionsQuery: lambda scope, msg: queries.get_subscriptions_by_user(
        scope.txn, msg.user_address, msg.start_after, msg.limit
    ),
    SubscriptionPlanSubscriptionsQuery: lambda scope, msg: queries.get_subscriptions_by_plan(
        scope.txn, msg.plan_id, msg.start_after, msg.limit
    ),
    IsSubscribedQuery: lambda scope, msg: queries.is_subscribed(
        scope.txn, msg.user_address, msg.plan_id, scope.now
    ),
    ConfigQuery: lambda scope, msg: queries.get_config(scope.txn),
}


def union_members(union) -> tuple:
    """Message classes of an ``Annotated[Union[...], Field(...)]`` alias."""
    inner = get_args(union)[0]
    return get_args(inner)


def ensure_exhaustive(handlers: Dict[Type, Callable], union) -> None:
    members = set(union_members(union))
    missing = sorted(cls.__name__ for cls in members - set(handlers))
    extra = sorted(cls.__name__ for cls in set(handlers) - members)
    if missing or extra:
        raise RuntimeError(f"dispatch table mismatch: missing={missing} extra={extra}")


ensure_exhaustive(COMMAND_HANDLERS, ExecuteMsg)
ensure_exhaustive(QUERY_HANDLERS, QueryMsg)


def execute(scope: RequestScope, msg) -> ExecuteResult:
    handler = COMMAND_HANDLERS.get(type(msg))
    if handler is None:
        raise ValidationError(f"unknown command {type(msg).__name__}")
    return handler(scope, msg)


def query(scope: RequestScope, msg) -> Any:
    handler = QUERY_HANDLERS.get(type(msg))
    if handler is None:
        raise ValidationError(f"unknown query {type(msg).__name__}")
    return handler(scope, msg)
