"""
subscription_hub/api/subscriptions.py
Subscription API: cancel, look up, list per user, subscription status.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Path, Query

from subscription_hub.core.auth import require_caller
from subscription_hub.features.registry.hub import SubscriptionHub, get_hub
from subscription_hub.models.messages import (
    U32_MAX,
    U64_MAX,
    CancelPlan,
    IsSubscribedQuery,
    SubscriptionQuery,
    UserSubscriptionsQuery,
)

router = APIRouter(prefix="/v1", tags=["subscriptions"])


@router.post("/subscriptions/{subscription_id}/cancel")
def cancel_subscription_endpoint(
    subscription_id: int = Path(ge=0, le=U64_MAX),
    caller: str = Depends(require_caller),
    hub: SubscriptionHub = Depends(get_hub),
):
    result = hub.execute(caller, CancelPlan(subscription_id=subscription_id))
    return {"data": result}


@router.get("/subscriptions/{subscription_id}")
def get_subscription_endpoint(
    subscription_id: int = Path(ge=0, le=U64_MAX),
    hub: SubscriptionHub = Depends(get_hub),
):
    return {"data": hub.query(SubscriptionQuery(subscription_id=subscription_id))}


@router.get("/users/{user_address}/subscriptions")
def list_user_subscriptions_endpoint(
    user_address: str,
    start_after: Optional[int] = Query(None, ge=0, le=U64_MAX, description="Last plan id seen"),
    limit: Optional[int] = Query(None, ge=0, le=U32_MAX),
    hub: SubscriptionHub = Depends(get_hub),
):
    subscriptions = hub.query(
        UserSubscriptionsQuery(user_address=user_address, start_after=start_after, limit=limit)
    )
    return {"data": subscriptions, "count": len(subscriptions)}


@router.get("/users/{user_address}/plans/{plan_id}/subscribed")
def is_subscribed_endpoint(
    user_address: str,
    plan_id: int = Path(ge=0, le=U64_MAX),
    hub: SubscriptionHub = Depends(get_hub),
):
    subscribed = hub.query(IsSubscribedQuery(user_address=user_address, plan_id=plan_id))
    return {"data": {"subscribed": subscribed}}
