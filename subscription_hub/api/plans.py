"""
subscription_hub/api/plans.py
Subscription plan API: publish plans, read them, list and join subscribers.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Path, Query

from subscription_hub.core.auth import require_caller
from subscription_hub.features.registry.hub import SubscriptionHub, get_hub
from subscription_hub.models.messages import (
    U32_MAX,
    U64_MAX,
    CreateSubscriptionPlan,
    SubscribePlan,
    SubscriptionPlanQuery,
    SubscriptionPlanSubscriptionsQuery,
)

router = APIRouter(prefix="/v1/plans", tags=["plans"])


@router.post("", status_code=201)
def create_plan_endpoint(
    request: CreateSubscriptionPlan,
    caller: str = Depends(require_caller),
    hub: SubscriptionHub = Depends(get_hub),
):
    """Publish a plan; only the organization owner may do this."""
    result = hub.execute(caller, request)
    return {"data": result}


@router.get("/{plan_id}")
def get_plan_endpoint(
    plan_id: int = Path(ge=0, le=U64_MAX),
    hub: SubscriptionHub = Depends(get_hub),
):
    return {"data": hub.query(SubscriptionPlanQuery(plan_id=plan_id))}


@router.post("/{plan_id}/subscribe", status_code=201)
def subscribe_endpoint(
    plan_id: int = Path(ge=0, le=U64_MAX),
    caller: str = Depends(require_caller),
    hub: SubscriptionHub = Depends(get_hub),
):
    result = hub.execute(caller, SubscribePlan(plan_id=plan_id))
    return {"data": result}


@router.get("/{plan_id}/subscriptions")
def list_plan_subscriptions_endpoint(
    plan_id: int = Path(ge=0, le=U64_MAX),
    start_after: Optional[str] = Query(None, min_length=1, description="Last subscriber address seen"),
    limit: Optional[int] = Query(None, ge=0, le=U32_MAX),
    hub: SubscriptionHub = Depends(get_hub),
):
    """Live subscribers of a plan, ordered by address."""
    subscriptions = hub.query(
        SubscriptionPlanSubscriptionsQuery(plan_id=plan_id, start_after=start_after, limit=limit)
    )
    return {"data": subscriptions, "count": len(subscriptions)}
