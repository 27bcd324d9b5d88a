"""
subscription_hub/models/subscription.py

Subscription records and their derived lifecycle status.

Status is never stored. `Expired` in particular only exists relative to a
clock reading, so it is computed on demand from (canceled, expiration, now).
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class SubscriptionStatus(str, Enum):
    NO_SUBSCRIPTION = "no_subscription"
    ACTIVE = "active"
    CANCELED = "canceled"
    EXPIRED = "expired"


class Subscription(BaseModel):
    """One address's enrollment in one plan."""
    model_config = ConfigDict(frozen=True)

    subscriber: str = Field(min_length=1)
    plan_id: int = Field(ge=1)
    expiration: datetime
    canceled: bool = False


class SubscriptionResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    data: Subscription


def subscription_status(subscription: Optional[Subscription], now: datetime) -> SubscriptionStatus:
    if subscription is None:
        return SubscriptionStatus.NO_SUBSCRIPTION
    if subscription.canceled:
        return SubscriptionStatus.CANCELED
    if subscription.expiration > now:
        return SubscriptionStatus.ACTIVE
    return SubscriptionStatus.EXPIRED
