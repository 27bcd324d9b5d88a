"""
subscription_hub/models/plan.py

Subscription plans published by organizations.

A plan fixes its price, billing period and cancel/refund policy at creation
time. Prices are unsigned 128-bit integers in the smallest unit and travel
as decimal strings on the wire.
"""

from enum import Enum
from datetime import timedelta
from typing import Annotated, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field, PlainSerializer, field_validator

from subscription_hub.models.organization import sort_metadata

U128_MAX = 2**128 - 1
U8_MAX = 2**8 - 1

Uint128 = Annotated[
    int,
    Field(ge=0, le=U128_MAX),
    PlainSerializer(lambda v: str(v), return_type=str, when_used="json"),
]


class DurationUnit(str, Enum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"

    @property
    def seconds(self) -> int:
        return UNIT_SECONDS[self]


# Months are 30 days and years 365 days; no calendar arithmetic.
UNIT_SECONDS = {
    DurationUnit.DAY: 86_400,
    DurationUnit.WEEK: 604_800,
    DurationUnit.MONTH: 2_592_000,
    DurationUnit.YEAR: 31_536_000,
}


def plan_period(duration: int, unit: DurationUnit) -> timedelta:
    return timedelta(seconds=duration * unit.seconds)


class SubscriptionPlan(BaseModel):
    """A priced, time-bounded offering belonging to one organization."""
    model_config = ConfigDict(frozen=True)

    organization_id: int = Field(ge=1)
    name: str
    description: str
    price: Uint128
    duration: int = Field(ge=0, le=U8_MAX)
    duration_unit: DurationUnit
    features: Optional[List[str]] = None
    metadata: Optional[Dict[str, str]] = None
    cancelable: bool
    refundable: bool

    @field_validator("metadata")
    @classmethod
    def normalize_metadata(cls, value):
        return sort_metadata(value)

    @property
    def period(self) -> timedelta:
        return plan_period(self.duration, self.duration_unit)


class SubscriptionPlanResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    data: SubscriptionPlan
