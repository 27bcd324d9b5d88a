"""
subscription_hub/models/messages.py

Command and query messages accepted by the registry.

Each message carries a ``type`` tag; ExecuteMsg and QueryMsg are closed
discriminated unions over them. Adding a message means adding it to the
union and giving it a handler in the dispatch table.
"""

from typing import Annotated, Dict, List, Literal, Optional, Union
from pydantic import BaseModel, ConfigDict, Field

from subscription_hub.models.plan import DurationUnit, Uint128, U8_MAX

U32_MAX = 2**32 - 1
U64_MAX = 2**64 - 1

OrganizationId = Annotated[int, Field(ge=0, le=U32_MAX)]
RecordId = Annotated[int, Field(ge=0, le=U64_MAX)]
Address = Annotated[str, Field(min_length=1)]
PageLimit = Annotated[int, Field(ge=0, le=U32_MAX)]


# Commands

class CreateOrganization(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    type: Literal["create_organization"] = "create_organization"
    name: str
    description: str
    website: Optional[str] = None
    metadata: Optional[Dict[str, str]] = None


class CreateSubscriptionPlan(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    type: Literal["create_subscription_plan"] = "create_subscription_plan"
    organization_id: OrganizationId
    name: str
    description: str
    price: Uint128
    duration: int = Field(ge=0, le=U8_MAX)
    duration_unit: DurationUnit
    features: Optional[List[str]] = None
    metadata: Optional[Dict[str, str]] = None
    cancelable: bool
    refundable: bool


class SubscribePlan(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    type: Literal["subscribe_plan"] = "subscribe_plan"
    plan_id: RecordId


class CancelPlan(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    type: Literal["cancel_plan"] = "cancel_plan"
    subscription_id: RecordId


ExecuteMsg = Annotated[
    Union[CreateOrganization, CreateSubscriptionPlan, SubscribePlan, CancelPlan],
    Field(discriminator="type"),
]


class ExecuteResult(BaseModel):
    """Outcome of a committed command: what happened, who did it, ids created."""
    model_config = ConfigDict(frozen=True)

    action: str
    attributes: Dict[str, str] = Field(default_factory=dict)


# Queries

class OrganizationQuery(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    type: Literal["organization"] = "organization"
    organization_id: OrganizationId


class UserOrganizationsQuery(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    type: Literal["user_organizations"] = "user_organizations"
    user_address: Address


class SubscriptionPlanQuery(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    type: Literal["subscription_plan"] = "subscription_plan"
    plan_id: RecordId


class OrganizationSubscriptionPlansQuery(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    type: Literal["organization_subscription_plans"] = "organization_subscription_plans"
    organization_id: OrganizationId


class SubscriptionQuery(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    type: Literal["subscription"] = "subscription"
    subscription_id: RecordId


class UserSubscriptionsQuery(BaseModel):
    """Cursor is a plan id."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    type: Literal["user_subscriptions"] = "user_subscriptions"
    user_address: Address
    start_after: Optional[RecordId] = None
    limit: Optional[PageLimit] = None


class SubscriptionPlanSubscriptionsQuery(BaseModel):
    """Cursor is a subscriber address."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    type: Literal["subscription_plan_subscriptions"] = "subscription_plan_subscriptions"
    plan_id: RecordId
    start_after: Optional[Address] = None
    limit: Optional[PageLimit] = None


class IsSubscribedQuery(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    type: Literal["is_subscribed"] = "is_subscribed"
    user_address: Address
    plan_id: RecordId


class ConfigQuery(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    type: Literal["config"] = "config"


QueryMsg = Annotated[
    Union[
        OrganizationQuery,
        UserOrganizationsQuery,
        SubscriptionPlanQuery,
        OrganizationSubscriptionPlansQuery,
        SubscriptionQuery,
        UserSubscriptionsQuery,
        SubscriptionPlanSubscriptionsQuery,
        IsSubscribedQuery,
        ConfigQuery,
    ],
    Field(discriminator="type"),
]
