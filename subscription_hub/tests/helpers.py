"""Shared builders for registry tests."""

from datetime import datetime, timezone

from subscription_hub.models.messages import (
    CancelPlan,
    CreateOrganization,
    CreateSubscriptionPlan,
    SubscribePlan,
)
from subscription_hub.models.plan import DurationUnit

ADMIN = "admin"
ORGANIZATION = "organization"
ORGANIZATION2 = "organization2"
USER = "user"
USER2 = "user2"
USER3 = "user3"

START = datetime(2025, 1, 1, tzinfo=timezone.utc)
MONTH_SECONDS = 2_592_000


def create_organization(hub, owner: str = ORGANIZATION, name: str = "Acme") -> int:
    result = hub.execute(
        owner,
        CreateOrganization(
            name=name,
            description=f"{name} organization",
            website="https://example.com",
            metadata={"tier": "gold", "region": "eu"},
        ),
    )
    return int(result.attributes["organization_id"])


def create_plan(
    hub,
    owner: str = ORGANIZATION,
    organization_id: int = 1,
    cancelable: bool = True,
    duration: int = 1,
    duration_unit: DurationUnit = DurationUnit.MONTH,
    price: int = 1000,
) -> int:
    result = hub.execute(
        owner,
        CreateSubscriptionPlan(
            organization_id=organization_id,
            name="Pro",
            description="Pro plan",
            price=price,
            duration=duration,
            duration_unit=duration_unit,
            features=["feature1", "feature2"],
            metadata=None,
            cancelable=cancelable,
            refundable=False,
        ),
    )
    return int(result.attributes["plan_id"])


def subscribe(hub, user: str, plan_id: int) -> int:
    result = hub.execute(user, SubscribePlan(plan_id=plan_id))
    return int(result.attributes["subscription_id"])


def cancel(hub, user: str, subscription_id: int):
    return hub.execute(user, CancelPlan(subscription_id=subscription_id))
