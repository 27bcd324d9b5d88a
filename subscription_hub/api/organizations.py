"""
subscription_hub/api/organizations.py
Organization API: create organizations, look them up by id or owner.
"""

from fastapi import APIRouter, Depends, Path

from subscription_hub.core.auth import require_caller
from subscription_hub.features.registry.hub import SubscriptionHub, get_hub
from subscription_hub.models.messages import (
    U32_MAX,
    CreateOrganization,
    OrganizationQuery,
    OrganizationSubscriptionPlansQuery,
    UserOrganizationsQuery,
)

router = APIRouter(prefix="/v1", tags=["organizations"])


@router.post("/organizations", status_code=201)
def create_organization_endpoint(
    request: CreateOrganization,
    caller: str = Depends(require_caller),
    hub: SubscriptionHub = Depends(get_hub),
):
    """Create an organization owned by the caller."""
    result = hub.execute(caller, request)
    return {"data": result}


@router.get("/organizations/{organization_id}")
def get_organization_endpoint(
    organization_id: int = Path(ge=0, le=U32_MAX),
    hub: SubscriptionHub = Depends(get_hub),
):
    return {"data": hub.query(OrganizationQuery(organization_id=organization_id))}


@router.get("/organizations/{organization_id}/plans")
def list_organization_plans_endpoint(
    organization_id: int = Path(ge=0, le=U32_MAX),
    hub: SubscriptionHub = Depends(get_hub),
):
    plans = hub.query(OrganizationSubscriptionPlansQuery(organization_id=organization_id))
    return {"data": plans, "count": len(plans)}


@router.get("/users/{user_address}/organizations")
def list_user_organizations_endpoint(
    user_address: str,
    hub: SubscriptionHub = Depends(get_hub),
):
    organizations = hub.query(UserOrganizationsQuery(user_address=user_address))
    return {"data": organizations, "count": len(organizations)}
