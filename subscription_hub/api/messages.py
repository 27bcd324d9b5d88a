"""
subscription_hub/api/messages.py

Raw message endpoints: POST a tagged command or query envelope, e.g.
{"type": "subscribe_plan", "plan_id": 1}.
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends

from subscription_hub.core.auth import get_caller
from subscription_hub.features.registry.hub import SubscriptionHub, get_hub
from subscription_hub.models.messages import ConfigQuery

router = APIRouter(prefix="/v1", tags=["messages"])


@router.post("/execute")
def execute_endpoint(
    payload: Dict[str, Any] = Body(...),
    caller: Optional[str] = Depends(get_caller),
    hub: SubscriptionHub = Depends(get_hub),
):
    """Run any command. Payload is validated before the caller check."""
    return {"data": hub.execute(caller, payload)}


@router.post("/query")
def query_endpoint(
    payload: Dict[str, Any] = Body(...),
    hub: SubscriptionHub = Depends(get_hub),
):
    return {"data": hub.query(payload)}


@router.get("/config")
def config_endpoint(hub: SubscriptionHub = Depends(get_hub)):
    return {"data": hub.query(ConfigQuery())}
