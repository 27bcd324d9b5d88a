"""
subscription_hub/features/registry/hub.py

Request entry point for the registry.

One lock serializes all requests. Each request gets one store transaction
and one clock snapshot; a command either commits every write it staged or,
on any error, none of them.
"""

import threading
from typing import Any, Optional

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from subscription_hub.core.clock import SystemClock
from subscription_hub.core.config import settings
from subscription_hub.core.errors import AppError, UnauthorizedError, ValidationError
from subscription_hub.core.logging import log_event
from subscription_hub.features.registry import dispatch
from subscription_hub.features.registry.context import RequestScope
from subscription_hub.features.registry.lifecycle import initialize_registry
from subscription_hub.features.storage.store import get_store
from subscription_hub.models.messages import ExecuteMsg, ExecuteResult, QueryMsg

COMMITTED_EVENTS = {
    "create_organization": "registry.organization.created",
    "create_subscription_plan": "registry.plan.created",
    "subscribe_plan": "registry.subscription.created",
    "cancel_plan": "registry.subscription.canceled",
}

_execute_adapter = TypeAdapter(ExecuteMsg)
_query_adapter = TypeAdapter(QueryMsg)


def parse_execute_msg(payload: Any):
    try:
        return _execute_adapter.validate_python(payload)
    except PydanticValidationError as e:
        raise ValidationError(f"invalid command: {e.errors()[0]['msg']}") from e


def parse_query_msg(payload: Any):
    try:
        return _query_adapter.validate_python(payload)
    except PydanticValidationError as e:
        raise ValidationError(f"invalid query: {e.errors()[0]['msg']}") from e


class SubscriptionHub:
    """
    Serialized access to the registry.

    Args:
        store: MemoryStore or SqlStore (defaults to the configured store)
        clock: anything with ``now()`` returning an aware UTC datetime
        admin: address recorded as registry admin on first open
    """

    def __init__(self, store=None, clock=None, admin: Optional[str] = None):
        self.store = store if store is not None else get_store()
        self.clock = clock or SystemClock()
        self._lock = threading.Lock()
        self._initialize(admin if admin is not None else settings.REGISTRY_ADMIN)

    def _initialize(self, admin: Optional[str]) -> None:
        with self._lock:
            with self.store.transaction() as txn:
                created = initialize_registry(txn, admin)
        if created:
            log_event("info", "registry.initialized", caller=admin, event_type="initialize")

    def execute(self, caller: Optional[str], msg) -> ExecuteResult:
        """Run one command as ``caller``. Raises AppError subclasses on rejection."""
        if isinstance(msg, dict):
            msg = parse_execute_msg(msg)
        if not caller:
            raise UnauthorizedError("Caller identity required")

        with self._lock:
            now = self.clock.now()
            try:
                with self.store.transaction() as txn:
                    result = dispatch.execute(RequestScope(txn=txn, caller=caller, now=now), msg)
            except AppError as e:
                log_event(
                    "warning",
                    "registry.command.rejected",
                    caller=caller,
                    event_type=msg.type,
                    error_code=e.code,
                    extra={"reason": e.message},
                )
                raise

        log_event(
            "info",
            COMMITTED_EVENTS.get(result.action, "registry.command.committed"),
            caller=caller,
            event_type=result.action,
            extra=dict(result.attributes),
        )
        return result

    def query(self, msg) -> Any:
        """Run one read-only query against a consistent view."""
        if isinstance(msg, dict):
            msg = parse_query_msg(msg)

        with self._lock:
            now = self.clock.now()
            with self.store.transaction() as txn:
                return dispatch.query(RequestScope(txn=txn, caller=None, now=now), msg)


# Global hub instance (lazy initialization)
_hub_instance: Optional[SubscriptionHub] = None
_hub_lock = threading.Lock()


def get_hub() -> SubscriptionHub:
    """FastAPI dependency returning the process-wide hub."""
    global _hub_instance
    with _hub_lock:
        if _hub_instance is None:
            _hub_instance = SubscriptionHub()
        return _hub_instance


def reset_hub() -> None:
    """FOR TESTING ONLY."""
    global _hub_instance
    with _hub_lock:
        _hub_instance = None
