"""
subscription_hub/features/registry/state.py

Persisted layout of the registry: counters, primary records and indexes.
"""

from typing import List

from subscription_hub.features.storage.collections import Item, Map
from subscription_hub.features.storage.keys import ADDRESS, PairKey, U32, U64
from subscription_hub.models.organization import Organization
from subscription_hub.models.plan import SubscriptionPlan
from subscription_hub.models.registry import RegistryConfig, RegistryInfo
from subscription_hub.models.subscription import Subscription

CONFIG = Item("config", RegistryConfig)
REGISTRY_INFO = Item("registry_info", RegistryInfo)

# Organizations
ORGANIZATION_ID_COUNTER = Item("organization_id_counter", int)
ORGANIZATIONS = Map("organizations", U32, Organization, kind="organization")
OWNER_ORGANIZATIONS = Map("owner_organizations", ADDRESS, List[int], kind="owner organizations")

# Plans
PLAN_ID_COUNTER = Item("plan_id_counter", int)
PLANS = Map("plans", U64, SubscriptionPlan, kind="subscription_plan")
ORGANIZATION_PLANS = Map("organization_plans", U32, List[int], kind="organization plans")

# Subscriptions
SUBSCRIPTION_ID_COUNTER = Item("subscription_id_counter", int)
SUBSCRIPTIONS = Map("subscriptions", U64, Subscription, kind="subscription")
USER_PLAN_SUBSCRIPTION = Map("user_plan_subscription", PairKey(ADDRESS, U64), int)
PLAN_SUBSCRIBERS = Map("plan_subscribers", PairKey(U64, ADDRESS), int)
