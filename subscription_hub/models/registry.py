"""
subscription_hub/models/registry.py

Registry-wide records written once at initialization.
"""

from typing import Optional
from pydantic import BaseModel, ConfigDict

REGISTRY_NAME = "subscription-hub"
REGISTRY_VERSION = "0.1.0"


class RegistryConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    admin: Optional[str] = None


class RegistryInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = REGISTRY_NAME
    version: str = REGISTRY_VERSION
