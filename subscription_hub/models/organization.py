"""
subscription_hub/models/organization.py

Organization records: created once by their owner, never updated.
"""

from typing import Dict, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


def sort_metadata(value: Optional[Dict[str, str]]) -> Optional[Dict[str, str]]:
    """Metadata is an ordered map; keep keys in ascending order."""
    if value is None:
        return None
    return {key: value[key] for key in sorted(value)}


class Organization(BaseModel):
    """An entity owned by one address that publishes subscription plans."""
    model_config = ConfigDict(frozen=True)

    owner: str = Field(min_length=1)
    name: str
    description: str
    website: Optional[str] = None
    metadata: Optional[Dict[str, str]] = None

    @field_validator("metadata")
    @classmethod
    def normalize_metadata(cls, value):
        return sort_metadata(value)


class OrganizationResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    data: Organization
