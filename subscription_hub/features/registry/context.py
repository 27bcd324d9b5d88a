"""
subscription_hub/features/registry/context.py
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class RequestScope:
    """Everything one request may touch: its transaction, caller and clock snapshot."""

    txn: object
    caller: Optional[str]
    now: datetime
