"""
Caller identity for the registry API.

Authentication happens upstream; the gateway forwards the authenticated
address in the X-User-Id header. Address format is not validated here.
"""
from typing import Optional

from fastapi import Header, HTTPException


def get_caller(x_user_id: Optional[str] = Header(None, alias="X-User-Id")) -> Optional[str]:
    """Authenticated address if present (reads do not need one)."""
    caller = (x_user_id or "").strip()
    return caller or None


def require_caller(x_user_id: Optional[str] = Header(None, alias="X-User-Id")) -> str:
    """Authenticated address; 401 when missing."""
    caller = get_caller(x_user_id)
    if not caller:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return caller
