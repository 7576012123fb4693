# eduflow/core/tokens.py
from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import jwt, JWTError
from eduflow.core.config import settings

def _now() -> datetime:
    return datetime.now(timezone.utc)

def expires_in_label(days: int) -> str:
    """Lifetime in the short form clients already understand ("1d", "30d")."""
    return f"{days}d"

def create_access_token(*, sub: str, role: str, expires_days: Optional[int] = None) -> str:
    days = expires_days if expires_days is not None else settings.ACCESS_TOKEN_EXPIRE_DAYS
    payload: Dict[str, Any] = {
        "type": "access",
        "sub": sub,
        "role": role,
        "jti": uuid.uuid4().hex,
        "iat": int(_now().timestamp()),
        "exp": int((_now() + timedelta(days=days)).timestamp()),
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)

def decode_access(token: str) -> Optional[Dict[str, Any]]:
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None
    if not isinstance(payload, dict):
        return None
    if payload.get("type") != "access":
        return None
    if not payload.get("sub"):
        return None
    return payload
