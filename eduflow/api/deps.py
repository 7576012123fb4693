import logging
from typing import Optional

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from eduflow.db.session import get_db
from eduflow.models.user import User
from eduflow.core.errors import UnauthorizedError
from eduflow.core.tokens import decode_access

logger = logging.getLogger(__name__)

__all__ = ["get_db", "get_bearer_token", "get_current_user", "get_optional_user"]

# ----------------------------------------------------------------------
# Bearer token from the Authorization header
# ----------------------------------------------------------------------
def get_bearer_token(authorization: str = Header(None, alias="Authorization")) -> str:
    if not authorization:
        raise UnauthorizedError("Authentication token is required")
    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise UnauthorizedError("Invalid token format")
    return parts[1]

# ----------------------------------------------------------------------
# Current user from the token's sub (user id)
# ----------------------------------------------------------------------
def get_current_user(
    token: str = Depends(get_bearer_token),
    db: Session = Depends(get_db),
) -> User:
    payload = decode_access(token)
    if not payload:
        logger.info("rejected bearer token")
        raise UnauthorizedError("Invalid or expired token")
    try:
        user_id = int(payload["sub"])
    except (TypeError, ValueError):
        raise UnauthorizedError("Invalid token")

    user = db.get(User, user_id)
    if not user:
        raise UnauthorizedError("User not found")
    return user

def get_optional_user(
    authorization: Optional[str] = Header(None, alias="Authorization"),
    db: Session = Depends(get_db),
) -> Optional[User]:
    """Caller for public routes: None when anonymous, 401 when a bad token is sent."""
    if not authorization:
        return None
    return get_current_user(get_bearer_token(authorization), db)
