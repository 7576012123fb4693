# eduflow/core/rbac.py
from fastapi import Depends
from eduflow.api.deps import get_current_user
from eduflow.core.errors import ForbiddenError

ROLE_STUDENT = "student"
ROLE_INSTRUCTOR = "instructor"
ROLE_ADMIN = "admin"

_HIERARCHY = [ROLE_STUDENT, ROLE_INSTRUCTOR, ROLE_ADMIN]
_RANK = {name: idx for idx, name in enumerate(_HIERARCHY)}

def require_roles(*roles: str):
    allowed = set(roles)
    def dep(user = Depends(get_current_user)):
        if user.role not in allowed:
            raise ForbiddenError(f"Not authorized as {' or '.join(sorted(allowed))}")
        return user
    return dep

def require_min_role(min_role: str):
    if min_role not in _RANK:
        raise RuntimeError(f"Unknown role: {min_role}")
    need = _RANK[min_role]
    def dep(user = Depends(get_current_user)):
        if _RANK.get(user.role, -1) >= need:
            return user
        raise ForbiddenError("Insufficient role")
    return dep
