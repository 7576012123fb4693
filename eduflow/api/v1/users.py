# eduflow/api/v1/users.py
from __future__ import annotations
import logging
from typing import List

from fastapi import APIRouter, Depends, Path, Query, Response, status
from sqlalchemy.orm import Session

from eduflow.api.deps import get_db, get_current_user
from eduflow.api.v1.certificates import certificate_out
from eduflow.core.errors import InvalidStateError, NotFoundError
from eduflow.core.rbac import require_roles, ROLE_ADMIN
from eduflow.crud.enrollment import enrollment_crud
from eduflow.crud.user import user_crud
from eduflow.models.user import User
from eduflow.schemas.enrollment import EnrollmentOut
from eduflow.schemas.user import ProfileUpdate, UserDetail, UserOut

logger = logging.getLogger(__name__)

router = APIRouter()

def user_detail(db: Session, user: User) -> UserDetail:
    """User with enrollments and certificates, as shown by /auth/me and the admin profile."""
    return UserDetail(
        **UserOut.model_validate(user).model_dump(),
        enrolled_courses=[EnrollmentOut.model_validate(e)
                          for e in enrollment_crud.list_for_user(db, user_id=user.id)],
        certificates=[certificate_out(c) for c in user.certificates],
    )

@router.get("/profile", response_model=UserOut)
def get_profile(user: User = Depends(get_current_user)):
    return user

@router.put("/profile", response_model=UserOut)
def update_profile(
    body: ProfileUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return user_crud.update(db, user, body)

# ---------------------------- admin ----------------------------

@router.get("", response_model=List[UserOut], dependencies=[Depends(require_roles(ROLE_ADMIN))])
def list_users(
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=200),
    db: Session = Depends(get_db),
):
    return user_crud.get_multi(db, skip=skip, limit=limit)

@router.get("/{user_id}", response_model=UserDetail, dependencies=[Depends(require_roles(ROLE_ADMIN))])
def get_user(user_id: int = Path(..., ge=1), db: Session = Depends(get_db)):
    user = user_crud.get(db, user_id)
    if not user:
        raise NotFoundError("User", user_id)
    return user_detail(db, user)

@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: int = Path(..., ge=1),
    db: Session = Depends(get_db),
    admin: User = Depends(require_roles(ROLE_ADMIN)),
):
    """Removes the user together with their enrollments and certificates."""
    if user_id == admin.id:
        raise InvalidStateError("Admins cannot delete their own account", code="SELF_DELETE")
    if not user_crud.remove(db, user_id):
        raise NotFoundError("User", user_id)
    logger.info("admin id=%s deleted user id=%s", admin.id, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
