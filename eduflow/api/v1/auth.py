# eduflow/api/v1/auth.py
from __future__ import annotations
import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from eduflow.api.deps import get_db, get_current_user
from eduflow.api.v1.users import user_detail
from eduflow.core.config import settings
from eduflow.core.errors import ConflictError, UnauthorizedError
from eduflow.core.security_password import verify_and_maybe_upgrade
from eduflow.core.tokens import create_access_token, expires_in_label
from eduflow.crud.user import user_crud
from eduflow.models.user import User
from eduflow.schemas.user import AuthResponse, LoginRequest, UserCreate, UserDetail, UserOut

logger = logging.getLogger(__name__)

router = APIRouter()

def _auth_response(user: User, *, message: str, days: int) -> AuthResponse:
    return AuthResponse(
        message=message,
        token=create_access_token(sub=str(user.id), role=user.role, expires_days=days),
        expires_in=expires_in_label(days),
        user=UserOut.model_validate(user),
    )

@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(body: UserCreate, db: Session = Depends(get_db)):
    if user_crud.get_by_email(db, body.email):
        raise ConflictError("User already exists", code="EMAIL_TAKEN")
    user = user_crud.create(db, body)
    logger.info("registered user id=%s", user.id)
    return _auth_response(user, message="User registered successfully",
                          days=settings.REGISTER_TOKEN_EXPIRE_DAYS)

@router.post("/login", response_model=AuthResponse)
def login(body: LoginRequest, db: Session = Depends(get_db)):
    user = user_crud.get_by_email(db, body.email)
    if not user:
        logger.info("login failed: unknown email")
        raise UnauthorizedError("Invalid credentials")

    ok, new_hash = verify_and_maybe_upgrade(body.password, user.hashed_password)
    if not ok:
        logger.info("login failed for user id=%s", user.id)
        raise UnauthorizedError("Invalid credentials")
    if new_hash:
        user.hashed_password = new_hash
        db.add(user); db.commit(); db.refresh(user)

    days = settings.REMEMBER_ME_EXPIRE_DAYS if body.remember_me else settings.ACCESS_TOKEN_EXPIRE_DAYS
    return _auth_response(user, message="Login successful", days=days)

@router.get("/me", response_model=UserDetail)
def me(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return user_detail(db, user)
