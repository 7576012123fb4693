from sqlalchemy import select
from sqlalchemy.orm import Session
from eduflow.crud.base import CRUDBase
from eduflow.models.user import User, UserRole
from eduflow.schemas.user import UserCreate, ProfileUpdate
from eduflow.core.security_password import hash_password

def normalize_email(email: str) -> str:
    return (email or "").strip().lower()

class CRUDUser(CRUDBase[User, UserCreate, ProfileUpdate]):
    def create(self, db: Session, obj_in: UserCreate, extra=None) -> User:
        user = User(
            name=obj_in.name.strip(),
            email=normalize_email(obj_in.email),
            hashed_password=hash_password(obj_in.password),
            role=UserRole.student.value,
        )
        if extra:
            for k, v in extra.items(): setattr(user, k, v)
        db.add(user); db.commit(); db.refresh(user)
        return user

    def get_by_email(self, db: Session, email: str) -> User | None:
        return db.execute(select(User).where(User.email == normalize_email(email))).scalar_one_or_none()

user_crud = CRUDUser(User)
