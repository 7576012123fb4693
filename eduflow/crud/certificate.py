from typing import List, Optional, Tuple
from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session, joinedload
from eduflow.models.certificate import Certificate
from eduflow.models.user import User

def get_by_number(db: Session, certificate_number: str) -> Optional[Certificate]:
    return db.execute(
        select(Certificate)
        .options(joinedload(Certificate.user), joinedload(Certificate.course))
        .where(Certificate.certificate_number == certificate_number)
    ).scalar_one_or_none()

def get_for(db: Session, *, user_id: int, course_id: int) -> Optional[Certificate]:
    return db.execute(
        select(Certificate).where(Certificate.user_id == user_id, Certificate.course_id == course_id)
    ).scalar_one_or_none()

def list_for_user(db: Session, *, user_id: int) -> List[Certificate]:
    stmt = select(Certificate).where(Certificate.user_id == user_id).order_by(Certificate.issued_at.desc())
    return list(db.execute(stmt).scalars().all())

def search_page(
    db: Session, *, page: int = 1, limit: int = 10, search: Optional[str] = None
) -> Tuple[List[Certificate], int]:
    """Certificates across all users, newest first, with the total match count."""
    stmt = select(Certificate).join(User, User.id == Certificate.user_id)
    if search and search.strip():
        like = f"%{search.strip()}%"
        stmt = stmt.where(or_(
            Certificate.certificate_number.ilike(like),
            Certificate.course_name.ilike(like),
            User.name.ilike(like),
            User.email.ilike(like),
        ))
    total = db.scalar(select(func.count()).select_from(stmt.subquery())) or 0
    rows = db.execute(
        stmt.options(joinedload(Certificate.user), joinedload(Certificate.course))
        .order_by(Certificate.issued_at.desc(), Certificate.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    ).scalars().all()
    return list(rows), int(total)
