from datetime import datetime, timezone
from typing import Iterable, List, Optional
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from eduflow.crud.base import CRUDBase
from eduflow.models.enrollment import Enrollment
from eduflow.schemas.enrollment import ProgressUpdate

def _merge(existing: Iterable[str], new: Iterable[str]) -> List[str]:
    out = list(existing or [])
    for item in new:
        if item not in out:
            out.append(item)
    return out

class CRUDEnrollment(CRUDBase[Enrollment, ProgressUpdate, ProgressUpdate]):
    def get_for(self, db: Session, *, user_id: int, course_id: int) -> Optional[Enrollment]:
        return db.execute(
            select(Enrollment).where(Enrollment.user_id == user_id, Enrollment.course_id == course_id)
        ).scalar_one_or_none()

    def list_for_user(self, db: Session, *, user_id: int) -> List[Enrollment]:
        stmt = select(Enrollment).where(Enrollment.user_id == user_id).order_by(Enrollment.enrollment_date.desc())
        return list(db.execute(stmt).scalars().all())

    def enroll(self, db: Session, *, user_id: int, course_id: int) -> tuple[Enrollment, bool]:
        """Returns (enrollment, created). Enrolling twice yields the existing row."""
        existing = self.get_for(db, user_id=user_id, course_id=course_id)
        if existing:
            return existing, False
        enr = Enrollment(user_id=user_id, course_id=course_id, progress=0)
        db.add(enr)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            return self.get_for(db, user_id=user_id, course_id=course_id), False
        db.refresh(enr)
        return enr, True

    def update_progress(
        self,
        db: Session,
        enr: Enrollment,
        *,
        progress: int,
        completed_lessons: Optional[Iterable[str]] = None,
        completed_modules: Optional[Iterable[str]] = None,
    ) -> Enrollment:
        enr.progress = max(0, min(100, int(progress)))
        enr.last_accessed = datetime.now(timezone.utc)
        if completed_lessons:
            enr.completed_lessons = _merge(enr.completed_lessons, completed_lessons)
        if completed_modules:
            enr.completed_modules = _merge(enr.completed_modules, completed_modules)
        db.add(enr); db.commit(); db.refresh(enr)
        return enr

enrollment_crud = CRUDEnrollment(Enrollment)
