from typing import List, Optional
from sqlalchemy import or_, select, update
from sqlalchemy.orm import Session
from eduflow.crud.base import CRUDBase
from eduflow.models.course import Course
from eduflow.models.certificate import Certificate
from eduflow.schemas.course import CourseCreate, CourseUpdate

class CRUDCourse(CRUDBase[Course, CourseCreate, CourseUpdate]):
    def search(
        self,
        db: Session,
        *,
        search: Optional[str] = None,
        category: Optional[str] = None,
        include_unpublished: bool = False,
        skip: int = 0,
        limit: int = 20,
    ) -> List[Course]:
        stmt = select(Course)
        if not include_unpublished:
            stmt = stmt.where(Course.published.is_(True))
        if category:
            stmt = stmt.where(Course.category == category)
        if search:
            like = f"%{search.strip()}%"
            stmt = stmt.where(or_(Course.title.ilike(like), Course.description.ilike(like)))
        stmt = stmt.order_by(Course.created_at.desc(), Course.id.desc()).offset(skip).limit(limit)
        return list(db.execute(stmt).scalars().all())

    def remove(self, db: Session, id: int) -> Optional[Course]:
        course = self.get(db, id)
        if not course:
            return None
        # certificates outlive the course and fall back to course_name
        db.execute(update(Certificate).where(Certificate.course_id == id).values(course_id=None))
        db.delete(course)
        db.commit()
        return course

course_crud = CRUDCourse(Course)
