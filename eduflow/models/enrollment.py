from datetime import datetime, timezone
from typing import Any, List
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import CheckConstraint, ForeignKey, Integer, JSON, UniqueConstraint, DateTime
from eduflow.db.base import Base

def _utcnow() -> datetime:
    return datetime.now(timezone.utc)

class Enrollment(Base):
    __tablename__ = "enrollments"
    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    course_id: Mapped[int] = mapped_column(ForeignKey("courses.id", ondelete="CASCADE"), index=True)
    progress: Mapped[int] = mapped_column(Integer, default=0)
    enrollment_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)
    last_accessed: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)
    completed_lessons: Mapped[List[str]] = mapped_column(JSON, default=list)
    completed_modules: Mapped[List[str]] = mapped_column(JSON, default=list)
    quiz_results: Mapped[List[Any]] = mapped_column(JSON, default=list)

    user = relationship("User", back_populates="enrollments")
    course = relationship("Course", back_populates="enrollments")

    __table_args__ = (
        UniqueConstraint("user_id", "course_id", name="uq_enrollment_user_course"),
        CheckConstraint("progress >= 0 AND progress <= 100", name="progress_range"),
    )
