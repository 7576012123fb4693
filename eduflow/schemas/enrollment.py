from datetime import datetime
from typing import Any, List, Optional
from pydantic import Field
from eduflow.schemas.common import CamelModel
from eduflow.schemas.course import CourseOut
from eduflow.schemas.certificate import Certificate as CertificateOut

class EnrollmentOut(CamelModel):
    id: int
    course_id: int
    progress: int
    enrollment_date: datetime
    last_accessed: datetime
    completed_lessons: List[str] = []
    completed_modules: List[str] = []
    quiz_results: List[Any] = []

class ProgressUpdate(CamelModel):
    progress: int = Field(ge=0, le=100)
    completed_lessons: Optional[List[str]] = None
    completed_modules: Optional[List[str]] = None

class EnrolledCourse(EnrollmentOut):
    course: CourseOut

class CompletionResult(CamelModel):
    success: bool = True
    message: str
    enrollment: EnrollmentOut
    certificate: CertificateOut
