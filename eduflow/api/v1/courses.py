# eduflow/api/v1/courses.py
from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query, Response, status
from sqlalchemy.orm import Session

from eduflow.api.deps import get_db, get_current_user, get_optional_user
from eduflow.api.v1.certificates import certificate_out
from eduflow.core.errors import EnrollmentMissingError, NotFoundError
from eduflow.core.rbac import require_roles, require_min_role, ROLE_ADMIN, ROLE_INSTRUCTOR
from eduflow.crud.course import course_crud
from eduflow.crud.enrollment import enrollment_crud
from eduflow.models.course import Course
from eduflow.models.user import User
from eduflow.schemas.course import CourseCreate, CourseOut, CourseUpdate
from eduflow.schemas.enrollment import (
    CompletionResult,
    EnrolledCourse,
    EnrollmentOut,
    ProgressUpdate,
)
from eduflow.services.certificates import issue_certificate

logger = logging.getLogger(__name__)

router = APIRouter()

def _is_staff(user: Optional[User]) -> bool:
    return bool(user) and user.role in (ROLE_INSTRUCTOR, ROLE_ADMIN)

def _get_course_or_404(db: Session, course_id: int, *, include_unpublished: bool = True) -> Course:
    course = course_crud.get(db, course_id)
    if not course or (not course.published and not include_unpublished):
        raise NotFoundError("Course", course_id)
    return course

# --------------------------- catalog ---------------------------

@router.get("", response_model=List[CourseOut])
def list_courses(
    search: Optional[str] = Query(None, max_length=200),
    category: Optional[str] = Query(None),
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db),
    user: Optional[User] = Depends(get_optional_user),
):
    """Drafts are listed for instructors and admins only."""
    return course_crud.search(
        db, search=search, category=category, skip=skip, limit=limit,
        include_unpublished=_is_staff(user),
    )

@router.get("/enrolled", response_model=List[EnrolledCourse])
def list_enrolled_courses(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    rows = enrollment_crud.list_for_user(db, user_id=user.id)
    return [EnrolledCourse.model_validate(e) for e in rows]

@router.get("/{course_id}", response_model=CourseOut)
def get_course(
    course_id: int = Path(..., ge=1),
    db: Session = Depends(get_db),
    user: Optional[User] = Depends(get_optional_user),
):
    return _get_course_or_404(db, course_id, include_unpublished=_is_staff(user))

@router.post("", response_model=CourseOut, status_code=status.HTTP_201_CREATED,
             dependencies=[Depends(require_min_role(ROLE_INSTRUCTOR))])
def create_course(body: CourseCreate, db: Session = Depends(get_db)):
    course = course_crud.create(db, body)
    logger.info("created course id=%s", course.id)
    return course

@router.put("/{course_id}", response_model=CourseOut,
            dependencies=[Depends(require_min_role(ROLE_INSTRUCTOR))])
def update_course(
    body: CourseUpdate,
    course_id: int = Path(..., ge=1),
    db: Session = Depends(get_db),
):
    course = _get_course_or_404(db, course_id)
    return course_crud.update(db, course, body)

@router.delete("/{course_id}", status_code=status.HTTP_204_NO_CONTENT,
               dependencies=[Depends(require_roles(ROLE_ADMIN))])
def delete_course(course_id: int = Path(..., ge=1), db: Session = Depends(get_db)):
    if not course_crud.remove(db, course_id):
        raise NotFoundError("Course", course_id)
    logger.info("deleted course id=%s", course_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

# -------------------------- enrollment -------------------------

@router.post("/{course_id}/enroll", response_model=EnrollmentOut, status_code=status.HTTP_201_CREATED)
def enroll(
    response: Response,
    course_id: int = Path(..., ge=1),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    _get_course_or_404(db, course_id, include_unpublished=False)
    enr, created = enrollment_crud.enroll(db, user_id=user.id, course_id=course_id)
    if not created:
        response.status_code = status.HTTP_200_OK
    return enr

@router.put("/{course_id}/progress", response_model=EnrollmentOut)
def update_progress(
    body: ProgressUpdate,
    course_id: int = Path(..., ge=1),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    enr = enrollment_crud.get_for(db, user_id=user.id, course_id=course_id)
    if not enr:
        raise EnrollmentMissingError(user.id, course_id)
    return enrollment_crud.update_progress(
        db, enr,
        progress=body.progress,
        completed_lessons=body.completed_lessons,
        completed_modules=body.completed_modules,
    )

@router.post("/{course_id}/complete", response_model=CompletionResult)
def complete_course(
    course_id: int = Path(..., ge=1),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Marks the course finished and issues (or returns) the certificate."""
    _get_course_or_404(db, course_id)
    enr = enrollment_crud.get_for(db, user_id=user.id, course_id=course_id)
    if not enr:
        raise EnrollmentMissingError(user.id, course_id)
    enr = enrollment_crud.update_progress(db, enr, progress=100)

    cert, _ = issue_certificate(db, user_id=user.id, course_id=course_id)
    return CompletionResult(
        message="Course marked as completed",
        enrollment=EnrollmentOut.model_validate(enr),
        certificate=certificate_out(cert),
    )
