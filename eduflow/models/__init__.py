# eduflow/models/__init__.py
# Every model is imported here so Base.metadata and the string relationships
# resolve no matter which model module is imported first.
from eduflow.models.user import User, UserRole  # noqa: F401
from eduflow.models.course import Course  # noqa: F401
from eduflow.models.enrollment import Enrollment  # noqa: F401
from eduflow.models.certificate import Certificate  # noqa: F401

__all__ = ["User", "UserRole", "Course", "Enrollment", "Certificate"]
