"""
Error taxonomy for the EduFlow API.

Services raise these; the handlers registered in ``eduflow.main`` turn them
into ``{"code", "message", "details"}`` JSON with the matching status code.
"""
from typing import Any, Dict, Optional


class EduFlowError(Exception):
    """Base class for every error surfaced to API clients."""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


# ---------------------------- 404 ----------------------------

class NotFoundError(EduFlowError):
    status_code = 404

    def __init__(self, resource_type: str, resource_id: Any):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            code=f"{resource_type.upper()}_NOT_FOUND",
            details={"resource_type": resource_type, "resource_id": str(resource_id)},
        )


# ------------------------ 400 / state ------------------------

class InvalidInputError(EduFlowError):
    status_code = 400

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="INVALID_INPUT", details=details)


class InvalidStateError(EduFlowError):
    """The request is well formed but the data is not in a state that allows it."""

    status_code = 400

    def __init__(self, message: str, code: str = "INVALID_STATE", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code=code, details=details)


class EnrollmentMissingError(InvalidStateError):
    status_code = 404

    def __init__(self, user_id: int, course_id: int):
        super().__init__(
            "User is not enrolled in this course",
            code="ENROLLMENT_NOT_FOUND",
            details={"user_id": user_id, "course_id": course_id},
        )


class ConflictError(EduFlowError):
    status_code = 409

    def __init__(self, message: str, code: str = "CONFLICT", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code=code, details=details)


# ------------------------- auth ------------------------------

class UnauthorizedError(EduFlowError):
    status_code = 401

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message, code="UNAUTHORIZED")


class ForbiddenError(EduFlowError):
    status_code = 403

    def __init__(self, message: str = "Insufficient role"):
        super().__init__(message, code="FORBIDDEN")
