# eduflow/services/certificates.py
from __future__ import annotations

import io
import base64
import logging
import secrets
import datetime as dt
from typing import Callable, Dict, Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from jinja2 import Environment, BaseLoader, select_autoescape
import qrcode  # type: ignore

from eduflow.core.config import settings
from eduflow.core.errors import (
    ConflictError,
    EnrollmentMissingError,
    InvalidInputError,
    InvalidStateError,
    NotFoundError,
)
from eduflow.crud import certificate as certificate_crud
from eduflow.crud.enrollment import enrollment_crud
from eduflow.models.certificate import Certificate
from eduflow.models.course import Course
from eduflow.models.user import User
from eduflow.schemas.certificate import VerificationResult

logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = "certificate not found"

# -------------------------- Utils --------------------------

def _now_tz() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)

def generate_certificate_number(prefix: Optional[str] = None) -> str:
    """PREFIX-<base32 of 128 random bits>, e.g. CERT-MZXW6YTBOI3DAMRTGQ2TMNZYHE."""
    raw = secrets.token_bytes(16)
    body = base64.b32encode(raw).decode("ascii").rstrip("=")
    return f"{prefix or settings.CERTIFICATE_PREFIX}-{body}"

def _qr_data_uri(text: str) -> str:
    img = qrcode.make(text)
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    b64 = base64.b64encode(buf.getvalue()).decode("ascii")
    return f"data:image/png;base64,{b64}"

def _render_html(template: str, ctx: Dict) -> str:
    env = Environment(
        loader=BaseLoader(),
        autoescape=select_autoescape(["html", "xml"], default_for_string=True),
    )
    return env.from_string(template).render(**ctx)

# ------------------------- Issuance --------------------------

def issue_certificate(
    db: Session,
    *,
    user_id: int,
    course_id: int,
    new_number: Callable[[], str] = generate_certificate_number,
) -> Tuple[Certificate, bool]:
    """
    Issue the certificate of ``user_id`` for ``course_id``.

    Returns ``(certificate, created)``. When the pair already has a
    certificate it is returned unchanged with ``created=False``; that also
    covers a concurrent request that won the insert race.

    Raises NotFoundError (user/course), EnrollmentMissingError, InvalidStateError
    when progress is below 100, and ConflictError when no free number was found.
    """
    user = db.get(User, user_id)
    if not user:
        raise NotFoundError("User", user_id)
    course = db.get(Course, course_id)
    if not course:
        raise NotFoundError("Course", course_id)

    existing = certificate_crud.get_for(db, user_id=user_id, course_id=course_id)
    if existing:
        logger.info("certificate replay %s for user=%s course=%s",
                    existing.certificate_number, user_id, course_id)
        return existing, False

    # progress is re-read here, never taken from the client
    enr = enrollment_crud.get_for(db, user_id=user_id, course_id=course_id)
    if not enr:
        raise EnrollmentMissingError(user_id, course_id)
    if enr.progress < 100:
        raise InvalidStateError(
            "Course is not completed yet",
            code="COURSE_INCOMPLETE",
            details={"progress": enr.progress, "required": 100},
        )

    course_name = course.title
    attempts = max(1, settings.CERTIFICATE_NUMBER_ATTEMPTS)
    for attempt in range(1, attempts + 1):
        cert = Certificate(
            certificate_number=new_number(),
            user_id=user_id,
            course_id=course_id,
            course_name=course_name,
            issued_at=_now_tz(),
        )
        db.add(cert)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            winner = certificate_crud.get_for(db, user_id=user_id, course_id=course_id)
            if winner:
                logger.info("concurrent issuance for user=%s course=%s resolved to %s",
                            user_id, course_id, winner.certificate_number)
                return winner, False
            logger.warning("certificate number collision (attempt %d/%d)", attempt, attempts)
            continue
        db.refresh(cert)
        logger.info("issued certificate %s to user=%s course=%s",
                    cert.certificate_number, user_id, course_id)
        return cert, True

    raise ConflictError(
        "Could not allocate a unique certificate number",
        code="CERTIFICATE_NUMBER_CONFLICT",
        details={"attempts": attempts},
    )

# ----------------------- Verification ------------------------

def verify_certificate(db: Session, certificate_number: Optional[str]) -> VerificationResult:
    number = (certificate_number or "").strip()
    if not number:
        raise InvalidInputError("Certificate number is required")

    cert = certificate_crud.get_by_number(db, number)
    if not cert:
        logger.info("verification miss for %r", number[:80])
        return VerificationResult(valid=False, message=NOT_FOUND_MESSAGE)

    course = cert.course
    return VerificationResult(
        valid=True,
        certificate_number=cert.certificate_number,
        holder_name=cert.user.name,
        holder_email=cert.user.email,
        course_title=course.title if course else cert.course_name,
        instructor_name=course.instructor_name if course else None,
        issue_date=cert.issued_at,
    )

# ------------------------- Document --------------------------

CERTIFICATE_TEMPLATE = """
<!doctype html>
<html>
  <head><meta charset="utf-8"><title>Certificate {{ number }}</title></head>
  <body style="font-family: Georgia, serif; padding: 48px; text-align:center;">
    <h1>Certificate of Completion</h1>
    <p>This certifies that</p>
    <h2>{{ holder }}</h2>
    <p>has successfully completed the course</p>
    <h3>{{ course_title }}</h3>
    {% if instructor %}<p>Instructor: {{ instructor }}</p>{% endif %}
    <p>Issued on {{ issued }}</p>
    <p>Certificate number: <b>{{ number }}</b></p>
    <img src="{{ qr_data_uri }}" alt="verification QR code" style="height:120px">
    <div style="font-size: 12px; margin-top:8px">Verify at: {{ verify_url }}</div>
  </body>
</html>
""".strip()

def build_certificate_html(cert: Certificate, *, verify_url: str) -> str:
    course = cert.course
    ctx = dict(
        holder=cert.user.name,
        course_title=course.title if course else cert.course_name,
        instructor=course.instructor_name if course else None,
        issued=cert.issued_at.date().isoformat(),
        number=cert.certificate_number,
        verify_url=verify_url,
        qr_data_uri=_qr_data_uri(verify_url),
    )
    return _render_html(CERTIFICATE_TEMPLATE, ctx)
