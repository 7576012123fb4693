# eduflow/api/v1/certificates.py
from __future__ import annotations

import math
from typing import Optional
from urllib.parse import quote

from fastapi import APIRouter, Depends, Path, Query, Request, Response, status
from fastapi.responses import HTMLResponse, JSONResponse
from sqlalchemy.orm import Session

from eduflow.api.deps import get_db, get_current_user
from eduflow.core.config import settings
from eduflow.core.errors import NotFoundError
from eduflow.core.rbac import require_roles, ROLE_ADMIN
from eduflow.crud import certificate as certificate_crud
from eduflow.models.certificate import Certificate
from eduflow.models.user import User
from eduflow.schemas.certificate import (
    AdminCertificate,
    Certificate as CertificateOut,
    CertificateHolder,
    CertificateIssue,
    CertificateList,
    CertificatePage,
    VerificationResult,
)
from eduflow.services.certificates import (
    build_certificate_html,
    issue_certificate,
    verify_certificate,
)

router = APIRouter()

def certificate_out(c: Certificate) -> CertificateOut:
    return CertificateOut(
        id=c.id,
        certificate_number=c.certificate_number,
        user_id=c.user_id,
        course_id=c.course_id,
        course_name=c.course_name,
        issue_date=c.issued_at,
    )

def _admin_out(c: Certificate) -> AdminCertificate:
    return AdminCertificate(
        **certificate_out(c).model_dump(),
        user=CertificateHolder(id=c.user.id, name=c.user.name, email=c.user.email),
        course_title=c.course.title if c.course else c.course_name,
    )

def _verify_url(request: Request, number: str) -> str:
    # PUBLIC_BASE_URL points at the frontend; otherwise use the request host
    base = settings.PUBLIC_BASE_URL or str(request.base_url).rstrip("/")
    return f"{base.rstrip('/')}/verify-certificate?id={quote(number, safe='')}"

# -------------------------- issuance --------------------------

@router.post("", response_model=CertificateOut, status_code=status.HTTP_201_CREATED)
def issue_for_current_user(
    body: CertificateIssue,
    response: Response,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """201 for a new certificate, 409 with the existing one when already issued."""
    cert, created = issue_certificate(db, user_id=user.id, course_id=body.course_id)
    if not created:
        response.status_code = status.HTTP_409_CONFLICT
    return certificate_out(cert)

# ----------------------- own certificates ---------------------

@router.get("", response_model=CertificateList)
def list_my_certificates(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    rows = certificate_crud.list_for_user(db, user_id=user.id)
    return CertificateList(certificates=[certificate_out(c) for c in rows])

# ------------------------ public verify -----------------------

def _verification_response(result: VerificationResult) -> JSONResponse:
    # valid results keep null keys (instructorName); misses are {valid, message}
    payload = result.model_dump(mode="json", by_alias=True, exclude_none=not result.valid)
    return JSONResponse(content=payload)

@router.get("/verify", response_model=VerificationResult)
def verify_by_query(
    certificate_number: Optional[str] = Query(None, alias="certificateNumber"),
    db: Session = Depends(get_db),
):
    return _verification_response(verify_certificate(db, certificate_number))

@router.get("/verify/{certificate_number:path}", response_model=VerificationResult)
def verify_public(
    certificate_number: str = Path(...),
    db: Session = Depends(get_db),
):
    """Unknown numbers are a normal negative result (200, valid=false)."""
    return _verification_response(verify_certificate(db, certificate_number))

# ---------------------------- admin ---------------------------

@router.get("/admin/all", response_model=CertificatePage,
            dependencies=[Depends(require_roles(ROLE_ADMIN))])
def list_all_certificates(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    search: Optional[str] = Query(None, max_length=200),
    db: Session = Depends(get_db),
):
    rows, total = certificate_crud.search_page(db, page=page, limit=limit, search=search)
    return CertificatePage(
        certificates=[_admin_out(c) for c in rows],
        total_count=total,
        total_pages=max(1, math.ceil(total / limit)),
        page=page,
        limit=limit,
    )

# --------------------------- document -------------------------

@router.get("/{certificate_number}/view", response_class=HTMLResponse)
def view_certificate(
    request: Request,
    certificate_number: str = Path(..., min_length=1),
    db: Session = Depends(get_db),
):
    cert = certificate_crud.get_by_number(db, certificate_number.strip())
    if not cert:
        raise NotFoundError("Certificate", certificate_number)
    html = build_certificate_html(cert, verify_url=_verify_url(request, cert.certificate_number))
    return HTMLResponse(content=html)
