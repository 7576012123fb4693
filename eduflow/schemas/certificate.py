from datetime import datetime
from typing import List, Optional
from pydantic import Field
from eduflow.schemas.common import CamelModel

class CertificateIssue(CamelModel):
    course_id: int = Field(ge=1)

class Certificate(CamelModel):
    id: int
    certificate_number: str
    user_id: int
    course_id: Optional[int] = None
    course_name: str
    issue_date: datetime

class CertificateList(CamelModel):
    certificates: List[Certificate]

class CertificateHolder(CamelModel):
    id: int
    name: str
    email: str

class AdminCertificate(Certificate):
    user: CertificateHolder
    course_title: str

class CertificatePage(CamelModel):
    certificates: List[AdminCertificate]
    total_count: int
    total_pages: int
    page: int
    limit: int

class VerificationResult(CamelModel):
    valid: bool
    certificate_number: Optional[str] = None
    holder_name: Optional[str] = None
    holder_email: Optional[str] = None
    course_title: Optional[str] = None
    instructor_name: Optional[str] = None
    issue_date: Optional[datetime] = None
    message: Optional[str] = None

