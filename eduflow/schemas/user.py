# eduflow/schemas/user.py
from __future__ import annotations
from typing import List, Literal, Optional
from pydantic import EmailStr, Field
from eduflow.schemas.common import CamelModel
from eduflow.schemas.enrollment import EnrollmentOut
from eduflow.schemas.certificate import Certificate as CertificateOut

RoleName = Literal["student", "instructor", "admin"]

class UserCreate(CamelModel):
    name: str = Field(min_length=1, max_length=120)
    email: EmailStr
    password: str = Field(min_length=6, max_length=128)

class LoginRequest(CamelModel):
    email: EmailStr
    password: str
    remember_me: bool = False

class ProfileUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=120)
    bio: Optional[str] = None
    location: Optional[str] = None
    photo_url: Optional[str] = None

class UserOut(CamelModel):
    id: int
    name: str
    email: str
    role: RoleName
    photo_url: str = ""
    bio: str = ""
    location: str = ""

class UserDetail(UserOut):
    enrolled_courses: List[EnrollmentOut] = []
    certificates: List[CertificateOut] = []

class AuthResponse(CamelModel):
    success: bool = True
    message: str
    token: str
    expires_in: str
    user: UserOut
