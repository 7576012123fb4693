# eduflow/api/v1/router.py
from fastapi import APIRouter
from eduflow.api.v1 import auth, courses, users, certificates

api_router = APIRouter()

api_router.include_router(auth.router,         prefix="/auth",         tags=["auth"])
api_router.include_router(courses.router,      prefix="/courses",      tags=["courses"])
api_router.include_router(users.router,        prefix="/users",        tags=["users"])
api_router.include_router(certificates.router, prefix="/certificates", tags=["certificates"])
