import logging
import time

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_fastapi_instrumentator import Instrumentator
from sqlalchemy.exc import IntegrityError
from starlette.requests import Request

import eduflow.models  # noqa: F401  registers every table on Base.metadata
from eduflow.api.v1.router import api_router
from eduflow.core.config import settings
from eduflow.core.errors import EduFlowError
from eduflow.core.logging import setup_logging, request_id_var, generate_request_id
from eduflow.db.bootstrap import run_migrations_and_seed

setup_logging()
logger = logging.getLogger("eduflow")

api = FastAPI(
    title="EduFlow API",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    swagger_ui_parameters={"displayRequestDuration": True, "persistAuthorization": True},
)

api.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@api.middleware("http")
async def request_context(request: Request, call_next):
    rid = request.headers.get("X-Request-ID") or generate_request_id()
    token = request_id_var.set(rid)
    started = time.perf_counter()
    try:
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info("%s %s -> %s (%.1fms)", request.method, request.url.path,
                    response.status_code, elapsed_ms)
        response.headers["X-Request-ID"] = rid
        return response
    finally:
        request_id_var.reset(token)

# /metrics (Prometheus)
Instrumentator().instrument(api).expose(api, include_in_schema=False, should_gzip=True)

api.include_router(api_router, prefix="/api/v1")

@api.get("/", tags=["health"])
def root():
    return {"message": "Welcome to EduFlow API"}

@api.get("/healthz", tags=["health"])
def healthz():
    return {"status": "ok"}

@api.on_event("startup")
def startup():
    if settings.RUN_MIGRATIONS_ON_STARTUP:
        run_migrations_and_seed()

# ------------------------- error handlers -------------------------

@api.exception_handler(EduFlowError)
def handle_eduflow_error(request: Request, exc: EduFlowError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

@api.exception_handler(IntegrityError)
def handle_integrity_error(request: Request, exc: IntegrityError):
    logger.warning("integrity error on %s %s", request.method, request.url.path)
    details = str(getattr(exc, "orig", exc)) if not settings.is_production else None
    return JSONResponse(
        status_code=409,
        content={"code": "UNIQUE_VIOLATION", "message": "Duplicate record.", "details": details},
    )

@api.exception_handler(Exception)
def handle_unexpected(request: Request, exc: Exception):
    logger.exception("unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={
            "code": "INTERNAL_ERROR",
            "message": "Something went wrong!",
            "details": "Server error" if settings.is_production else str(exc),
        },
    )
