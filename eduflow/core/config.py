# eduflow/core/config.py
import os
from typing import ClassVar, List
from pydantic import BaseModel, Field

def _normalize_db_url(url: str) -> str:
    if url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql+psycopg://", 1)
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+psycopg://", 1)
    return url

def _default_database_url() -> str:
    raw = os.getenv("DATABASE_URL")
    if raw and raw.strip():
        return _normalize_db_url(raw.strip())
    data_dir = os.path.abspath(os.getenv("DATA_DIR", "./data"))
    os.makedirs(data_dir, exist_ok=True)
    return f"sqlite:///{os.path.join(data_dir, 'eduflow.db')}"

def _bool_env(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}

def _list_env(name: str, default: str) -> List[str]:
    return [p.strip() for p in os.getenv(name, default).split(",") if p.strip()]

class Settings(BaseModel):
    PROJECT_NAME: ClassVar[str] = "EduFlow API"

    DATABASE_URL: str = Field(default_factory=_default_database_url)
    ENVIRONMENT: str = Field(default_factory=lambda: os.getenv("ENVIRONMENT", "development"))

    # auth
    SECRET_KEY: str = Field(default_factory=lambda: os.getenv("SECRET_KEY", "CHANGE_ME_SUPER_SECRET"))
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_DAYS: int = Field(default_factory=lambda: int(os.getenv("ACCESS_TOKEN_EXPIRE_DAYS", "1")))
    REMEMBER_ME_EXPIRE_DAYS: int = Field(default_factory=lambda: int(os.getenv("REMEMBER_ME_EXPIRE_DAYS", "30")))
    REGISTER_TOKEN_EXPIRE_DAYS: int = Field(default_factory=lambda: int(os.getenv("REGISTER_TOKEN_EXPIRE_DAYS", "7")))

    # logging
    LOG_LEVEL: str = Field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    LOG_JSON: bool = Field(default_factory=lambda: _bool_env("LOG_JSON", "false"))

    CORS_ORIGINS: List[str] = Field(default_factory=lambda: _list_env("CORS_ORIGINS", "*"))
    PUBLIC_BASE_URL: str = Field(default_factory=lambda: os.getenv("PUBLIC_BASE_URL", ""))

    # certificates
    CERTIFICATE_PREFIX: str = Field(default_factory=lambda: os.getenv("CERTIFICATE_PREFIX", "CERT"))
    CERTIFICATE_NUMBER_ATTEMPTS: int = Field(default_factory=lambda: int(os.getenv("CERTIFICATE_NUMBER_ATTEMPTS", "5")))

    # startup
    RUN_MIGRATIONS_ON_STARTUP: bool = Field(default_factory=lambda: _bool_env("RUN_MIGRATIONS_ON_STARTUP", "true"))
    SEED_ADMIN_EMAIL: str = Field(default_factory=lambda: os.getenv("SEED_ADMIN_EMAIL", "admin@eduflow.io"))
    SEED_ADMIN_PASSWORD: str = Field(default_factory=lambda: os.getenv("SEED_ADMIN_PASSWORD", "admin123"))

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"

settings = Settings()
