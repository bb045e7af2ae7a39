# app/config.py
from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# .env lives next to pyproject.toml
ENV_FILE = Path(__file__).resolve().parents[1] / ".env"
load_dotenv(ENV_FILE, override=False)

class Settings(BaseSettings):
    # ---- App / Infra ----
    APP_VERSION: str = "0.1.0"
    LOG_LEVEL: str = "INFO"

    # Not required at class level so that imports (tests, scripts --help) work
    # without a database; checked when the pool is created.
    DATABASE_URL: Optional[str] = None

    # ---- Auth ----
    JWT_SECRET: Optional[str] = None
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRY_MINUTES: int = 60

    # ---- CORS ----
    CORS_ORIGINS: List[str] = Field(default_factory=lambda: ["http://localhost:5173"])

    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

settings = Settings()


def require_database_url() -> str:
    """
    Runtime check with a clear message when the DSN is missing.
    """
    if not settings.DATABASE_URL:
        raise RuntimeError(
            "DATABASE_URL is not set. Check .env "
            f"(tried loading from: {ENV_FILE})."
        )
    return settings.DATABASE_URL


def require_jwt_secret() -> str:
    """
    Verify JWT_SECRET is present whenever tokens are issued or verified.
    """
    secret = settings.JWT_SECRET
    if not secret:
        raise RuntimeError(
            "JWT_SECRET is not set. Add it to .env "
            f"(tried loading from: {ENV_FILE})."
        )
    return secret
