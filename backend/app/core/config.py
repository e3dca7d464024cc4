from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator, model_validator
from typing import Any, ClassVar
import json
from pathlib import Path
import os


class Settings(BaseSettings):
    model_config = SettingsConfigDict(extra="ignore", case_sensitive=True)

    API_PREFIX: str = "/api"

    # JWT configuration (provide a fallback for local development)
    SECRET_KEY: str = "devsecret"
    ALGORITHM: str = "HS256"
    # Sessions last a working day
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 8 * 60

    # Database URL
    # Use an absolute path so running the app from different directories
    # (e.g., repo root or backend/) always resolves the same DB file.
    BASE_DIR: ClassVar[Path] = Path(__file__).resolve().parents[2]
    SQLALCHEMY_DATABASE_URL: str = f"sqlite:///{BASE_DIR / 'cleaning.db'}"

    # CORS origins
    CORS_ORIGINS: list[str] = ["http://localhost:3000"]
    CORS_ALLOW_ALL: bool = False

    # Uploaded request photos, served under /uploads
    UPLOADS_DIR: str = str(BASE_DIR / "uploads")
    MAX_PHOTOS_PER_UPLOAD: int = 5

    # Billing windows
    BILL_DUE_DAYS: int = 7
    OVERDUE_AFTER_DAYS: int = 7
    GOOD_CLIENT_PAY_HOURS: int = 24

    BCRYPT_ROUNDS: int = 10

    LOG_LEVEL: str = "INFO"
    ENABLE_TRACING: bool = False

    # Admin ("Anna") bootstrap
    DEFAULT_ADMIN_BOOTSTRAP: bool = True
    DEFAULT_ADMIN_EMAIL: str = "anna@cleaning.local"
    DEFAULT_ADMIN_PASSWORD: str = "anna"
    DEFAULT_ADMIN_FIRST_NAME: str = "Anna"
    DEFAULT_ADMIN_LAST_NAME: str = "Johnson"

    @field_validator("CORS_ORIGINS", mode="before")
    def split_origins(cls, v: Any) -> list[str]:
        """Parse comma-separated or JSON list of origins from environment."""
        if isinstance(v, str):
            try:
                parsed = json.loads(v)
                if isinstance(parsed, list):
                    return parsed
            except json.JSONDecodeError:
                pass
            return [s.strip() for s in v.split(",") if s.strip()]
        return v

    @field_validator("DEFAULT_ADMIN_EMAIL", mode="before")
    def strip_admin_email(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @model_validator(mode="after")
    def allow_all_if_requested(cls, values: "Settings") -> "Settings":
        if values.CORS_ALLOW_ALL:
            values.CORS_ORIGINS = ["*"]
        return values


def load_settings() -> "Settings":
    return Settings(_env_file=os.getenv("ENV_FILE", str(Path(__file__).resolve().parents[3] / ".env")))


settings = load_settings()
