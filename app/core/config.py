from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")
    DATABASE_URL: str = "sqlite:///./checklist.db"
    LOG_LEVEL: str = "INFO"

    # Auth
    JWT_SECRET: str = "change-me"
    JWT_ALGORITHM: str = "HS256"

    # CORS
    FRONTEND_URL: Optional[str] = None
    CORS_ORIGINS: str = "http://localhost:5173,http://127.0.0.1:5173"

    # Photo evidence
    UPLOAD_DIR: str = "./uploads/checks"
    UPLOAD_URL_PREFIX: str = "/uploads/checks"
    PHOTO_MAX_BYTES: int = 8 * 1024 * 1024

    # Calendar day used for run reuse and the dashboard
    BUSINESS_TIMEZONE: str = "UTC"

    # Listing caps
    MY_RUNS_LIMIT: int = 200
    ADMIN_RUNS_LIMIT: int = 500
    USERS_LIMIT: int = 200

settings = Settings()
