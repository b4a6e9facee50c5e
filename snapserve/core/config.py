from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    DATABASE_URL: str
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60
    FRONTEND_URL: str = "http://localhost:3000"
    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:3001",
    ]

    # Email settings
    MAIL_BACKEND: str = "smtp"  # "smtp" or "console"
    SMTP_HOST: str = "localhost"
    SMTP_PORT: int = 587
    SMTP_USER: str = ""
    SMTP_PASSWORD: str = ""
    SMTP_FROM_EMAIL: str = "noreply@snapserve.local"
    SMTP_FROM_NAME: str = "SnapServe"

    # Invitation / verification lifetimes
    INVITATION_DEFAULT_EXPIRY_DAYS: int = 7
    INVITATION_MIN_EXPIRY_DAYS: int = 1
    INVITATION_MAX_EXPIRY_DAYS: int = 30
    VERIFICATION_TOKEN_TTL_HOURS: int = 24

    RATE_LIMIT_ENABLED: bool = True
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


settings = Settings()
