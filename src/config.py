"""
QuickJob - Configuration Settings
"""

from pathlib import Path
from pydantic_settings import BaseSettings
from pydantic import model_validator
from typing import Optional


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "QuickJob"
    APP_DESCRIPTION: str = "Marketplace backend connecting clients with local professionals"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 3000

    # Security
    SECRET_KEY: str = "dev-secret-key-change-in-production"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60  # Matches the 1h admin token lifetime

    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./data/quickjob.db"

    # File Storage
    UPLOAD_DIR: Path = Path("./data/uploads")
    MAX_FILE_SIZE_MB: int = 10
    ALLOWED_UPLOAD_EXTENSIONS: set = {".pdf", ".jpg", ".jpeg", ".png", ".webp"}

    # Profile
    ALLOWED_IMAGE_EXTENSIONS: set = {".jpg", ".jpeg", ".png", ".webp"}
    DEFAULT_AVATAR_URL: str = "/uploads/default-avatar.png"

    # Email (SMTP)
    SMTP_HOST: str = "smtp.gmail.com"
    SMTP_PORT: int = 587
    SMTP_USER: Optional[str] = None
    SMTP_PASSWORD: Optional[str] = None
    SMTP_FROM_EMAIL: str = "noreply@quickjob.app"
    SMTP_FROM_NAME: str = "QuickJob"
    NOTIFY_BY_EMAIL: bool = False  # Mirror in-app notifications to email

    @model_validator(mode="after")
    def validate_secret_key(self):
        """Refuse to start with the default secret key in production."""
        if not self.DEBUG and self.SECRET_KEY == "dev-secret-key-change-in-production":
            raise ValueError(
                "SECRET_KEY must be changed from the default value in production. "
                "Set a strong, unique SECRET_KEY in your .env file."
            )
        return self

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


# Create settings instance
settings = Settings()

# Ensure upload directory exists
settings.UPLOAD_DIR.mkdir(parents=True, exist_ok=True)
