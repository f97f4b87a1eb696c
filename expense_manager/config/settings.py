"""
Application Configuration Settings
"""

from pydantic_settings import BaseSettings
from typing import List
import os


class Settings(BaseSettings):
    """Application settings"""

    # Application
    APP_NAME: str = "Expense Manager"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    ENVIRONMENT: str = "development"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8080

    # Database
    DATABASE_URL: str = "sqlite:///./expense_manager.db"

    # JWT
    SECRET_KEY: str = "change-this-secret-key-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # Development mode: resolve the acting user from X-Dev-User-Role / X-Dev-User-Id
    DEV_MODE: bool = True
    DEV_USER_PASSWORD: str = "password123"

    # CORS
    CORS_ORIGINS: str = "http://localhost:3000,http://localhost:8080"  # Comma-separated string

    @property
    def cors_origins_list(self) -> List[str]:
        """Convert comma-separated string to list"""
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",")]

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"
    LOG_FILE: str = "logs/app.log"
    LOG_ROTATION: str = "10 MB"

    # Workflow rules
    COMMENT_MAX_LENGTH: int = 1000
    REIMBURSEMENT_METHOD_MAX_LENGTH: int = 200

    # API client
    API_BASE_URL: str = "http://localhost:8080"
    CLIENT_TIMEOUT_SECONDS: float = 10.0
    NOTIFICATION_POLL_SECONDS: float = 30.0

    class Config:
        env_file = ".env"
        case_sensitive = True


# Create settings instance
settings = Settings()


# Ensure log directory exists
os.makedirs(settings.LOG_DIR, exist_ok=True)
