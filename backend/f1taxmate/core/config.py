"""
Application Configuration
"""

from pydantic_settings import BaseSettings
from typing import List, Literal, Optional
from dotenv import load_dotenv, find_dotenv

load_dotenv(find_dotenv())


class Settings(BaseSettings):
    """Application settings"""

    # Environment
    ENVIRONMENT: str = "development"
    DEBUG: bool = True

    # API
    API_V1_STR: str = "/api/v1"
    PROJECT_NAME: str = "F1TaxMate"
    VERSION: str = "1.0.0"

    # CORS
    ALLOWED_ORIGINS: List[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]

    # Filing year addressed by every form and package
    TAX_YEAR: int = 2025

    # PDF templates
    TEMPLATE_SOURCE: Literal["filesystem", "s3"] = "filesystem"
    TEMPLATE_DIR: str = "forms"
    TEMPLATE_FETCH_TIMEOUT_SECONDS: float = 10.0
    STRICT_TEMPLATE_FIELDS: bool = False

    # AWS
    AWS_REGION: str = "us-east-1"
    AWS_ACCESS_KEY_ID: Optional[str] = None
    AWS_SECRET_ACCESS_KEY: Optional[str] = None

    # S3
    S3_BUCKET_TEMPLATES: str = "f1taxmate-templates"  # f8843, f1040nr, f1040nro, f843, f8316, IL-1040 + schedules
    S3_TEMPLATE_PREFIX: str = "forms/"

    class Config:
        env_file = ".env"
        case_sensitive = True


# Global settings instance
settings = Settings()
