from pydantic_settings import BaseSettings
from typing import List, Literal


class Settings(BaseSettings):
    """
    Application configuration settings.
    Loads from environment variables or .env file.
    """

    # Application
    APP_NAME: str = "PDC Pro API"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = True

    # Database
    DATABASE_URL: str
    DATABASE_NAME: str = "pdc_pro"

    # JWT Authentication
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 10080  # 7 days
    BCRYPT_ROUNDS: int = 10

    # Frontend origins allowed by CORS
    CORS_ORIGINS: List[str] = [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
        "http://localhost:3000",
    ]

    # Image host
    # Options: mock, cloudinary
    # - mock: Deterministic placeholder URLs (development)
    # - cloudinary: Signed uploads to the Cloudinary REST API
    IMAGE_HOST_ADAPTER_TYPE: Literal["mock", "cloudinary"] = "mock"

    CLOUDINARY_CLOUD_NAME: str = ""
    CLOUDINARY_API_KEY: str = ""
    CLOUDINARY_API_SECRET: str = ""

    # Upload transformation profile
    IMAGE_UPLOAD_FOLDER: str = "pdi-pro-inspections"
    IMAGE_MAX_WIDTH: int = 800
    IMAGE_MAX_HEIGHT: int = 600
    IMAGE_QUALITY: str = "auto:good"
    IMAGE_UPLOAD_RETRIES: int = 1
    MAX_UPLOAD_BYTES: int = 10 * 1024 * 1024  # 10 MB

    # Seconds allowed per photo download when rendering a report
    REPORT_IMAGE_TIMEOUT: float = 10.0
    # Extra https hosts the report may download photos from
    REPORT_IMAGE_HOSTS: List[str] = []

    class Config:
        env_file = ".env"
        case_sensitive = True


# Global settings instance
settings = Settings()
