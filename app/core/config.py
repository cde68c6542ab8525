from pydantic_settings import BaseSettings
from typing import Optional, List

class Settings(BaseSettings):
    PROJECT_NAME: str = "Series Learning Hub"
    VERSION: str = "1.0.0"
    API_V1_STR: str = "/api/v1"
    SECRET_KEY: str = "change-me-in-production"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 2  # 2 days

    # CORS
    ALLOWED_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:3001",
        "http://127.0.0.1:3000",
    ]

    # Database Configuration
    DATABASE_HOST: str = "localhost"
    DATABASE_PORT: str = "5432"
    DATABASE_USER: str = "postgres"
    DATABASE_PASSWORD: str = "postgres"
    DATABASE_NAME: str = "series_learning_hub"

    DATABASE_URL: str = ""
    TEST_DATABASE_URL: Optional[str] = None

    def __init__(self, **data):
        super().__init__(**data)
        if not self.DATABASE_URL:
            self.DATABASE_URL = (
                f'postgresql://{self.DATABASE_USER}:{self.DATABASE_PASSWORD}'
                f'@{self.DATABASE_HOST}:{self.DATABASE_PORT}/{self.DATABASE_NAME}'
            )

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = ""  # file handlers are skipped when empty

    # Storage
    STORAGE_DRIVER: str = "local"  # local, s3
    STORAGE_LOCAL_ROOT: str = "storage"
    STORAGE_PUBLIC_URL: str = "http://localhost:8000/storage"
    AWS_REGION: str = "us-east-1"
    S3_BUCKET_NAME: Optional[str] = None

    # Progression thresholds (percent watched)
    LESSON_AUTO_COMPLETE_THRESHOLD: float = 90
    INTRO_UNLOCK_THRESHOLD: float = 90
    VIDEO_AUTO_COMPLETE_THRESHOLD: float = 100

    class Config:
        env_file = ".env"

settings = Settings()
