# student_portal/config.py
from pydantic_settings import BaseSettings
from pathlib import Path
from typing import List, Optional

class Settings(BaseSettings):
    # Database
    DATABASE_URL: str = "sqlite:///./student_portal.db"
    DATABASE_CONNECT_TIMEOUT: int = 10  # seconds

    # JWT & Security
    SECRET_KEY: str = "your-secret-key-change-this-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24
    BCRYPT_ROUNDS: int = 12

    # Uploads (one ceiling for every upload path)
    MAX_UPLOAD_SIZE_BYTES: int = 5 * 1024 * 1024  # 5MB
    ALLOWED_UPLOAD_CONTENT_TYPES: List[str] = ["application/pdf"]

    # Object storage: "local" writes under UPLOAD_DIR, "s3" writes to S3_BUCKET_NAME
    STORAGE_BACKEND: str = "local"
    UPLOAD_DIR: Path = Path("uploads")
    S3_BUCKET_NAME: str = "files"
    S3_ENDPOINT_URL: Optional[str] = None  # e.g. http://localhost:9000 for MinIO
    AWS_ACCESS_KEY_ID: str = ""
    AWS_SECRET_ACCESS_KEY: str = ""
    AWS_REGION: str = "us-east-1"
    STORAGE_CONNECT_TIMEOUT: float = 5.0
    STORAGE_READ_TIMEOUT: float = 30.0

    # HTTP
    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:5173"]

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "text"  # "text" or "json"

    class Config:
        env_file = ".env"
        case_sensitive = True

settings = Settings()
