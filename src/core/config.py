import os
from pathlib import Path
from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent.parent.parent  # go up to project root
env_path = BASE_DIR / ".env.development"

load_dotenv(env_path)


def _split_csv(value: str) -> list:
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings:
    def __init__(self):
        self.APP_ENV: str = os.getenv("APP_ENV", "development")

        self.AWS_ACCESS_KEY_ID = os.getenv("AWS_ACCESS_KEY_ID")
        self.AWS_SECRET_ACCESS_KEY = os.getenv("AWS_SECRET_ACCESS_KEY")
        self.AWS_REGION: str = os.getenv("AWS_REGION", "us-east-1")
        self.AWS_S3_BUCKET = os.getenv("AWS_S3_BUCKET")
        self.AWS_S3_ENDPOINT_URL = os.getenv("AWS_S3_ENDPOINT_URL") or None
        self.AWS_S3_PUBLIC_BASE_URL = os.getenv("AWS_S3_PUBLIC_BASE_URL") or None
        self.AWS_S3_OBJECT_ACL: str = os.getenv("AWS_S3_OBJECT_ACL", "public-read")

        self.HTTP_TIMEOUT_SECONDS: float = float(os.getenv("HTTP_TIMEOUT_SECONDS", "10"))
        self.CORS_ORIGINS: list = _split_csv(os.getenv("CORS_ORIGINS", "*"))
        self.LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    @property
    def is_production(self) -> bool:
        return self.APP_ENV.lower() == "production"

    @property
    def has_credentials(self) -> bool:
        return bool(self.AWS_ACCESS_KEY_ID and self.AWS_SECRET_ACCESS_KEY)

    @property
    def public_base_url(self) -> str:
        """Base URL that stored objects are publicly served from."""
        if self.AWS_S3_PUBLIC_BASE_URL:
            return self.AWS_S3_PUBLIC_BASE_URL.rstrip("/")
        if self.AWS_S3_ENDPOINT_URL:
            # path-style addressing on S3-compatible stores (MinIO, LocalStack)
            return f"{self.AWS_S3_ENDPOINT_URL.rstrip('/')}/{self.AWS_S3_BUCKET}"
        return f"https://{self.AWS_S3_BUCKET}.s3.{self.AWS_REGION}.amazonaws.com"


settings = Settings()
