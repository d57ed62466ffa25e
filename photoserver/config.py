from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator
from typing import Optional

# Load environment variables from .env when running outside a container
from dotenv import load_dotenv

load_dotenv()


class Settings(BaseSettings):
    # App
    APP_ENV: str = "development"
    LOG_LEVEL: str = "INFO"
    ROOT_CONTEXT: str = "/photos/photo/"
    PHOTOS_ROOT: str = "/mnt/photos"

    # Thumbnails
    LFU_CACHE_MAX_COUNT: int = 32
    CONCURRENCY_LEVEL: int = 4
    JPEG_QUALITY: int = 80

    # Database
    DATABASE_URL: Optional[str] = None
    DB_HOST: str = "127.0.0.1"
    DB_PORT: int = 3306
    DB_TABLE: str = "photos2"
    DB_USERNAME: str = "photos"
    DB_PASSWORD: str = "photos"
    DB_MAX_OPEN_CONNS: int = 64
    DB_MAX_IDLE_CONNS: int = 6
    DB_CONN_MAX_IDLE_SECONDS: int = 300
    DB_GENERATE_SCHEMAS: bool = False

    # Observability
    METRICS_ENABLED: bool = False

    @field_validator("ROOT_CONTEXT")
    @classmethod
    def normalize_root_context(cls, v: str) -> str:
        v = "/" + v.strip().strip("/")
        return v if v == "/" else v + "/"

    @field_validator("LFU_CACHE_MAX_COUNT")
    @classmethod
    def cache_size_not_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("LFU_CACHE_MAX_COUNT must be 0 (disabled) or positive")
        return v

    @field_validator("CONCURRENCY_LEVEL", "DB_MAX_OPEN_CONNS")
    @classmethod
    def must_be_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("value must be at least 1")
        return v

    @field_validator("JPEG_QUALITY")
    @classmethod
    def quality_in_range(cls, v: int) -> int:
        if not 1 <= v <= 95:
            raise ValueError("JPEG_QUALITY must be between 1 and 95")
        return v

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


settings = Settings()
