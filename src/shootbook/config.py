from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="SHOOTBOOK_",
        case_sensitive=False,
    )

    # App
    env: str = "development"
    debug: bool = False
    log_level: str = "INFO"

    # Database
    db_url: str = "sqlite+aiosqlite:///./shootbook.db"

    # Scheduling
    availability_granularity: Literal["per_spot", "per_date"] = "per_spot"

    # Image storage
    image_store: Literal["local", "s3"] = "local"
    image_dir: Path = Field(default=Path("./media/session-images"))
    image_base_url: str = "/media/session-images"
    image_max_bytes: int = 5 * 1024 * 1024

    # S3-compatible bucket (R2, MinIO, AWS)
    s3_bucket: str = "session-images"
    s3_endpoint_url: str = ""
    s3_access_key_id: str = ""
    s3_secret_access_key: str = ""
    s3_public_base_url: str = ""

    # Dashboard
    dashboard_recent_limit: int = 5


def get_settings() -> Settings:
    return Settings()
