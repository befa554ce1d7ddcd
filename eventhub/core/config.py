"""Application configuration using pydantic-settings."""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # App Info
    app_name: str = "Event Hub API"
    app_version: str = "0.1.0"
    debug: bool = False

    # Server
    host: str = "0.0.0.0"
    port: int = 8400
    workers: int = 1

    # Database
    data_save_folder: str = "./data"
    db_file: str = "eventhub.db"

    @property
    def database_url(self) -> str:
        """SQLite database URL."""
        db_path = Path(self.data_save_folder) / self.db_file
        return f"sqlite+aiosqlite:///{db_path}"

    # JWT Authentication
    jwt_secret_key: str = Field(
        default="change-me-eventhub-secret",
        alias="JWT_SECRET_KEY",
    )
    jwt_algorithm: str = "HS256"
    jwt_access_token_expire_minutes: int = 60 * 24  # 24 hours
    jwt_issuer: str = "eventhub"
    jwt_audience: str = "eventhub"

    # Default admin account created on startup
    admin_email: str = Field(default="admin@eventhub.local", alias="ADMIN_EMAIL")
    admin_password: str = Field(default="admin", alias="ADMIN_PASSWORD")

    # CORS
    cors_origins: list[str] = ["*"]
    cors_allow_methods: list[str] = ["*"]
    cors_allow_headers: list[str] = ["*"]

    # Request deadline (seconds) applied to every HTTP request
    request_timeout_seconds: float = Field(default=30.0, alias="REQUEST_TIMEOUT_SECONDS")

    # Image storage
    image_root: str = Field(default="public", alias="IMAGE_ROOT")
    image_max_upload_bytes: int = 5 * 1024 * 1024
    image_accepted_extensions: list[str] = ["jpg", "jpeg", "png", "heic"]
    image_compress_quality: int = Field(default=50, ge=0, le=100)
    image_miniature_width: int = 200
    image_miniature_quality: int = Field(default=60, ge=0, le=100)
    image_png_quality: tuple[float, float] = (0.5, 0.6)

    # Orphan image sweeper
    enable_orphan_sweeper: bool = Field(default=True, alias="ENABLE_ORPHAN_SWEEPER")
    orphan_sweep_interval_minutes: int = 60
    orphan_grace_minutes: int = 60

    @field_validator("image_accepted_extensions", mode="after")
    @classmethod
    def normalize_extensions(cls, v: list[str]) -> list[str]:
        """Store extensions lower-case and without a leading dot."""
        return [ext.lower().lstrip(".") for ext in v]

    @field_validator("image_png_quality", mode="after")
    @classmethod
    def check_png_quality(cls, v: tuple[float, float]) -> tuple[float, float]:
        """PNG quality is a (min, max) range within 0..1."""
        low, high = v
        if not 0 <= low <= high <= 1:
            raise ValueError("image_png_quality must satisfy 0 <= min <= max <= 1")
        return v


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
