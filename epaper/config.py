"""Application configuration and settings."""

from functools import lru_cache
from typing import Optional

from pydantic import PostgresDsn, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "E-Paper Admin API"
    debug: bool = False
    api_version: str = "v1"

    # Database
    database_url: str = "sqlite:///./epaper.db"  # Default to SQLite for local dev
    postgres_user: Optional[str] = None
    postgres_password: Optional[str] = None
    postgres_host: str = "localhost"
    postgres_port: int = 5432
    postgres_db: str = "epaper"

    @field_validator("database_url", mode="before")
    @classmethod
    def assemble_db_connection(cls, v: Optional[str], info) -> str:
        """Build database URL from components if not provided."""
        if isinstance(v, str) and v:
            return v

        data = info.data
        if data.get("postgres_user"):
            return str(
                PostgresDsn.build(
                    scheme="postgresql",
                    username=data.get("postgres_user"),
                    password=data.get("postgres_password"),
                    host=data.get("postgres_host", "localhost"),
                    port=data.get("postgres_port", 5432),
                    path=data.get("postgres_db", "epaper"),
                )
            )

        return "sqlite:///./epaper.db"

    # Page image storage (images are written by the uploader, we only clean up)
    storage_base_path: str = "./storage"

    # CORS
    cors_origins: list[str] = ["http://localhost:3000", "http://localhost:5173"]

    # Page ordering
    position_max_value: int = 65535  # page_no / position are 16-bit unsigned columns

    # Publishing
    publish_blocker_preview_limit: int = 8

    # Hotspots
    hotspot_bulk_delete_limit: int = 200
    hotspot_label_max_length: int = 150

    # Null out target_page_no on other hotspots when the page they point at is deleted
    clear_stale_page_targets_on_delete: bool = False


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
