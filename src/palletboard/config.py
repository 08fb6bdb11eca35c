"""Application configuration and settings management."""

from pathlib import Path
from typing import Any, Optional

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="PALLET_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "PaletteMaster Slot Board API"
    api_prefix: str = "/api"
    data_root: Path = Field(default=Path("data"), description="Root directory for the local state store.")
    archive_limit: int = Field(default=200, ge=1, description="Maximum number of archive entries kept.")
    archive_dedup_seconds: float = Field(
        default=2.0,
        ge=0.0,
        description="Window during which re-archiving the same order number is suppressed.",
    )
    frontend_allowed_origins: tuple[str, ...] = Field(
        default=(
            "http://localhost:5173",
            "http://127.0.0.1:5173",
        ),
        description="Permitted web origins for browser clients (CORS).",
    )

    # Supabase configuration
    supabase_url: Optional[str] = Field(
        default=None,
        description="Supabase project URL (e.g., https://xxx.supabase.co).",
    )
    supabase_key: Optional[str] = Field(
        default=None,
        description="Supabase key used to read and upsert the shared board row.",
    )
    remote_table: str = Field(default="app_state", description="Table holding the shared board row.")
    remote_row_id: int = Field(default=1, description="Fixed id of the shared board row.")
    remote_sync_enabled: bool = Field(default=True, description="Subscribe to remote snapshots on startup.")
    remote_poll_interval_seconds: float = Field(default=5.0, gt=0.0)

    # Document classification (delivery / return note scanning)
    classifier_api_key: Optional[str] = Field(default=None, description="API key for the classification service.")
    classifier_model: str = Field(default="gemini-2.5-flash")
    classifier_base_url: str = Field(default="https://generativelanguage.googleapis.com/v1beta")
    classifier_timeout_seconds: float = Field(default=60.0, gt=0.0)

    @field_validator("data_root", mode="before")
    @classmethod
    def _expand_path(cls, value: Any) -> Path:
        path_value = value if isinstance(value, Path) else Path(str(value))
        return path_value.expanduser().resolve()

    @field_validator("frontend_allowed_origins", mode="before")
    @classmethod
    def _parse_str_tuple_from_env(cls, value: Any) -> tuple[str, ...]:
        """Parse string tuple from environment variable (comma-separated or JSON array)."""
        if isinstance(value, tuple):
            return value
        if isinstance(value, list):
            return tuple(str(item) for item in value)
        if isinstance(value, str):
            # Try JSON first
            try:
                parsed = json.loads(value)
                if isinstance(parsed, list):
                    return tuple(str(item) for item in parsed)
            except (json.JSONDecodeError, TypeError):
                pass
            # Try comma-separated
            if "," in value:
                return tuple(item.strip() for item in value.split(",") if item.strip())
            if value.strip():
                return (value.strip(),)
        return tuple()


settings = Settings()
