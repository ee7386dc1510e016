"""Application configuration loaded from config.yaml and environment variables."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings

PROJECT_ROOT = Path(__file__).resolve().parent.parent
CONFIG_YAML_PATH = PROJECT_ROOT / "config.yaml"


# --- YAML sub-models ---


class StorageConfig(BaseModel):
    """Where autosaves, versions, and the recent list are kept."""

    backend: Literal["file", "memory", "supabase"] = "file"
    directory: str = ".pulse-storage"
    key_prefix: str = "neurology-ai-pulse"
    table: str = "editor_storage"


class AutosaveConfig(BaseModel):
    """Autosave timing and recent-document tracking."""

    interval_seconds: int = Field(default=30, gt=0)
    recent_limit: int = Field(default=5, gt=0)


class VersionsConfig(BaseModel):
    """Version snapshot retention."""

    max_versions: int = Field(default=20, gt=0)


class ExportConfig(BaseModel):
    """Export filenames and print-page behaviour."""

    filename_prefix: str = "neurology-ai-pulse"
    asset_timeout_ms: int = Field(default=10000, gt=0)


# --- Main settings ---


class Settings(BaseSettings):
    """Application settings combining .env secrets and config.yaml values."""

    # App config
    env: str = Field(default="dev")
    log_format: Literal["text", "json"] = Field(default="text")
    enable_autosave_scheduler: bool = Field(default=True)
    cors_origins: str = Field(default="http://localhost:5173")

    # Secrets from .env
    supabase_url: str = Field(default="")
    supabase_secret_key: str = Field(default="")
    supabase_service_role_key: str = Field(default="")

    # YAML-sourced config
    storage: StorageConfig = Field(default_factory=StorageConfig)
    autosave: AutosaveConfig = Field(default_factory=AutosaveConfig)
    versions: VersionsConfig = Field(default_factory=VersionsConfig)
    export: ExportConfig = Field(default_factory=ExportConfig)

    model_config = {
        "env_file": str(PROJECT_ROOT / ".env"),
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    def __init__(self, **kwargs: Any) -> None:
        yaml_data = _load_yaml_config()
        merged = {**yaml_data, **kwargs}
        super().__init__(**merged)

    @property
    def effective_supabase_secret_key(self) -> str:
        """Prefer the new secret key, falling back to the legacy service role key."""
        return self.supabase_secret_key or self.supabase_service_role_key

    @property
    def cors_origin_list(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


def _load_yaml_config() -> dict[str, Any]:
    """Read and parse config.yaml, returning an empty dict on failure."""
    if not CONFIG_YAML_PATH.exists():
        return {}
    with CONFIG_YAML_PATH.open(encoding="utf-8") as f:
        data = yaml.safe_load(f)
    return data if isinstance(data, dict) else {}


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings singleton."""
    return Settings()
