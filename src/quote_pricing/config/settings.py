"""
Centralized settings for the pricing service shell (API, logging, scripts).

Values come from ``QUOTE_PRICING_*`` environment variables (or a ``.env``
file). The engine itself takes no settings; everything it needs arrives as
arguments.
"""
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def get_project_root() -> Path:
    """Get the project root directory (where pyproject.toml lives)."""
    current = Path(__file__).resolve()
    for parent in current.parents:
        if (parent / 'pyproject.toml').exists():
            return parent
    # Fallback to 3 levels up from this file
    return Path(__file__).resolve().parent.parent.parent.parent


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    project_root: Path = Field(default_factory=get_project_root)

    # ── Logging ──────────────────────────────────────────
    log_level: str = "INFO"

    # ── API ──────────────────────────────────────────────
    api_title: str = "Quote Pricing API"
    cors_origins: str = "*"  # comma separated

    # ── Batch repricing ──────────────────────────────────
    output_dir: Optional[Path] = None

    model_config = SettingsConfigDict(
        env_prefix="QUOTE_PRICING_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        return value.strip().upper() or "INFO"

    @model_validator(mode="after")
    def _default_output_dir(self) -> "Settings":
        if self.output_dir is None:
            self.output_dir = self.project_root / "outputs"
        return self

    @property
    def allowed_origins(self) -> list[str]:
        origins = [o.strip() for o in self.cors_origins.split(",") if o.strip()]
        return origins or ["*"]

    @classmethod
    def load(cls, project_root: Optional[Path] = None) -> "Settings":
        """Load settings, optionally pinning the project root."""
        if project_root is None:
            return cls()
        return cls(project_root=project_root)


@lru_cache()
def get_settings() -> Settings:
    """Return cached application settings (singleton)."""
    return Settings.load()


def reset_settings() -> None:
    """Drop the cached settings so the next get_settings() reloads them."""
    get_settings.cache_clear()
