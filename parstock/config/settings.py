"""
Parstock settings, read from the environment (and .env) by pydantic-settings.

Each concern has its own env prefix: STORAGE_, API_, RECON_, SUGGEST_ and
VARIANCE_. Out-of-range tunables fail at startup rather than mid-request.
"""

from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """SQLite database location and pool."""

    model_config = SettingsConfigDict(env_prefix="STORAGE_")

    data_dir: Path = Path("data")
    db_name: str = "parstock.db"

    pool_size: int = Field(default=5, ge=1)
    busy_timeout: int = Field(default=30000, ge=0)  # ms

    @property
    def db_path(self) -> Path:
        return self.data_dir / self.db_name


class APISettings(BaseSettings):
    """HTTP server."""

    model_config = SettingsConfigDict(env_prefix="API_")

    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False
    cors_origins: list[str] = ["*"]


class ReconciliationSettings(BaseSettings):
    """Invoice quality gate and reconciliation configuration."""

    model_config = SettingsConfigDict(env_prefix="RECON_")

    # "local" scores in-process, "remote" delegates to the reconciliation service
    mode: Literal["local", "remote"] = "local"
    remote_url: str = "http://localhost:8000"
    timeout: float = Field(default=30.0, gt=0)

    price_tolerance: float = Field(default=0.01, ge=0)
    qty_tolerance: float = Field(default=0.0, ge=0)
    parser_confidence_default: float = Field(default=0.5, ge=0, le=1)

    @field_validator("remote_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")


class SuggestSettings(BaseSettings):
    """Suggested order builder configuration."""

    model_config = SettingsConfigDict(env_prefix="SUGGEST_")

    default_par_if_missing: int = Field(default=6, ge=0)
    round_to_pack: bool = True

    # Compare-and-swap attempts on the supplier scope lock
    lock_retries: int = Field(default=3, ge=1)


class VarianceSettings(BaseSettings):
    """Variance report configuration."""

    model_config = SettingsConfigDict(env_prefix="VARIANCE_")

    band_pct: float = Field(default=1.5, ge=0)
    include_uncounted: bool = True


class Settings(BaseSettings):
    """All parstock settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "Parstock"
    app_version: str = "1.0.0"
    environment: Literal["development", "staging", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    # "auto" renders to the console in development and JSON lines elsewhere
    log_format: Literal["auto", "console", "json"] = "auto"

    storage: StorageSettings = Field(default_factory=StorageSettings)
    api: APISettings = Field(default_factory=APISettings)
    recon: ReconciliationSettings = Field(default_factory=ReconciliationSettings)
    suggest: SuggestSettings = Field(default_factory=SuggestSettings)
    variance: VarianceSettings = Field(default_factory=VarianceSettings)


_settings: Settings | None = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next get_settings() re-reads the environment."""
    global _settings
    _settings = None
