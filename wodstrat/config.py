"""Configuration management for the WOD strategy core."""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DATA_DIR = Path(__file__).resolve().parent / "data"


class Settings(BaseSettings):
    """Centralised settings derived from environment variables."""

    log_level: str = Field(default="INFO")
    package_log_level: str | None = Field(
        default=None,
        description="Level for the wodstrat loggers; falls back to log_level.",
    )
    log_dir: Path = Field(default=Path("logs"))
    log_to_file: bool = Field(default=True)

    strategy_config_path: Path = Field(
        default=DATA_DIR / "strategy.yaml",
        description="YAML file holding analyzer thresholds.",
    )
    movement_catalog_path: Path = Field(
        default=DATA_DIR / "movements.yaml",
        description="YAML file holding the movement catalog and aliases.",
    )
    benchmark_reference_path: Path = Field(
        default=DATA_DIR / "benchmarks.yaml",
        description="YAML file holding benchmark definitions, population tables and mappings.",
    )

    parser_max_errors: int = Field(default=20, ge=1, le=100)
    parser_similar_name_distance: int = Field(default=3, ge=1, le=10)

    model_config = SettingsConfigDict(
        env_prefix="WODSTRAT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("log_level", "package_log_level")
    @classmethod
    def normalize_log_level(cls, value: str | None) -> str | None:
        if value is None:
            return None
        valid = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}
        upper = value.upper()
        if upper not in valid:
            raise ValueError(f"LOG_LEVEL must be one of {', '.join(sorted(valid))}")
        return upper


@lru_cache()
def get_settings() -> Settings:
    """Return cached settings instance so it can be reused across the package."""

    settings = Settings()
    if settings.log_to_file:
        settings.log_dir.mkdir(parents=True, exist_ok=True)
    return settings
