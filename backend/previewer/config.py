# backend/previewer/config.py
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .enums import ImageFormat, LogLevel
from .utils.format_helpers import normalize_format


class Settings(BaseSettings):
    environment: str = "development"

    # ============= IMAGE ENGINE =============

    default_format: str = Field(
        default=ImageFormat.JPEG.value,
        description="Source format assumed when the header probe reports none",
    )
    filter_threads: int = Field(
        default=1,
        ge=1,
        le=8,
        description="Image engine workers per pipeline run",
    )
    max_source_bytes: Optional[int] = Field(
        default=None,
        ge=1,
        description="Reject sources larger than this many bytes (unbounded if unset)",
    )

    # Sharpening applied to jpeg variants with `unsharp` enabled
    unsharp_radius: float = Field(default=1.0, gt=0, le=10)
    unsharp_percent: int = Field(default=50, ge=1, le=500)
    unsharp_threshold: int = Field(default=3, ge=0, le=255)

    # ============= PIPELINE =============

    persist_concurrency: int = Field(
        default=4,
        ge=1,
        le=32,
        description="Maximum concurrent asset store writes per run",
    )
    max_concurrent_runs: int = Field(
        default=4,
        ge=1,
        le=64,
        description="Maximum pipeline runs executing at once in batch mode",
    )
    strict_variant_references: bool = Field(
        default=False,
        description="Reject 'from' references to unknown or later variant keys",
    )

    # ============= STORAGE =============

    store_directory: str = "./data/assets"

    @property
    def store_path(self) -> Path:
        """Get asset store directory as Path object"""
        return Path(self.store_directory)

    # Logging
    log_level: LogLevel = Field(
        default=LogLevel.INFO,
        description="Logging level (TRACE, DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    log_file: Optional[str] = Field(
        default=None, description="Log file path (optional)"
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v) -> LogLevel:
        """Validate log level is one of the allowed values"""
        if isinstance(v, LogLevel):
            return v
        allowed_levels = LogLevel.__members__.keys()
        v_upper = str(v).upper()
        if v_upper not in allowed_levels:
            raise ValueError(
                f"Invalid log level '{v}'. Must be one of: {', '.join(allowed_levels)}"
            )
        return LogLevel[v_upper]

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment is one of the allowed values"""
        allowed_envs = ["development", "staging", "production", "test"]
        v_lower = v.lower()
        if v_lower not in allowed_envs:
            raise ValueError(
                f"Invalid environment '{v}'. Must be one of: {', '.join(allowed_envs)}"
            )
        return v_lower

    @field_validator("default_format")
    @classmethod
    def validate_default_format(cls, v: str) -> str:
        """Normalize the default format to its canonical name"""
        normalized = normalize_format(v)
        if not normalized:
            raise ValueError("default_format must not be empty")
        return normalized

    model_config = SettingsConfigDict(
        env_prefix="PREVIEWER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


# Global settings instance
settings = Settings()
