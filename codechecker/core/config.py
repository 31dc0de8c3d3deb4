"""
Configuration management - environment driven settings via pydantic-settings.

Only the application layer (API, service factory) reads these settings; the
comparison engine receives plain parameter objects built from them.
"""
from enum import Enum
from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    """Runtime environment."""
    DEVELOPMENT = "development"
    PRODUCTION = "production"


class Settings(BaseSettings):
    """Application settings - every option can be overridden through the environment."""

    # API
    api_v1_prefix: str = Field(default="/api/v1", description="API route prefix")
    project_name: str = Field(default="Code Checker", description="Project name")
    version: str = Field(default="1.0.0", description="Version")
    environment: Environment = Field(default=Environment.DEVELOPMENT, description="Runtime environment")

    # Logging
    log_level: str = Field(default="INFO", description="Log level")
    json_logs: bool = Field(default=True, description="Render logs as JSON")
    log_file: Optional[str] = Field(default=None, description="Optional JSON log file")

    # Detection
    similarity_threshold: float = Field(
        default=60.0, ge=0.0, le=100.0,
        description="Combined score at or above which a pair counts as high similarity",
    )
    fast_compare_mode: bool = Field(
        default=False,
        description="Skip the LCS computation for pairs that provably cannot reach the threshold",
    )
    max_lcs_cells: int = Field(
        default=10_000_000, gt=0,
        description="Largest token-count product a single pair may have before it is refused",
    )
    min_match_tokens: int = Field(default=3, ge=1, description="Shortest highlighted token run")
    max_gap_tokens: int = Field(default=2, ge=0, description="Token gap bridged when merging runs")
    max_workers: Optional[int] = Field(default=None, ge=1, description="Comparison worker threads (default: CPU count)")
    max_source_chars: int = Field(default=200_000, gt=0, description="Largest submission accepted by the API")

    # CORS, comma separated, e.g. "http://localhost:5173,https://your.app"
    cors_allow_origins: str = Field(default="http://localhost:5173", description="Allowed CORS origins")
    cors_allow_credentials: bool = Field(default=False, description="Allow credentials on CORS requests")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @property
    def is_production(self) -> bool:
        return self.environment == Environment.PRODUCTION

    def get_cors_origins(self) -> list[str]:
        """Return the configured CORS origins."""
        raw = (self.cors_allow_origins or "").strip()
        if not raw:
            return ["*"]
        return [o.strip() for o in raw.split(",") if o.strip()]


@lru_cache()
def get_settings() -> Settings:
    """
    Settings singleton.
    lru_cache keeps a single Settings instance per process.
    """
    return Settings()
