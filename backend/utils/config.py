"""
Background Builder Configuration Module.

Centralizes all configuration settings using Pydantic Settings.
Requires Python 3.11+.
"""

from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load .env file into os.environ at module import time
# This ensures nested BaseSettings classes can read the values
_env_file = Path(__file__).parent.parent / ".env"
if _env_file.exists():
    load_dotenv(_env_file)
else:
    # Try current working directory
    load_dotenv()


class BuilderSettings(BaseSettings):
    """Watcher and rebuild scheduling settings."""

    model_config = SettingsConfigDict(env_prefix="BUILDER_")

    project_root: Path = Field(default_factory=Path.cwd, description="Directory the asset root lives in")
    asset_root: str = Field(default="Assets", description="Prefix every watch path must live under")
    extension: str = Field(default=".cs", description="Tracked source file extension")
    settings_prefix: str = Field(
        default="background_builder.",
        description="Namespace prefix for persisted preference keys",
    )
    tick_interval_ms: int = Field(default=100, ge=10, le=5000)
    prefs_file: Path | None = Field(default=None, description="JSON file for persisted preferences")

    @field_validator("asset_root", mode="before")
    @classmethod
    def strip_asset_root(cls, v: str) -> str:
        """Store the asset root without surrounding separators."""
        if isinstance(v, str):
            return v.strip().strip("/")
        return v

    @field_validator("extension", mode="before")
    @classmethod
    def parse_extension(cls, v: str) -> str:
        """Accept "cs", "*.cs" or ".cs" and store ".cs"."""
        if isinstance(v, str):
            v = v.strip().lstrip("*")
            if v and not v.startswith("."):
                v = "." + v
        return v


class LoggingSettings(BaseSettings):
    """Logging configuration settings."""

    model_config = SettingsConfigDict(env_prefix="LOG_")

    level: str = Field(default="INFO")
    format: str = Field(default="console")  # "json" or "console"
    file_path: Path | None = Field(default=None)


class Settings(BaseSettings):
    """Main application settings aggregating all sub-settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application metadata
    app_name: str = Field(default="BackgroundBuilder")
    app_version: str = Field(default="0.1.0")
    environment: str = Field(default="development")

    # Sub-settings
    builder: BuilderSettings = Field(default_factory=BuilderSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment.lower() in ("development", "dev", "local")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Get cached application settings.

    Returns singleton instance of Settings for performance.
    Components accept an explicit BuilderSettings to bypass the cache.
    """
    return Settings()
