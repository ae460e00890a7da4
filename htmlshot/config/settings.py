"""
Application Settings
===================

Main application settings and environment configuration using Pydantic Settings.
Supports development, testing, and production environments.
"""

from typing import Annotated, List, Union
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict
import json
from pathlib import Path


DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/119.0.0.0 Safari/537.36"
)


class Settings(BaseSettings):
    """Main application settings with environment variable support."""

    # Application Configuration
    app_name: str = Field(default="HTML Screenshot API", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    environment: str = Field(
        default="development", description="Environment: development, testing, production"
    )
    debug: bool = Field(default=True, description="Debug mode")

    # Server Configuration
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8000, description="Server port")

    # Security Configuration
    api_key: str = Field(default="1234", description="Shared secret expected in the apiKey field")
    allowed_origins: Annotated[List[str], NoDecode] = Field(
        default=["*"], description="Allowed origins for CORS"
    )

    # Browser Configuration
    playwright_headless: bool = Field(default=True, description="Run browser in headless mode")
    chromium_args: Annotated[List[str], NoDecode] = Field(
        default=[
            "--no-sandbox",
            "--disable-setuid-sandbox",
            "--disable-dev-shm-usage",
            "--disable-gpu",
            "--hide-scrollbars",
            "--no-first-run",
        ],
        description="Extra Chromium launch arguments",
    )
    user_agent: str = Field(default=DEFAULT_USER_AGENT, description="Fixed browser user agent")

    # Rendering Configuration
    url_timeout_ms: int = Field(default=30000, gt=0, description="Navigation timeout for URLs")
    markup_timeout_ms: int = Field(default=15000, gt=0, description="Load timeout for markup")
    url_settle_ms: int = Field(default=2000, ge=0, description="Pause after a URL has loaded")
    markup_settle_ms: int = Field(default=1000, ge=0, description="Pause after markup has loaded")
    url_cache_max_age: int = Field(default=3600, ge=0, description="Cache max-age for URL captures")
    auto_wrap_fragments: bool = Field(
        default=True, description="Wrap bare HTML fragments in a minimal document"
    )
    strict_markup_validation: bool = Field(
        default=False, description="Reject markup that fails the HTML/CSS lint"
    )

    # API Documentation Configuration
    enable_docs: bool = Field(default=True, description="Enable FastAPI docs endpoints")

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Logging level")
    log_dir: Path = Field(default=Path("./logs"), description="Log file directory")

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment value."""
        allowed = {"development", "testing", "production"}
        if v not in allowed:
            raise ValueError(f"Environment must be one of: {allowed}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed:
            raise ValueError(f"Log level must be one of: {allowed}")
        return v.upper()

    @field_validator("allowed_origins", "chromium_args", mode="before")
    @classmethod
    def parse_string_list(cls, v: Union[str, List[str]]) -> List[str]:
        """Parse a list from a JSON array string or a comma-separated string."""
        if isinstance(v, str):
            v = v.strip()
            if v.startswith("[") and v.endswith("]"):
                try:
                    return json.loads(v)
                except json.JSONDecodeError:
                    pass
            return [item.strip() for item in v.split(",") if item.strip()]
        return v

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, env_prefix="HTMLSHOT_"
    )


# Global settings instance - will be initialized when needed
settings = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global settings
    if settings is None:
        settings = Settings()
    return settings


def reload_settings() -> Settings:
    """Reload settings from environment."""
    global settings
    settings = Settings()
    return settings
