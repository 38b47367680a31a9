"""Configuration settings using Pydantic BaseSettings."""

from pathlib import Path
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application Configuration
    app_host: str = Field(default="0.0.0.0", description="Server host")
    app_port: int = Field(default=3000, description="Server port")
    debug: bool = Field(default=False, description="Enable debug mode")
    environment: str = Field(default="development", description="Deployment environment name")
    cors_origins: List[str] = Field(default=["*"], description="Allowed CORS origins")

    # Front end
    static_dir: Optional[Path] = Field(default=None, description="Directory of static files served at /")

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Logging level")
    log_dir: Optional[Path] = Field(default=None, description="Directory for rotating log files")

    # Query Configuration
    default_page_size: int = Field(default=10, ge=1, description="Page size when none is requested")


# Global settings instance
settings = Settings()
