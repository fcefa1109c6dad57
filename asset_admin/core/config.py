# File: asset_admin/core/config.py
"""
Configuration settings for the asset admin API.

This module defines application settings using Pydantic's BaseSettings,
which supports environment variable loading and validation.
"""

import json
import secrets
from typing import List, Optional, Union

from pydantic import Field, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Values are read from the process environment first and then from a
    local ``.env`` file, with validation and type conversion.
    """

    model_config = SettingsConfigDict(
        case_sensitive=True,
        env_file=".env",
        extra="ignore",
    )

    # API settings
    API_V1_STR: str = "/api/v1"
    PROJECT_NAME: str = "Asset Admin"
    VERSION: str = "1.0.0"

    # Environment
    ENVIRONMENT: str = "development"
    DEBUG: bool = False
    PRODUCTION: bool = False

    # Security
    SECRET_KEY: str = secrets.token_urlsafe(32)
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24  # 1 day

    # CORS
    BACKEND_CORS_ORIGINS: Union[List[str], str] = []

    @field_validator("BACKEND_CORS_ORIGINS", mode="before")
    @classmethod
    def assemble_cors_origins(cls, v: Union[str, List[str], None]) -> List[str]:
        """Parse CORS origins given either as a JSON list or comma-separated."""
        if isinstance(v, str):
            try:
                parsed = json.loads(v)
                if isinstance(parsed, list):
                    return [str(item) for item in parsed]
            except json.JSONDecodeError:
                pass
            return [i.strip() for i in v.split(",") if i.strip()]
        return v or []

    # Database
    DATABASE_PATH: str = "assets.db"
    DATABASE_URL: Optional[str] = Field(default=None, validate_default=True)

    @field_validator("DATABASE_URL", mode="after")
    @classmethod
    def assemble_db_connection(cls, v: Optional[str], info: ValidationInfo) -> str:
        """Fall back to a SQLite file under DATABASE_PATH when no URL is given."""
        if v:
            return v
        return f"sqlite:///{info.data.get('DATABASE_PATH', 'assets.db')}"

    # Import / export
    IMPORT_SHEET_NAME: str = "Asset Import"
    EXPORT_SHEET_NAME: str = "Assets"
    IMPORT_TEMPLATE_MAX_ROWS: int = 500

    @field_validator("IMPORT_TEMPLATE_MAX_ROWS")
    @classmethod
    def validate_template_rows(cls, v: int) -> int:
        """Keep the dropdown range between 2 and 10,000 rows."""
        return max(2, min(v, 10000))

    # Labels
    LABEL_DEFAULT_PRINTER: str = "Brother QL-500"
    LABEL_PRINT_COMMAND: str = "lp"
    LABEL_PRINTER_LIST_COMMAND: str = "lpstat"
    LABEL_PRINT_TIMEOUT: int = 30  # seconds
    LABEL_DPI: int = 300

    # Logging
    LOG_LEVEL: str = "INFO"

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a valid logging level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        return v.upper() if v.upper() in valid_levels else "INFO"


# Create settings instance
settings = Settings()
