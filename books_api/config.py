"""
API configuration settings.
Loaded from environment variables and an optional .env file.
"""

from typing import List, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class APIConfig(BaseSettings):
    """API configuration settings."""

    # API Settings
    api_title: str = "Book Catalogue API"
    api_version: str = "1.0.0"
    api_description: str = "A REST API for creating, listing, updating and deleting books"

    # Server Settings
    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False

    # Database Settings
    store_backend: str = "mongodb"  # mongodb or memory
    mongodb_url: str = "mongodb://localhost:27017"
    mongodb_database: str = "library"
    mongodb_collection: str = "books"
    mongodb_timeout_ms: int = 5000

    # Listing an empty catalogue answers 404 unless disabled
    empty_collection_not_found: bool = True

    # CORS Settings
    cors_origins: List[str] = ["http://localhost:3000"]
    cors_allow_methods: List[str] = ["GET", "POST", "PUT", "DELETE"]
    cors_allow_headers: List[str] = ["Content-Type"]

    # Logging
    log_level: str = "INFO"
    log_format: str = "json"
    log_file: Optional[str] = None

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("store_backend")
    @classmethod
    def validate_store_backend(cls, v):
        """Ensure the store backend is known."""
        valid_backends = ["mongodb", "memory"]
        if v.lower() not in valid_backends:
            raise ValueError(f"store_backend must be one of: {valid_backends}")
        return v.lower()

    @field_validator("port")
    @classmethod
    def validate_port(cls, v):
        """Ensure port is in the TCP range."""
        if v < 1 or v > 65535:
            raise ValueError("port must be between 1 and 65535")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Ensure log level is valid."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"log_level must be one of: {valid_levels}")
        return v.upper()

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v):
        """Ensure log format is valid."""
        valid_formats = ["json", "console"]
        if v.lower() not in valid_formats:
            raise ValueError(f"log_format must be one of: {valid_formats}")
        return v.lower()


# Global config instance
config = APIConfig()
