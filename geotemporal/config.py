"""Application configuration using Pydantic Settings."""

import os
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_REFERER = "https://github.com/geotemporal/geotemporal"
DEFAULT_FORMAT = "geocodejson"
DEFAULT_ZOOM = 10


class GeocodingClientConfig(BaseModel):
    """
    Provider configuration for a GeocodingClient.

    Set once at client construction; immutable afterwards.
    """

    model_config = ConfigDict(frozen=True)

    base_url: str = Field(..., description="Nominatim base URL, e.g. https://nominatim.openstreetmap.org")
    referer: str = Field(default=DEFAULT_REFERER, description="Referer header sent with every request")
    format: str = Field(default=DEFAULT_FORMAT, description="Response format requested from the provider")
    zoom: int = Field(
        default=DEFAULT_ZOOM,
        ge=0,
        le=255,
        description="Reverse geocoding detail level (10 = city)"
    )
    email: Optional[str] = Field(default=None, description="Contact email sent as a query parameter")
    timeout: float = Field(default=10.0, gt=0, description="HTTP transport timeout in seconds")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application Configuration
    app_name: str = Field(
        default="Geotemporal API",
        description="Application name"
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    log_level: str = Field(
        default="INFO",
        description="Root logging level"
    )

    # Geocoding Configuration
    nominatim_url: str = Field(
        default="https://nominatim.openstreetmap.org",
        description="Nominatim geocoding service URL"
    )
    geocoding_referer: str = Field(
        default=DEFAULT_REFERER,
        description="Referer header for geocoding requests"
    )
    geocoding_format: str = Field(
        default=DEFAULT_FORMAT,
        description="Response format requested from Nominatim"
    )
    geocoding_zoom: int = Field(
        default=DEFAULT_ZOOM,
        ge=0,
        le=255,
        description="Reverse geocoding zoom level (0 = country, 18 = building)"
    )
    geocoding_email: Optional[str] = Field(
        default=None,
        description="Contact email sent to Nominatim with every request"
    )
    geocoding_timeout: float = Field(
        default=10.0,
        gt=0,
        le=120,
        description="Geocoding request timeout in seconds"
    )

    model_config = SettingsConfigDict(
        env_file=".env" if not os.getenv("TESTING") else None,
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @field_validator("nominatim_url")
    @classmethod
    def validate_nominatim_url(cls, v: str) -> str:
        """Validate that the Nominatim URL is an http(s) URL."""
        if not v.startswith(("http://", "https://")):
            raise ValueError(
                "NOMINATIM_URL must start with http:// or https://"
            )
        return v.rstrip("/")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate that the log level is a standard logging level name."""
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"LOG_LEVEL must be a logging level name, got {v}")
        return level

    def client_config(self) -> GeocodingClientConfig:
        """Build the geocoding client configuration from these settings."""
        return GeocodingClientConfig(
            base_url=self.nominatim_url,
            referer=self.geocoding_referer,
            format=self.geocoding_format,
            zoom=self.geocoding_zoom,
            email=self.geocoding_email,
            timeout=self.geocoding_timeout,
        )
