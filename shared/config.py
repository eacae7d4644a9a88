"""
Shared configuration management for the Procurement Listener.
"""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_PORT = 11000


class BaseConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_prefix="PROCUREMENT_",
        env_file=".env",
        case_sensitive=False,
        extra="allow"
    )

    # Environment
    env: str = Field(default="local")
    log_level: str = Field(default="info")

    # Catalog metadata (JSON or YAML)
    metadata_file: str = Field(default="metadata.json")


class ServiceConfig(BaseConfig):
    """Service-specific configuration."""

    service_name: str
    port: int = Field(default=DEFAULT_PORT)
    host: str = "0.0.0.0"


def get_config(service_name: str, port: Optional[int] = None, **overrides) -> ServiceConfig:
    """Get configuration for a specific service.

    Values passed explicitly win over ``PROCUREMENT_*`` environment variables,
    which win over the defaults. ``None`` means "not given".
    """
    values = {key: value for key, value in overrides.items() if value is not None}
    if port is not None:
        values["port"] = port
    return ServiceConfig(service_name=service_name, **values)
