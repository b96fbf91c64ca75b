"""Configuration for the Lingohub SDK."""

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

from lingohub import __version__
from lingohub.domain.types import Environment
from lingohub.infrastructure.api import BASE_URL, DEFAULT_TIMEOUT
from lingohub.infrastructure.cache import DEFAULT_LANGUAGE, DEFAULT_TABLE
from lingohub.logger import LogLevel
from lingohub.utils import default_storage_dir

# Order in which missing values are reported
REQUIRED_FIELDS = ("api_key", "app_version", "sdk_version")


class LingohubConfig(BaseModel):
    """Everything the SDK needs to talk to the distribution service."""

    model_config = ConfigDict(frozen=True)

    api_key: Optional[str] = Field(None, description="Lingohub API key")
    app_version: Optional[str] = Field(None, description="Version of the host application")
    sdk_version: Optional[str] = Field(__version__, description="Version of this SDK")
    environment: Environment = Field(Environment.PRODUCTION, description="Distribution environment")
    device_id: Optional[str] = Field(None, description="Opaque stable identifier of this device")

    # Transport
    base_url: str = Field(BASE_URL, description="Base URL of the distribution API")
    request_timeout: float = Field(DEFAULT_TIMEOUT, gt=0, description="Per-request timeout in seconds")

    # Storage and lookup defaults
    storage_dir: Path = Field(default_factory=default_storage_dir, description="Root for persisted SDK data")
    default_table: str = DEFAULT_TABLE
    default_language: str = DEFAULT_LANGUAGE

    # Logging
    log_level: LogLevel = LogLevel.NONE

    @field_validator("api_key", "app_version", "sdk_version", "device_id", mode="before")
    @classmethod
    def _blank_is_missing(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("storage_dir", mode="after")
    @classmethod
    def _expand_storage_dir(cls, value: Path) -> Path:
        return value.expanduser()

    def missing_field(self) -> Optional[str]:
        """Name of the first required value that is not set, if any."""
        for name in REQUIRED_FIELDS:
            if not getattr(self, name):
                return name
        return None

    @classmethod
    def from_env(cls, **overrides) -> "LingohubConfig":
        """Build a configuration from LINGOHUB_* environment variables.

        A ``.env`` file in the working directory is loaded first. Keyword
        arguments win over the environment.
        """
        load_dotenv()

        values: dict[str, object] = {}
        env_map = {
            "api_key": "LINGOHUB_API_KEY",
            "app_version": "LINGOHUB_APP_VERSION",
            "device_id": "LINGOHUB_DEVICE_ID",
            "base_url": "LINGOHUB_BASE_URL",
            "storage_dir": "LINGOHUB_STORAGE_DIR",
            "request_timeout": "LINGOHUB_REQUEST_TIMEOUT",
        }
        for field_name, env_name in env_map.items():
            value = os.getenv(env_name)
            if value:
                values[field_name] = value

        environment = os.getenv("LINGOHUB_ENVIRONMENT")
        if environment:
            values["environment"] = environment.upper()
        log_level = os.getenv("LINGOHUB_LOG_LEVEL")
        if log_level:
            values["log_level"] = log_level.lower()

        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)
