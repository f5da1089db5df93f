"""Application configuration."""

import logging
from typing import Any

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

CUSTOM_METRIC_DOMAIN = "custom.googleapis.com"


class Config(BaseSettings):
    """
    Monitoring client configuration.

    Loads configuration from keyword arguments or environment variables.

    Environment variables (checked in order: prefixed, then plain):
    - GCLOUDMON_PROJECT_ID or GOOGLE_CLOUD_PROJECT (required)
    - GCLOUDMON_PREFIX (default: "custom.googleapis.com")
    - GCLOUDMON_KEY_FILENAME (default: unset, use application default credentials)
    - GCLOUDMON_LOCAL_MODE or LOCAL_MODE (default: false)
    """

    project_id: str = Field(
        validation_alias=AliasChoices("GCLOUDMON_PROJECT_ID", "GOOGLE_CLOUD_PROJECT"),
    )
    prefix: str = Field(
        default=CUSTOM_METRIC_DOMAIN,
        validation_alias=AliasChoices("GCLOUDMON_PREFIX"),
    )
    key_filename: str | None = Field(
        default=None,
        validation_alias=AliasChoices("GCLOUDMON_KEY_FILENAME"),
    )
    local_mode: bool = Field(
        default=False,
        validation_alias=AliasChoices("GCLOUDMON_LOCAL_MODE", "LOCAL_MODE"),
    )

    model_config = SettingsConfigDict(
        env_file=None,  # Don't read .env files
        case_sensitive=False,
        extra="ignore",
        frozen=True,
        populate_by_name=True,
        cli_parse_args=False,
    )

    def __init__(self, **kwargs: Any):
        """Initialize config and log configuration."""
        super().__init__(**kwargs)

        mode_name = "LOCAL" if self.local_mode else "PRODUCTION"
        logging.info(f"Running in {mode_name} mode")
        logging.info(f"PROJECT_ID: {self.project_id}")
        logging.info(f"PREFIX: {self.prefix}")


__all__ = ["CUSTOM_METRIC_DOMAIN", "Config"]
