"""
OpenProject Provider Settings - Configuration management using Pydantic Settings.

Loads configuration from environment variables and .env files.
"""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class OpenProjectSettings(BaseSettings):
    """
    Provider configuration settings.

    Settings are loaded from:
    1. Environment variables (highest priority)
    2. .env file in current directory
    3. Default values (lowest priority)
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_prefix="OP_",  # All provider env vars must start with OP_
    )

    # OpenProject connection
    app_url: str | None = Field(
        default=None,
        description="OpenProject base URL, e.g. https://openproject.example.com (env: OP_APP_URL)",
    )

    apikey: str | None = Field(
        default=None,
        description="API key for OpenProject (env: OP_APIKEY)",
        repr=False,
    )

    request_timeout: float | None = Field(
        default=None,
        description="HTTP timeout in seconds; unset means no client-side timeout (env: OP_REQUEST_TIMEOUT)",
    )

    # Pulumi Configuration
    pulumi_config_passphrase: str = Field(
        default="openproject",
        description="Pulumi passphrase for state encryption (env: PULUMI_CONFIG_PASSPHRASE)",
        validation_alias="PULUMI_CONFIG_PASSPHRASE",  # Standard Pulumi env var
        repr=False,
    )

    pulumi_state_dir: Path = Field(
        default=Path(".openproject/state"),
        description="Directory for the local Pulumi file backend (env: OP_PULUMI_STATE_DIR)",
    )

    stack_name: str = Field(
        default="dev",
        description="Pulumi stack name (env: OP_STACK_NAME)",
    )

    # Logging Configuration
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR) (env: OP_LOG_LEVEL)",
    )


# Global settings instance
_settings: OpenProjectSettings | None = None


def get_settings() -> OpenProjectSettings:
    """
    Get the global settings instance.

    Creates the settings instance on first call, then returns cached instance.

    Returns:
        OpenProjectSettings instance
    """
    global _settings
    if _settings is None:
        _settings = OpenProjectSettings()
    return _settings


def reload_settings() -> OpenProjectSettings:
    """
    Reload settings from environment/files.

    Useful for testing or when .env file changes.

    Returns:
        Fresh OpenProjectSettings instance
    """
    global _settings
    _settings = OpenProjectSettings()
    return _settings
