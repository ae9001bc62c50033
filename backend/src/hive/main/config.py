import json
import logging
import os
import sys
from typing import Optional

from pydantic import computed_field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from hive.definitions import ROOT_DIR

MANIFEST_LOCATION = f"{ROOT_DIR}/.release-please-manifest.json"

KNOWN_PROVIDERS = ("openai", "gemini", "anthropic")


def _set_app_version():
    try:
        with open(MANIFEST_LOCATION) as f:
            manifest_data = json.load(f)

        version = manifest_data["."]
        if os.environ.get("DEV", False):
            return f"{version}-dev"

        return version
    except FileNotFoundError:
        return "DEV"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="allow")

    app_version: str = _set_app_version()

    # Infrastructure dependencies
    postgres_user: str
    postgres_host: str
    postgres_password: str
    postgres_port: int
    postgres_db: str
    redis_host: str = "localhost"
    redis_port: int = 6379

    # Background worker configuration
    worker_max_jobs: int = 20

    # Security
    api_prefix: str = "/api"
    admin_api_key: Optional[str] = None
    admin_api_key_header_name: str = "X-API-Key"
    actor_header_name: str = "X-Actor-Id"

    # Shared secret between the scheduler and the retention run-all endpoint
    cron_token: Optional[str] = None

    # Data retention
    retention_dry_run: bool = False
    retention_batch_size: int = 5000
    retention_select_chunk: int = 1000
    retention_run_all_url: Optional[str] = None
    retention_cron_minute: int = 17

    # Tenant defaults
    default_enabled_providers: list[str] = ["openai"]

    # Dev
    dev: bool = False

    @model_validator(mode="after")
    def validate_retention_settings(self):
        """Ensure retention batching values are sane."""
        if self.retention_batch_size <= 0:
            logging.error(
                "RETENTION_BATCH_SIZE must be greater than zero. Current value: %s",
                self.retention_batch_size,
            )
            sys.exit(1)

        if self.retention_select_chunk <= 0:
            logging.error(
                "RETENTION_SELECT_CHUNK must be greater than zero. Current value: %s",
                self.retention_select_chunk,
            )
            sys.exit(1)

        if self.retention_select_chunk > self.retention_batch_size:
            logging.warning(
                "RETENTION_SELECT_CHUNK (%s) exceeds RETENTION_BATCH_SIZE (%s). "
                "Each batch will be selected with a single page.",
                self.retention_select_chunk,
                self.retention_batch_size,
            )

        if not 0 <= self.retention_cron_minute <= 59:
            logging.error(
                "RETENTION_CRON_MINUTE must be between 0 and 59. Current value: %s",
                self.retention_cron_minute,
            )
            sys.exit(1)

        return self

    @model_validator(mode="after")
    def validate_worker_settings(self):
        if self.worker_max_jobs <= 0:
            logging.error(
                "WORKER_MAX_JOBS must be greater than zero. Current value: %s",
                self.worker_max_jobs,
            )
            sys.exit(1)

        return self

    @model_validator(mode="after")
    def validate_default_providers(self):
        unknown = [p for p in self.default_enabled_providers if p not in KNOWN_PROVIDERS]
        if unknown:
            logging.warning(
                "DEFAULT_ENABLED_PROVIDERS contains unknown providers %s; they are ignored",
                unknown,
            )
        return self

    @computed_field
    @property
    def database_url(self) -> str:
        return (
            f"postgresql+asyncpg://{self.postgres_user}:"
            f"{self.postgres_password}@{self.postgres_host}:"
            f"{self.postgres_port}/{self.postgres_db}"
        )


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get settings singleton, creating it if needed.

    Returns:
        Settings: The application settings instance.
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def set_settings(settings: Settings) -> None:
    """Override settings (primarily for testing)."""
    global _settings
    _settings = settings


def reset_settings() -> None:
    """Reset settings to None (for test cleanup)."""
    global _settings
    _settings = None


def get_loglevel():
    loglevel = os.getenv("LOGLEVEL", "INFO")

    match loglevel:
        case "INFO":
            return logging.INFO
        case "WARNING":
            return logging.WARNING
        case "ERROR":
            return logging.ERROR
        case "CRITICAL":
            return logging.CRITICAL
        case "DEBUG":
            return logging.DEBUG
        case _:
            return logging.INFO
