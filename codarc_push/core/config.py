"""
Application configuration loaded from environment variables with sensible
defaults for local development.

All settings are validated at startup via Pydantic ``BaseSettings``.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Central configuration for the push dispatcher."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # -- Application --
    app_name: str = "codarc push dispatcher"
    app_version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"

    # -- API --
    dispatch_path: str = "/sendPushNotification"

    # -- Firebase Cloud Messaging --
    firebase_service_account_path: str = ""
    firebase_credentials_json: str = ""
    firebase_project_id: str = ""
    firebase_app_name: str = "codarc-push"
    fcm_send_timeout_seconds: float = Field(default=30.0, gt=0)
    fcm_dry_run: bool = False


settings = Settings()


def get_settings() -> Settings:
    return settings
