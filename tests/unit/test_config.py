"""Unit tests for environment-driven settings."""

import pytest
from pydantic import ValidationError

from codarc_push.core.config import Settings


def test_defaults():
    settings = Settings(_env_file=None)
    assert settings.dispatch_path == "/sendPushNotification"
    assert settings.fcm_send_timeout_seconds == 30.0
    assert settings.fcm_dry_run is False
    assert settings.firebase_app_name == "codarc-push"


def test_reads_environment(monkeypatch):
    monkeypatch.setenv("FCM_SEND_TIMEOUT_SECONDS", "5")
    monkeypatch.setenv("FCM_DRY_RUN", "true")
    monkeypatch.setenv("FIREBASE_PROJECT_ID", "codarc-events")

    settings = Settings(_env_file=None)

    assert settings.fcm_send_timeout_seconds == 5.0
    assert settings.fcm_dry_run is True
    assert settings.firebase_project_id == "codarc-events"


def test_non_positive_timeout_rejected(monkeypatch):
    monkeypatch.setenv("FCM_SEND_TIMEOUT_SECONDS", "0")
    with pytest.raises(ValidationError):
        Settings(_env_file=None)
