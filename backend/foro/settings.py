"""Application settings and configuration."""
import os
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from foro.config_store import ConfigStore

# FCM rejects multicast sends with more tokens than this.
FCM_MULTICAST_LIMIT = 500


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    # App
    app_name: str = "Foro Events API"
    app_version: str = "0.1.0"
    debug: bool = False
    api_v1_prefix: str = "/v1"
    log_level: str = "INFO"

    # CORS
    cors_origins: list[str] = ["http://localhost:*", "http://127.0.0.1:*"]

    # Firebase
    push_enabled: bool = True  # False: no FCM calls, staged records stay pending, test endpoint answers 503
    firebase_project_id: str = ""
    google_application_credentials: str = ""  # Path to service account JSON
    google_application_credentials_json: str = ""  # Full JSON or base64-encoded JSON

    # Firestore collections
    users_collection: str = "users"
    events_collection: str = "events"
    attendances_collection: str = "attendances"
    comments_collection: str = "comments"
    pending_notifications_collection: str = "pending_notifications"

    # Fan-out
    fanout_batch_size: int = Field(default=FCM_MULTICAST_LIMIT, ge=1, le=FCM_MULTICAST_LIMIT)
    notification_body_max_chars: int = Field(default=100, ge=1)
    android_channel_id: str = "event_notifications"
    fanout_listener_enabled: bool = False  # Run the pending_notifications listener inside the API process
    test_notification_limit: int = 10


# CONFIG_FILE env or backend/config.yaml
_config_file = os.environ.get("CONFIG_FILE") or str(
    Path(__file__).resolve().parent.parent / "config.yaml"
)
_config_store = ConfigStore(Settings, _config_file)


class _SettingsProxy:
    """Proxy so 'settings.attr' always reads the current config store value."""

    def __getattr__(self, name: str):
        return getattr(_config_store.get_settings(), name)


settings: Settings = _SettingsProxy()  # type: ignore[assignment]


def get_settings() -> Settings:
    """Return current Settings snapshot."""
    return _config_store.get_settings()


def get_config_store() -> ConfigStore:
    return _config_store
