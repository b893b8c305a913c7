"""Tests for layered config (env, file, runtime overrides)."""
from foro.config_store import ConfigStore, read_config_file
from foro.settings import Settings


def test_missing_file_gives_defaults(tmp_path):
    store = ConfigStore(Settings, str(tmp_path / "absent.yaml"))
    assert store.get_settings().fanout_batch_size == 500
    assert store.get_settings().pending_notifications_collection == "pending_notifications"


def test_yaml_file_wins_over_env(tmp_path, monkeypatch):
    monkeypatch.setenv("ANDROID_CHANNEL_ID", "from-env")
    config = tmp_path / "config.yaml"
    config.write_text("android_channel_id: from-file\nfanout_batch_size: 100\n")

    settings = ConfigStore(Settings, str(config)).get_settings()

    assert settings.android_channel_id == "from-file"
    assert settings.fanout_batch_size == 100


def test_env_used_without_file(tmp_path, monkeypatch):
    monkeypatch.setenv("PUSH_ENABLED", "false")
    assert ConfigStore(Settings, str(tmp_path / "absent.yaml")).get_settings().push_enabled is False


def test_broken_or_non_mapping_file_is_ignored(tmp_path):
    broken = tmp_path / "broken.yaml"
    broken.write_text("key: [unclosed\n")
    assert read_config_file(broken) == {}

    listing = tmp_path / "list.json"
    listing.write_text("[1, 2]")
    assert read_config_file(listing) == {}


def test_invalid_override_keeps_previous_settings(tmp_path):
    store = ConfigStore(Settings, str(tmp_path / "absent.yaml"))
    store.update({"fanout_batch_size": 250})
    assert store.get_settings().fanout_batch_size == 250

    # Above the provider multicast limit
    store.update({"fanout_batch_size": 1000})
    assert store.get_settings().fanout_batch_size == 250

    store.clear_overrides()
    assert store.get_settings().fanout_batch_size == 500
