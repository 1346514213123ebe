"""Tests for reconciliation settings loading."""
from reconciliation.config import load_settings, DEFAULT_SETTINGS


class TestLoadSettings:
    def test_bundled_settings(self):
        settings = load_settings()
        assert settings["edit_sync"]["endpoint"].endswith("/detection-edit-sync")
        assert settings["edit_sync"]["timeout_seconds"] == 30
        assert settings["apply"]["default_added_class"] == "siding"

    def test_partial_override_keeps_defaults(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text("edit_sync:\n  endpoint: http://example.test/sync\n")
        settings = load_settings(path)
        assert settings["edit_sync"]["endpoint"] == "http://example.test/sync"
        assert settings["edit_sync"]["timeout_seconds"] == 30
        assert settings["apply"] == DEFAULT_SETTINGS["apply"]

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_settings(path) == DEFAULT_SETTINGS
