"""Tests for SettingsRepository."""

import pytest

from mlotasks.errors import StorageError
from mlotasks.repositories import SettingsRepository


class TestSettingsLoad:
    def test_defaults_when_nothing_stored(self, settings_repository):
        assert settings_repository.settings.theme == "light"
        assert settings_repository.get_setting("autoSave") is True
        assert settings_repository.get_setting("auto_save") is True

    def test_stored_values_merge_over_defaults(self, storage):
        storage.save_settings({"theme": "dark", "legacyFlag": 1})
        repo = SettingsRepository(storage)
        repo.load()

        assert repo.settings.theme == "dark"
        assert repo.settings.font_size == "medium"
        assert repo.get_setting("legacyFlag") == 1

    def test_failed_load_keeps_defaults(self, storage):
        storage.fail_reads = True
        repo = SettingsRepository(storage)
        repo.load()

        assert repo.settings.theme == "light"
        assert repo.error is not None


class TestSettingsUpdate:
    def test_auto_save_persists(self, settings_repository, storage):
        settings_repository.update_setting("theme", "dark")

        assert storage.get_settings()["theme"] == "dark"
        assert settings_repository.is_dark_mode is True

    def test_without_auto_save_changes_memory_only(self, settings_repository, storage):
        """Test scenario: autoSave off, theme change stays in memory until save()."""
        settings_repository.update_setting("autoSave", False)
        settings_repository.update_setting("theme", "dark")

        assert settings_repository.settings.theme == "dark"
        assert storage.get_settings()["theme"] == "light"

        settings_repository.save()
        assert storage.get_settings()["theme"] == "dark"

    def test_auto_save_read_before_update(self, settings_repository, storage):
        settings_repository.update_settings({"autoSave": False})
        assert storage.get_settings()["autoSave"] is False

        settings_repository.update_settings({"autoSave": True, "fontSize": "large"})
        assert storage.get_settings()["fontSize"] == "medium"

    def test_reset_persists(self, settings_repository, storage):
        settings_repository.update_settings({"theme": "dark", "autoSave": False})

        settings_repository.reset()

        assert settings_repository.settings.theme == "light"
        assert storage.get_settings()["autoSave"] is True

    def test_toggle_dark_mode_persists_even_without_auto_save(self, settings_repository, storage):
        settings_repository.update_setting("auto_save", False)

        settings_repository.toggle_dark_mode()

        assert storage.get_settings()["theme"] == "dark"
        settings_repository.toggle_dark_mode()
        assert settings_repository.is_dark_mode is False

    def test_failed_save_keeps_memory(self, settings_repository, storage):
        storage.fail_writes = True

        with pytest.raises(StorageError):
            settings_repository.update_setting("theme", "dark")

        assert settings_repository.settings.theme == "light"
