"""Settings repository: the single flat configuration record."""

import logging
from typing import Any, Mapping

from mlotasks.models.settings import Settings
from mlotasks.repositories.base import Repository
from mlotasks.storage.base import StorageAdapter

logger = logging.getLogger(__name__)


class SettingsRepository(Repository):
    """Repository for user settings.

    Updates persist automatically only when `autoSave` was on before the
    update; otherwise they stay in memory until `save()` is called.
    """

    def __init__(self, storage: StorageAdapter):
        super().__init__(storage)
        self.settings = Settings()

    def load(self) -> Settings:
        """Merge stored values over the defaults.

        Missing keys fall back to defaults and unknown keys are preserved. On
        failure the previous in-memory record is kept.
        """
        self.loading = True
        self.error = None
        try:
            self.settings = Settings.from_storage(self.storage.get_settings() or {})
        except Exception as e:
            self._record_failure("load settings", e)
        finally:
            self.loading = False
        return self.settings

    def _persist(self, settings: Settings) -> None:
        try:
            self.storage.save_settings(settings.to_storage())
        except Exception as e:
            self._record_failure("save settings", e)
            raise

    def save(self) -> None:
        """Persist the in-memory record unconditionally."""
        self._persist(self.settings)

    def _apply(self, updated: Settings) -> Settings:
        auto_save = self.settings.auto_save
        if auto_save:
            self._persist(updated)
        self.settings = updated
        return updated

    def update_setting(self, key: str, value: Any) -> Settings:
        return self._apply(self.settings.merged({key: value}))

    def update_settings(self, partial: Mapping[str, Any]) -> Settings:
        return self._apply(self.settings.merged(partial))

    def reset(self) -> Settings:
        """Restore every default and persist."""
        defaults = Settings()
        self._persist(defaults)
        self.settings = defaults
        logger.debug("Settings reset to defaults")
        return defaults

    def toggle_dark_mode(self) -> Settings:
        theme = "light" if self.settings.theme == "dark" else "dark"
        updated = self.settings.merged({"theme": theme})
        self._persist(updated)
        self.settings = updated
        return updated

    def get_setting(self, key: str) -> Any:
        return getattr(self.settings, Settings.field_name_for(key), None)

    @property
    def is_dark_mode(self) -> bool:
        return self.settings.theme == "dark"
