"""Persist AppSettings through QSettings.

`shared.app_settings` stays free of Qt; this module plugs QSettings in as
its `SettingsPersistence`. Values are kept under a ``scope/`` group.
"""
from __future__ import annotations

from dataclasses import fields

from PySide6.QtCore import QSettings

from shared.app_settings import AppSettings, AppSettingsStore

ORGANIZATION = "PitayaScope"
APPLICATION = "PitayaScope"
GROUP = "scope"


class QSettingsPersistence:
    """Native-format settings storage (registry, plist or ini file)."""

    def __init__(self, organization: str = ORGANIZATION, application: str = APPLICATION) -> None:
        self._qsettings = QSettings(organization, application)
        self._keys = tuple(field.name for field in fields(AppSettings))

    def load(self) -> dict:
        stored = {}
        self._qsettings.beginGroup(GROUP)
        try:
            for key in self._keys:
                if self._qsettings.contains(key):
                    stored[key] = self._qsettings.value(key)
        finally:
            self._qsettings.endGroup()
        return stored

    def save(self, data: dict) -> None:
        self._qsettings.beginGroup(GROUP)
        try:
            for key, value in data.items():
                # Some backends lose the bool type; the store coerces it back.
                self._qsettings.setValue(key, int(value) if isinstance(value, bool) else value)
        finally:
            self._qsettings.endGroup()
        self._qsettings.sync()


def create_gui_settings_store(
    organization: str = ORGANIZATION,
    application: str = APPLICATION,
) -> AppSettingsStore:
    return AppSettingsStore(persistence=QSettingsPersistence(organization, application))


__all__ = ["QSettingsPersistence", "create_gui_settings_store"]
