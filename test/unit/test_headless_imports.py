"""Verify the core, instrument and shared layers import without PySide6."""
from __future__ import annotations

import sys

import pytest

HEADLESS_PACKAGES = ("core", "instrument", "shared", "gui")


@pytest.fixture
def headless(monkeypatch):
    """Block PySide6 and force fresh imports of the project packages."""
    before = set(sys.modules)
    for name in [k for k in sys.modules if k.split(".")[0] in HEADLESS_PACKAGES]:
        monkeypatch.delitem(sys.modules, name, raising=False)
    for name in ("PySide6", "PySide6.QtCore", "PySide6.QtGui", "PySide6.QtWidgets"):
        monkeypatch.setitem(sys.modules, name, None)
    yield
    # Drop modules first imported here; monkeypatch puts the originals back.
    for name in set(sys.modules) - before:
        if name.split(".")[0] in HEADLESS_PACKAGES:
            sys.modules.pop(name, None)


class TestHeadlessImports:
    def test_core_headless_import(self, headless):
        from core import MessageBus, Renderer, Scales

        assert MessageBus is not None
        assert Renderer is not None
        assert Scales is not None

    def test_instrument_headless_import(self, headless):
        from instrument import ScpiInstrument, SimulatedInstrument

        assert ScpiInstrument is not None
        assert SimulatedInstrument is not None

    def test_signals_and_settings_headless_import(self, headless):
        from shared.app_settings import AppSettingsStore, InMemoryPersistence
        from shared.signals import application

        store = AppSettingsStore(persistence=InMemoryPersistence())
        assert store.get().port == 5000
        assert application.Quit() == application.Quit()

    def test_gui_requires_qt(self, headless):
        with pytest.raises(ImportError):
            import gui.painter  # noqa: F401
