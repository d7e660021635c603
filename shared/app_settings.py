from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, fields, replace
import itertools
from typing import Any, Callable, Dict, Optional, Protocol

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AppSettings:
    host: str = "192.168.1.5"
    port: int = 5000
    timeout_s: float = 2.0
    refresh_hz: float = 20.0
    grid_divisions: int = 10
    simulated: bool = False

    def __post_init__(self) -> None:
        if not 0 < self.port < 65536:
            raise ValueError("port must be within 1..65535")
        if self.timeout_s <= 0:
            raise ValueError("timeout_s must be positive")
        if self.refresh_hz <= 0:
            raise ValueError("refresh_hz must be positive")
        if self.grid_divisions < 1:
            raise ValueError("grid_divisions must be at least 1")


class SettingsPersistence(Protocol):
    """Storage backend for AppSettingsStore."""

    def load(self) -> dict: ...

    def save(self, data: dict) -> None: ...


class InMemoryPersistence:
    """Persistence that forgets everything on exit; used headless and in tests."""

    def __init__(self, initial: Optional[dict] = None) -> None:
        self.data: dict = dict(initial or {})

    def load(self) -> dict:
        return dict(self.data)

    def save(self, data: dict) -> None:
        self.data.update(data)


def _coerce(kind: Any, raw: Any) -> Any:
    # QSettings hands back strings for most backends.
    if kind in (bool, "bool"):
        if isinstance(raw, str):
            return raw.strip().lower() in ("1", "true", "yes", "on")
        return bool(raw)
    if kind in (int, "int"):
        return int(float(raw))
    if kind in (float, "float"):
        return float(raw)
    return str(raw)


SettingsCallback = Callable[[AppSettings], None]


class AppSettingsStore:
    """Application preferences with change notification.

    Lives on the GUI thread like everything else that reads it. Updates are
    validated by `AppSettings` before anything is stored, and only the
    fields that actually changed are written back to the persistence.
    """

    def __init__(self, *, persistence: Optional[SettingsPersistence] = None) -> None:
        self._persistence: SettingsPersistence = persistence or InMemoryPersistence()
        self._callbacks: Dict[int, SettingsCallback] = {}
        self._tokens = itertools.count()
        self._settings = self._restore()

    def _restore(self) -> AppSettings:
        stored = self._persistence.load()
        values: Dict[str, Any] = {}
        for field in fields(AppSettings):
            if field.name not in stored:
                continue
            try:
                values[field.name] = _coerce(field.type, stored[field.name])
            except (TypeError, ValueError):
                logger.warning("Ignoring invalid stored value for %s: %r", field.name, stored[field.name])
        try:
            return AppSettings(**values)
        except ValueError as exc:
            logger.warning("Stored settings rejected (%s); using defaults", exc)
            return AppSettings()

    def get(self) -> AppSettings:
        return self._settings

    def update(self, **changes: Any) -> AppSettings:
        previous = self._settings
        current = replace(previous, **changes)
        changed = {name: value for name, value in asdict(current).items() if getattr(previous, name) != value}
        self._settings = current
        if changed:
            self._persistence.save(changed)
            self._notify(current)
        return current

    def subscribe(self, callback: SettingsCallback, *, replay: bool = True) -> Callable[[], None]:
        """Call `callback` on every change (and once now if `replay`); returns an unsubscribe function."""
        token = next(self._tokens)
        self._callbacks[token] = callback
        if replay:
            callback(self._settings)
        return lambda: self._callbacks.pop(token, None)

    def _notify(self, settings: AppSettings) -> None:
        for callback in list(self._callbacks.values()):
            try:
                callback(settings)
            except Exception:
                logger.exception("Settings subscriber %r failed", callback)


__all__ = ["AppSettings", "AppSettingsStore", "InMemoryPersistence", "SettingsPersistence"]
