"""Qt integration for the core MessageBus.

The bus itself is toolkit-free. This module posts queue drains onto the Qt
event loop, so every dispatch runs between two event-loop waits, and
re-exposes update failures as a Qt signal.
"""
from __future__ import annotations

from typing import Callable

from PySide6 import QtCore

from core.bus import MessageBus


def post_to_event_loop(callback: Callable[[], None]) -> None:
    QtCore.QTimer.singleShot(0, callback)


def create_qt_bus() -> MessageBus:
    """Bus whose drains run on the next turn of the Qt event loop."""
    return MessageBus(schedule=post_to_event_loop)


class BusSignals(QtCore.QObject):
    """Qt signals for bus events."""
    failed = QtCore.Signal(object)  # core.bus.Failure


def connect_bus_signals(bus: MessageBus) -> tuple[BusSignals, Callable[[], None]]:
    """Create a Qt signal bridge for bus failures.

    Returns:
        A tuple of (signals object, unsubscribe function).
    """
    signals = BusSignals()
    unsubscribe = bus.add_failure_callback(signals.failed.emit)
    return signals, unsubscribe


__all__ = ["BusSignals", "connect_bus_signals", "create_qt_bus", "post_to_event_loop"]
