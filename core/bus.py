"""Single-threaded message bus for the component tree.

Every component is attached to the bus and gets a `Handle`. A component
emits typed signals through its handle; the bus delivers them to the
component's own ``on_signal(signal, model)`` and then, through the mapping
its parent declared when adopting it, re-emits the translated signal for the
parent. One leaf interaction therefore surfaces at the root as exactly one
application-level signal, one mapping per tree level.

All deliveries go through one FIFO queue. Signals emitted while an update is
running are appended to the end of the queue and handled after the current
one; nothing is processed re-entrantly.
"""
from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from typing import Any, Callable, Deque, Dict, Mapping, Optional, Protocol, Tuple

from .errors import InstrumentError

logger = logging.getLogger(__name__)


class Component(Protocol):
    def on_signal(self, signal: Any, model: Any) -> None: ...


@dataclass(frozen=True)
class Failure:
    """An update that raised `InstrumentError`; its model was left untouched."""

    component: str
    signal: Any
    error: InstrumentError

    def describe(self) -> str:
        return f"{type(self.signal).__name__}: {self.error}"


FailureCallback = Callable[[Failure], None]


class SignalMap:
    """Translation of a child's signal variants into parent signals.

    Variants without a route are not forwarded.
    """

    def __init__(self, routes: Mapping[type, Callable[[Any], Any]]) -> None:
        self._routes: Dict[type, Callable[[Any], Any]] = dict(routes)

    def __contains__(self, variant: type) -> bool:
        return variant in self._routes

    def __call__(self, signal: Any) -> Optional[Any]:
        route = self._routes.get(type(signal))
        if route is None:
            return None
        return route(signal)


class Handle:
    """A component's place in the tree: its model, parent and parent mapping."""

    def __init__(self, bus: "MessageBus", component: Component, model: Any, name: str) -> None:
        self._bus = bus
        self.component = component
        self.model = model
        self.name = name
        self.parent: Optional[Handle] = None
        self.mapping: Optional[SignalMap] = None
        self.children: list[Handle] = []

    def __repr__(self) -> str:
        return f"Handle({self.name!r})"

    def emit(self, signal: Any) -> None:
        self._bus.emit(self, signal)

    def adopt(self, child: "Handle", routes: Mapping[type, Callable[[Any], Any]]) -> "Handle":
        """Make `child` report to this handle through `routes`."""
        if child.parent is not None:
            raise ValueError(f"{child.name} already reports to {child.parent.name}")
        if child is self:
            raise ValueError("a component cannot adopt itself")
        child.parent = self
        child.mapping = SignalMap(routes)
        self.children.append(child)
        return child

    def translate(self, signal: Any) -> Optional[Any]:
        if self.parent is None or self.mapping is None:
            return None
        return self.mapping(signal)


class MessageBus:
    """FIFO dispatcher shared by the whole component tree.

    Args:
        schedule: optional hook called with `drain` whenever the queue goes
            from empty to non-empty. The Qt adapter uses it to post the drain
            to the event loop; without it the owner calls `drain()` itself.
    """

    def __init__(self, schedule: Optional[Callable[[Callable[[], None]], None]] = None) -> None:
        self._schedule = schedule
        self._queue: Deque[Tuple[Handle, Any]] = deque()
        self._draining = False
        self._closed = False
        self._failure_callbacks: Dict[int, FailureCallback] = {}
        self._next_token = 0

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def pending(self) -> int:
        return len(self._queue)

    def attach(self, component: Component, model: Any = None, *, name: Optional[str] = None) -> Handle:
        return Handle(self, component, model, name or type(component).__name__)

    def emit(self, handle: Handle, signal: Any) -> None:
        if self._closed:
            logger.debug("Dropping %r from %s: bus closed", signal, handle.name)
            return
        was_idle = not self._queue
        self._queue.append((handle, signal))
        if was_idle and not self._draining and self._schedule is not None:
            self._schedule(self.drain)

    def drain(self) -> int:
        """Deliver queued signals until the queue is empty; return how many ran."""
        if self._draining:
            return 0
        self._draining = True
        delivered = 0
        try:
            while self._queue and not self._closed:
                handle, signal = self._queue.popleft()
                delivered += 1
                if not self._deliver(handle, signal):
                    continue
                parent_signal = handle.translate(signal)
                if parent_signal is not None and not self._closed:
                    self._queue.append((handle.parent, parent_signal))
        finally:
            self._draining = False
            # An escaping exception leaves work queued; emit() won't schedule again.
            if self._queue and not self._closed and self._schedule is not None:
                self._schedule(self.drain)
        return delivered

    def _deliver(self, handle: Handle, signal: Any) -> bool:
        try:
            handle.component.on_signal(signal, handle.model)
        except InstrumentError as exc:
            logger.warning("%s failed to handle %s: %s", handle.name, type(signal).__name__, exc)
            self._report(Failure(handle.name, signal, exc))
            return False
        return True

    def _report(self, failure: Failure) -> None:
        for callback in list(self._failure_callbacks.values()):
            callback(failure)

    def add_failure_callback(self, callback: FailureCallback) -> Callable[[], None]:
        token = self._next_token
        self._next_token += 1
        self._failure_callbacks[token] = callback

        def unsubscribe() -> None:
            self._failure_callbacks.pop(token, None)

        return unsubscribe

    def close(self) -> None:
        """Stop dispatching for good; queued and later signals are dropped."""
        if self._closed:
            return
        self._closed = True
        dropped = len(self._queue)
        self._queue.clear()
        if dropped:
            logger.debug("Bus closed with %d pending signal(s)", dropped)


__all__ = ["Component", "Failure", "FailureCallback", "Handle", "MessageBus", "SignalMap"]
