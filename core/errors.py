"""Error taxonomy shared by the instrument layer and the render pipeline."""
from __future__ import annotations


class InstrumentError(RuntimeError):
    """An instrument command could not be completed."""


class InstrumentUnreachable(InstrumentError):
    """The instrument did not answer (connection refused, reset or timed out)."""


class ProtocolError(InstrumentError):
    """The instrument answered with something that could not be parsed."""


class InvalidScale(ValueError):
    """Scales constructed with an empty or inverted range."""


class DegenerateSurface(ValueError):
    """A transform was requested for a surface with no drawable area."""


__all__ = [
    "InstrumentError",
    "InstrumentUnreachable",
    "ProtocolError",
    "InvalidScale",
    "DegenerateSurface",
]
