"""Toolkit-free core: message bus, coordinate transform and frame rendering."""

from .bus import Failure, Handle, MessageBus, SignalMap
from .data import DataBuffer
from .errors import DegenerateSurface, InstrumentError, InstrumentUnreachable, InvalidScale, ProtocolError
from .grid import GridLine, grid_lines
from .paint import HAIRLINE, PaintContext, Panel
from .render import GridPanel, Renderer
from .scales import Affine, Scales

__all__ = [
    "Affine",
    "DataBuffer",
    "DegenerateSurface",
    "Failure",
    "GridLine",
    "GridPanel",
    "HAIRLINE",
    "Handle",
    "InstrumentError",
    "InstrumentUnreachable",
    "InvalidScale",
    "MessageBus",
    "PaintContext",
    "Panel",
    "ProtocolError",
    "Renderer",
    "Scales",
    "SignalMap",
    "grid_lines",
]
