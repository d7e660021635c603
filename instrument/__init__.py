"""Instrument drivers: the abstract contract, the SCPI client and a simulator."""

from .base import Instrument
from .scpi import ScpiInstrument
from .simulated import SimulatedInstrument

__all__ = ["Instrument", "ScpiInstrument", "SimulatedInstrument"]
