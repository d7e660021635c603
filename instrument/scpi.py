"""Red Pitaya SCPI client.

The board's SCPI server listens on a raw TCP socket (port 5000) and is
opened through PyVISA as a ``TCPIP::<host>::<port>::SOCKET`` resource.
Commands and replies are CRLF terminated. Sample reads come back as
``{v0,v1,...}`` in volts.
"""
from __future__ import annotations

import logging
from typing import Any, Optional

import numpy as np
import pyvisa

from core.errors import InstrumentUnreachable, ProtocolError
from shared.models import Form, GeneratorParameter, InputSource, Source, TriggerParameter

from .base import Instrument

logger = logging.getLogger(__name__)

TERMINATOR = "\r\n"

# pyvisa-py backend; no vendor VISA library needed for SOCKET resources.
VISA_BACKEND = "@py"

_GENERATOR_COMMANDS = {
    GeneratorParameter.AMPLITUDE: "SOUR{n}:VOLT",
    GeneratorParameter.OFFSET: "SOUR{n}:VOLT:OFFS",
    GeneratorParameter.FREQUENCY: "SOUR{n}:FREQ:FIX",
    GeneratorParameter.DUTY_CYCLE: "SOUR{n}:DCYC",
    GeneratorParameter.FORM: "SOUR{n}:FUNC",
}

_TRIGGER_COMMANDS = {
    TriggerParameter.DELAY: "ACQ:TRIG:DLY",
    TriggerParameter.LEVEL: "ACQ:TRIG:LEV",
}

_TRANSPORT_ERRORS = (pyvisa.VisaIOError, OSError)


class ScpiInstrument(Instrument):
    """Instrument reached over the board's SCPI socket (port 5000 by default)."""

    @classmethod
    def instrument_class_name(cls) -> str:
        return "Red Pitaya"

    def __init__(
        self,
        host: str,
        port: int = 5000,
        *,
        timeout: float = 2.0,
        resource_manager: Optional[Any] = None,
    ) -> None:
        super().__init__()
        self._address = (host, int(port))
        self._timeout = float(timeout)
        self._rm = resource_manager
        self._owns_rm = resource_manager is None
        self._inst: Optional[Any] = None

    @property
    def address(self) -> tuple[str, int]:
        return self._address

    @property
    def resource_name(self) -> str:
        return f"TCPIP::{self._address[0]}::{self._address[1]}::SOCKET"

    @property
    def connected(self) -> bool:
        return self._inst is not None

    def connect(self) -> None:
        if self._inst is not None:
            return
        try:
            if self._rm is None:
                self._rm = pyvisa.ResourceManager(VISA_BACKEND)
            inst = self._rm.open_resource(self.resource_name)
        except _TRANSPORT_ERRORS as exc:
            raise InstrumentUnreachable(f"cannot connect to {self._address[0]}:{self._address[1]}: {exc}") from exc
        inst.read_termination = TERMINATOR
        inst.write_termination = TERMINATOR
        inst.timeout = int(round(self._timeout * 1000))
        self._inst = inst
        logger.info("Connected to %s", self.resource_name)

    # ---- Transport ---------------------------------------------------------

    def send(self, command: str) -> None:
        self.connect()
        logger.debug("-> %s", command)
        try:
            self._inst.write(command)
        except _TRANSPORT_ERRORS as exc:
            self._drop_connection()
            raise InstrumentUnreachable(f"{command!r} not sent: {exc}") from exc

    def query(self, command: str) -> str:
        self.connect()
        logger.debug("-> %s", command)
        try:
            reply = self._inst.query(command).strip()
        except _TRANSPORT_ERRORS as exc:
            self._drop_connection()
            raise InstrumentUnreachable(f"no reply to {command!r}: {exc}") from exc
        logger.debug("<- %s", reply if len(reply) < 80 else reply[:77] + "...")
        return reply

    def _drop_connection(self) -> None:
        inst, self._inst = self._inst, None
        if inst is not None:
            try:
                inst.close()
            except _TRANSPORT_ERRORS as exc:
                logger.debug("Closing %s failed: %s", self.resource_name, exc)

    # ---- Acquisition -------------------------------------------------------

    def _start_impl(self) -> None:
        self.send("ACQ:START")

    def _stop_impl(self) -> None:
        self.send("ACQ:STOP")

    def _read_all_impl(self, source: InputSource) -> np.ndarray:
        return parse_samples(self.query(f"ACQ:SOUR{source.value}:DATA?"))

    # ---- Generator ---------------------------------------------------------

    def _set_output_impl(self, source: Source, enabled: bool) -> None:
        self.send(f"OUTPUT{source.value}:STATE {'ON' if enabled else 'OFF'}")

    def _get_generator_impl(self, source: Source, parameter: GeneratorParameter) -> Any:
        reply = self.query(_GENERATOR_COMMANDS[parameter].format(n=source.value) + "?")
        if parameter is GeneratorParameter.FORM:
            try:
                return Form(reply.upper())
            except ValueError as exc:
                raise ProtocolError(f"unknown waveform {reply!r}") from exc
        value = _parse_float(reply)
        if parameter is GeneratorParameter.FREQUENCY:
            return int(round(value))
        return value

    def _set_generator_impl(self, source: Source, parameter: GeneratorParameter, value: Any) -> None:
        command = _GENERATOR_COMMANDS[parameter].format(n=source.value)
        argument = value.value if isinstance(value, Form) else value
        self.send(f"{command} {argument}")

    # ---- Trigger -----------------------------------------------------------

    def _get_trigger_impl(self, parameter: TriggerParameter) -> Any:
        value = _parse_float(self.query(_TRIGGER_COMMANDS[parameter] + "?"))
        if parameter is TriggerParameter.DELAY:
            return int(round(value))
        return value

    def _set_trigger_impl(self, parameter: TriggerParameter, value: Any) -> None:
        self.send(f"{_TRIGGER_COMMANDS[parameter]} {value}")

    def _close_impl(self) -> None:
        self._drop_connection()
        if self._owns_rm and self._rm is not None:
            rm, self._rm = self._rm, None
            rm.close()


def _parse_float(reply: str) -> float:
    try:
        return float(reply)
    except ValueError as exc:
        raise ProtocolError(f"expected a number, got {reply!r}") from exc


def parse_samples(reply: str) -> np.ndarray:
    """Parse a ``{v0,v1,...}`` data reply into a float array."""
    text = reply.strip()
    if not (text.startswith("{") and text.endswith("}")):
        raise ProtocolError(f"malformed data reply {text[:32]!r}")
    body = text[1:-1].strip()
    if not body:
        return np.zeros(0, dtype=np.float64)
    try:
        return np.array([float(item) for item in body.split(",")], dtype=np.float64)
    except ValueError as exc:
        raise ProtocolError(f"malformed sample in data reply: {exc}") from exc


__all__ = ["ScpiInstrument", "parse_samples"]
