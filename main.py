import gc
import logging
import sys

import pyqtgraph as pg
from PySide6.QtWidgets import QApplication, QMessageBox

from core.errors import InstrumentError
from gui.main_window import MainWindow
from gui.qsettings_adapter import create_gui_settings_store
from instrument import Instrument, ScpiInstrument, SimulatedInstrument
from shared.app_settings import AppSettings

logger = logging.getLogger("pitayascope")


pg.setConfigOptions(antialias=True)

# Fewer gen0 collections while the display refreshes.
gc.set_threshold(1500, 15, 15)


def create_instrument(settings: AppSettings) -> Instrument:
    if settings.simulated:
        return SimulatedInstrument()
    instrument = ScpiInstrument(settings.host, settings.port, timeout=settings.timeout_s)
    instrument.connect()
    return instrument


def main() -> int:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app = QApplication(sys.argv)
    app.setApplicationName("PitayaScope")

    store = create_gui_settings_store()
    settings = store.get()
    try:
        instrument = create_instrument(settings)
    except InstrumentError as exc:
        logger.error("Instrument unavailable: %s", exc)
        QMessageBox.critical(None, "PitayaScope", f"Cannot reach the instrument at {settings.host}:{settings.port}.\n\n{exc}")
        return 1

    window = MainWindow(instrument, settings=settings)
    window.bind_settings_store(store)
    try:
        window.sync_from_instrument()
    except InstrumentError as exc:
        logger.error("Instrument did not answer: %s", exc)
        QMessageBox.critical(None, "PitayaScope", f"The instrument did not answer.\n\n{exc}")
        instrument.close()
        return 1
    window.show()
    try:
        return app.exec()
    finally:
        instrument.close()


if __name__ == "__main__":
    raise SystemExit(main())
