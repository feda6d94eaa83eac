import threading
import logging
from typing import Optional

from sensorbridge.core.classifier import FrameClassifier
from sensorbridge.core.correlator import CommandCorrelator, DEFAULT_TIMEOUT_S
from sensorbridge.core.protocol import Command, ResponseStatus
from sensorbridge.core.reader import ReaderLoop
from sensorbridge.core.telemetry import TelemetryDecoder

logger = logging.getLogger("sensorbridge.bridge")


class DeviceBridge:
    """Wires transport, correlator, decoder and reader for one device.

    The HTTP layer only talks to issue_start/issue_stop/issue_configure
    and reads `is_reading`, `frequency` and `debug`.
    """

    def __init__(self, transport, persistence, frequency: int = 115, debug: bool = False,
                 timeout_s: float = DEFAULT_TIMEOUT_S, idle_sleep_s: float = 0.01):
        self.transport = transport
        self.persistence = persistence
        self.frequency = frequency
        self.debug = debug
        self._reading = threading.Event()
        self.correlator = CommandCorrelator(transport, timeout_s=timeout_s)
        self.decoder = TelemetryDecoder(persistence.store)
        self.classifier = FrameClassifier(self.correlator, self.decoder)
        self.reader = ReaderLoop(transport, self.classifier, idle_sleep_s=idle_sleep_s)
        persistence.set_identity(port=getattr(transport, "port_name", None), frequency=frequency, debug=debug)

    @property
    def is_reading(self) -> bool:
        return self._reading.is_set()

    def start(self):
        self.reader.start()

    def stop(self):
        self.reader.stop()

    def close(self):
        self.stop()
        close = getattr(self.transport, "close", None)
        if close:
            close()

    def issue_start(self, timeout: Optional[float] = None) -> ResponseStatus:
        status = self.correlator.issue(Command.start(), timeout)
        if status is ResponseStatus.OK:
            self._reading.set()
            logger.info("Reading started")
        return status

    def issue_stop(self, timeout: Optional[float] = None) -> ResponseStatus:
        status = self.correlator.issue(Command.stop(), timeout)
        if status is ResponseStatus.OK:
            self._reading.clear()
            logger.info("Reading stopped")
        return status

    def issue_configure(self, rate: int, debug: bool, timeout: Optional[float] = None) -> ResponseStatus:
        status = self.correlator.issue(Command.configure(rate, debug), timeout)
        if status is ResponseStatus.OK:
            # archive key follows the device config only once the device accepted it
            self.frequency = int(rate)
            self.debug = bool(debug)
            self.persistence.set_identity(frequency=self.frequency, debug=self.debug)
            logger.info("Configuration updated: frequency=%d debug=%s", self.frequency, self.debug)
        return status
