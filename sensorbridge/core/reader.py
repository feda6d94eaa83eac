import threading
import time
import logging
from typing import Optional

from sensorbridge.core.errors import TransportError
from sensorbridge.core.framing import FrameExtractor

logger = logging.getLogger("sensorbridge.reader")

READ_SIZE = 256


class ReaderLoop:
    """Sole reader of the transport: bytes -> frames -> classifier, in arrival order."""

    def __init__(self, transport, classifier, idle_sleep_s: float = 0.01):
        self.transport = transport
        self.classifier = classifier
        self.idle_sleep_s = idle_sleep_s
        self.extractor = FrameExtractor()
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self.failed = False
        self.error: Optional[BaseException] = None
        self.frames = 0

    def start(self):
        if self._thread and self._thread.is_alive():
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self.run, daemon=True, name="serial-reader")
        self._thread.start()

    def stop(self, timeout: float = 1.0):
        self._stop.set()
        if self._thread:
            self._thread.join(timeout=timeout)

    def is_alive(self) -> bool:
        return bool(self._thread and self._thread.is_alive())

    def run(self):
        logger.info("Reader started on %s", getattr(self.transport, "port_name", "?"))
        while not self._stop.is_set():
            try:
                data = self.transport.read(READ_SIZE)
            except TransportError as e:
                # no reconnect: the bridge is unusable without its port
                logger.exception("Error reading from serial port: %s", e)
                self.failed = True
                self.error = e
                break
            if not data:
                time.sleep(self.idle_sleep_s)
                continue
            self.poll_once(data)
        logger.info("Reader stopped")

    def poll_once(self, data: bytes) -> int:
        count = 0
        for frame in self.extractor.feed(data):
            logger.debug("Processing frame: %s", frame)
            try:
                self.classifier.dispatch(frame)
            except Exception:
                logger.exception("Unhandled error while processing frame %r", frame)
            count += 1
        self.frames += count
        return count
# Serial reader thread
