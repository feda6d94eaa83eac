import queue
import threading
import time

from sensorbridge.core.errors import TransportError


class FakeTransport:
    """In-memory stand-in for the serial port.

    `responder(bytes) -> bytes | None` plays the device: whatever it
    returns is queued for the reader, as if the device answered.
    """

    port_name = "/dev/fake0"
    is_virtual = True

    def __init__(self, responder=None):
        self.responder = responder
        self.written = []
        self._rx = queue.Queue()
        self.fail_reads = False
        self.fail_writes = False
        self.closed = False

    def feed(self, data: bytes):
        self._rx.put(data)

    def write(self, data: bytes) -> int:
        if self.fail_writes:
            raise TransportError("Failed to write to serial port: device gone")
        self.written.append(data)
        if self.responder:
            reply = self.responder(data)
            if reply:
                self.feed(reply)
        return len(data)

    def read(self, size: int = 256) -> bytes:
        if self.fail_reads:
            raise TransportError("Error reading from serial port: device gone")
        try:
            return self._rx.get_nowait()
        except queue.Empty:
            return b""

    def close(self):
        self.closed = True


def device(replies):
    """Responder answering each command line from a {command: reply} map."""
    def respond(data: bytes):
        reply = replies.get(data.decode("ascii").strip())
        return reply.encode("ascii") if isinstance(reply, str) else reply
    return respond


def replying(correlator, reply, delay=0.02):
    """Responder that hands `reply` straight to correlator.offer() from another thread.

    `reply` may be a callable mapping the written command text to a frame.
    """
    def respond(data: bytes):
        frame = reply(data.decode("ascii").strip()) if callable(reply) else reply

        def deliver():
            time.sleep(delay)
            correlator.offer(frame)
        threading.Thread(target=deliver, daemon=True).start()
    return respond


def wait_until(pred, timeout=2.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if pred():
            return True
        time.sleep(0.01)
    return pred()
