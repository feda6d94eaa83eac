import os
import logging
from typing import Optional

import serial

from sensorbridge.core.errors import TransportError

logger = logging.getLogger("sensorbridge.transport")

# Unix98 pty slaves (/dev/pts/N) use character-device majors 136..143
PTY_MAJORS = range(136, 144)


def is_pty(fd: int) -> bool:
    try:
        st = os.fstat(fd)
    except OSError:
        return False
    return os.major(st.st_rdev) in PTY_MAJORS


class SerialTransport:
    """Duplex byte stream over a pyserial port.

    Reads are non-blocking (timeout=0) and return b"" when nothing is
    waiting. Writes are best effort: a short write is logged, not raised.
    """

    def __init__(self, ser, baud_rate: int, is_virtual: Optional[bool] = None, master_fd: Optional[int] = None):
        self.ser = ser
        self.baud_rate = baud_rate
        self.master_fd = master_fd
        if is_virtual is None:
            is_virtual = is_pty(ser.fileno())
        self.is_virtual = is_virtual

    @classmethod
    def open(cls, port: str, baud_rate: int, master_fd: Optional[int] = None) -> "SerialTransport":
        try:
            ser = serial.Serial(port, timeout=0, write_timeout=1)
        except (serial.SerialException, OSError) as e:
            raise TransportError(f"failed to open {port}: {e}")
        t = cls(ser, baud_rate, master_fd=master_fd)
        if not t.is_virtual:
            t._apply_baud_rate()
        return t

    @classmethod
    def open_pty(cls, baud_rate: int) -> "SerialTransport":
        """Create a pseudo-terminal pair and open its slave side."""
        master_fd, slave_fd = os.openpty()
        slave_name = os.ttyname(slave_fd)
        try:
            t = cls.open(slave_name, baud_rate, master_fd=master_fd)
        except TransportError:
            os.close(master_fd)
            raise
        finally:
            os.close(slave_fd)
        t.is_virtual = True
        return t

    @property
    def port_name(self) -> str:
        return self.ser.port

    def _apply_baud_rate(self):
        # pyserial sets non-standard rates through termios2/BOTHER on Linux
        try:
            self.ser.baudrate = self.baud_rate
        except (serial.SerialException, ValueError, OSError) as e:
            raise TransportError(f"failed to set baud rate {self.baud_rate} on {self.port_name}: {e}")

    def set_baud_rate(self, rate: int):
        self.baud_rate = int(rate)
        if self.is_virtual:
            logger.info("Virtual port: local baud rate updated to %d", self.baud_rate)
            return
        self._apply_baud_rate()

    def write(self, data: bytes) -> int:
        if not self.ser or not self.ser.is_open:
            raise TransportError("Serial port not open")
        try:
            written = self.ser.write(data)
            self.ser.flush()
        except (serial.SerialException, OSError) as e:
            raise TransportError(f"Failed to write to serial port: {e}")
        if written is not None and written != len(data):
            logger.warning("Not all bytes were written to serial port (%s of %d)", written, len(data))
        return written if written is not None else len(data)

    def read(self, size: int = 256) -> bytes:
        try:
            return self.ser.read(size)
        except (serial.SerialException, OSError) as e:
            raise TransportError(f"Error reading from serial port: {e}")

    def close(self):
        try:
            if self.ser:
                self.ser.close()
        finally:
            if self.master_fd is not None:
                os.close(self.master_fd)
                self.master_fd = None


def open_transport(port: str, baud_rate: int, default_port: str = "/dev/ttyUSB0", allow_pty: bool = True) -> SerialTransport:
    """Open `port`, else `default_port`, else a fresh pseudo-terminal."""
    candidates = []
    if os.path.exists(port):
        candidates.append(port)
    else:
        logger.warning("Port '%s' does not exist. Trying default port '%s'", port, default_port)
    if default_port and default_port not in candidates:
        candidates.append(default_port)

    for name in candidates:
        try:
            t = SerialTransport.open(name, baud_rate)
        except TransportError as e:
            logger.error("Error opening port '%s': %s", name, e)
            continue
        logger.info("Serial port initialized: %s (%s)", t.port_name, "virtual" if t.is_virtual else "physical")
        return t

    if not allow_pty:
        raise TransportError(f"Failed to open {port} or default port {default_port}")
    t = SerialTransport.open_pty(baud_rate)
    logger.warning("No serial device available; using pseudo-terminal %s", t.port_name)
    return t
# Serial transport
