import os
import sys
import time

import pytest

from sensorbridge.core.errors import TransportError
from sensorbridge.device.transport import SerialTransport, open_transport

pytestmark = pytest.mark.skipif(not sys.platform.startswith("linux"), reason="pty device numbers are Linux specific")


def _read_line(t, timeout=2.0):
    data = b""
    deadline = time.monotonic() + timeout
    while b"\n" not in data and time.monotonic() < deadline:
        data += t.read(256)
        time.sleep(0.01)
    return data


def test_pty_slave_is_virtual():
    master, slave = os.openpty()
    t = SerialTransport.open(os.ttyname(slave), 115000)
    try:
        assert t.is_virtual
        os.write(master, b"$0,ok\n")
        assert _read_line(t) == b"$0,ok\n"
        assert t.write(b"$1\n") == 3
        assert os.read(master, 16) == b"$1\n"
        # no termios2 on a pty: only the local value changes
        t.set_baud_rate(230400)
        assert t.baud_rate == 230400
    finally:
        t.close()
        os.close(slave)
        os.close(master)


def test_open_transport_falls_back_to_pty():
    t = open_transport("/nonexistent/ttyS11", 115000, default_port="/nonexistent/ttyUSB0")
    try:
        assert t.is_virtual
        assert t.port_name.startswith("/dev/pts/")
        os.write(t.master_fd, b"$1.0,2.0,3.0\n")
        assert _read_line(t) == b"$1.0,2.0,3.0\n"
    finally:
        t.close()
    assert t.master_fd is None


def test_open_transport_without_fallback():
    with pytest.raises(TransportError):
        open_transport("/nonexistent/ttyS11", 115000, default_port="/nonexistent/ttyUSB0", allow_pty=False)
