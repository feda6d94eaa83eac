import tempfile

import pytest

from sensorbridge.core.bridge import DeviceBridge
from sensorbridge.db.persistence import Persistence
from sensorbridge.tests.fakes import FakeTransport


@pytest.fixture
def persistence(monkeypatch):
    tmp = tempfile.NamedTemporaryFile(suffix=".db", delete=False)
    tmp.close()
    monkeypatch.setenv('DB_PATH', tmp.name)
    p = Persistence()
    p.migrate()
    p.set_identity(port=FakeTransport.port_name, frequency=115, debug=False)
    return p


@pytest.fixture
def make_bridge(persistence):
    bridges = []

    def factory(responder=None, timeout_s=2.0):
        transport = FakeTransport(responder)
        b = DeviceBridge(transport, persistence, timeout_s=timeout_s, idle_sleep_s=0.001)
        b.start()
        bridges.append(b)
        return b

    yield factory
    for b in bridges:
        b.close()
