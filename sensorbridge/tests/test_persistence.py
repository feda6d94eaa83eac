import sqlite3

import pytest

from sensorbridge.core.telemetry import SensorSample
from sensorbridge.db.database import get_db_path
from sensorbridge.db.persistence import decode_half, encode_half


def test_migrations_run(persistence):
    conn = sqlite3.connect(get_db_path())
    cur = conn.execute("SELECT name FROM sqlite_master WHERE type='table'")
    names = {r[0] for r in cur.fetchall()}
    conn.close()
    assert 'sensor_data' in names
    assert 'schema_migrations' in names
    # second run is a no-op
    persistence.migrate()
    assert persistence.ping()


def test_half_blob():
    blob = encode_half(12.3)
    assert len(blob) == 2
    assert decode_half(blob) == pytest.approx(12.3, abs=0.01)


def test_store_and_query_last_n(persistence):
    for i in range(5):
        assert persistence.store(SensorSample(float(i), 20.0 + i, -1.5, 1000 + i))
    last = persistence.query_last_n(3)
    assert [s.timestamp for s in last] == [1004, 1003, 1002]
    assert last[0] == SensorSample(4.0, 24.0, -1.5, 1004)


def test_reads_follow_identity(persistence):
    persistence.store(SensorSample(1.0, 1.0, 1.0, 10))
    persistence.set_identity(frequency=50, debug=True)
    assert persistence.query_last_n(10) == []
    persistence.store(SensorSample(2.0, 2.0, 2.0, 11))
    assert [s.pressure for s in persistence.query_last_n(10)] == [2.0]
    persistence.set_identity(frequency=115, debug=False)
    assert [s.pressure for s in persistence.query_last_n(10)] == [1.0]


def test_query_range(persistence):
    for ts in (100, 200, 300, 400):
        persistence.store(SensorSample(ts / 100.0, 0.0, 0.0, ts))
    got = persistence.query_range(200, 300)
    assert [s.timestamp for s in got] == [200, 300]
    assert [s.timestamp for s in persistence.query_range(0, 1000, limit=2)] == [100, 200]
