import sqlite3
import threading
import time
import logging
from pathlib import Path
from typing import List, Optional

import numpy as np

from sensorbridge.core.telemetry import SensorSample
from sensorbridge.db.database import connect

logger = logging.getLogger("sensorbridge.db")

HALF = np.dtype("<f2")


def encode_half(value: float) -> bytes:
    return np.array(value, dtype=HALF).tobytes()


def decode_half(blob: bytes) -> float:
    return float(np.frombuffer(blob, dtype=HALF)[0])


class Persistence:
    """Sensor archive. Rows are keyed by (port, frequency, debug); reads only
    see rows written under the current key."""

    def __init__(self, db_path: Optional[str] = None):
        self.db_path = db_path
        self.migrations_path = Path(__file__).parent / "migrations"
        self._lock = threading.Lock()
        self.port = ""
        self.frequency = 0
        self.debug = False

    def _connect(self) -> sqlite3.Connection:
        return connect(self.db_path)

    def migrate(self):
        conn = self._connect()
        try:
            self._ensure_schema_migrations(conn)
            applied = self._applied_versions(conn)
            sql_files = sorted(self.migrations_path.glob("*.sql"))
            for f in sql_files:
                version = f.stem
                if version in applied:
                    continue
                self._apply_migration(conn, f)
        finally:
            conn.close()

    def _ensure_schema_migrations(self, conn: sqlite3.Connection):
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS schema_migrations (
                version TEXT PRIMARY KEY,
                name TEXT,
                applied_at_ms INTEGER
            )
            """
        )
        conn.commit()

    def _applied_versions(self, conn: sqlite3.Connection) -> List[str]:
        cur = conn.execute("SELECT version FROM schema_migrations")
        return [r[0] for r in cur.fetchall()]

    def _apply_migration(self, conn: sqlite3.Connection, sql_path: Path):
        sql = sql_path.read_text()
        try:
            conn.executescript(sql)
            ts = int(time.time() * 1000)
            conn.execute(
                "INSERT INTO schema_migrations(version,name,applied_at_ms) VALUES(?,?,?)",
                (sql_path.stem, sql_path.name, ts),
            )
            conn.commit()
            logger.info("Applied migration %s", sql_path.name)
        except Exception:
            conn.rollback()
            raise

    def set_identity(self, port: Optional[str] = None, frequency: Optional[int] = None, debug: Optional[bool] = None):
        with self._lock:
            if port is not None:
                self.port = port
            if frequency is not None:
                self.frequency = int(frequency)
            if debug is not None:
                self.debug = bool(debug)

    def _key(self):
        with self._lock:
            return (self.port, self.frequency, 1 if self.debug else 0)

    def store(self, sample: SensorSample) -> bool:
        port, frequency, debug = self._key()
        conn = self._connect()
        try:
            conn.execute(
                "INSERT INTO sensor_data(port,frequency,debug,pressure,temperature,velocity,timestamp) VALUES(?,?,?,?,?,?,?)",
                (port, frequency, debug, encode_half(sample.pressure), encode_half(sample.temperature),
                 encode_half(sample.velocity), int(sample.timestamp)),
            )
            conn.commit()
            return True
        except sqlite3.Error:
            logger.exception("Failed to store sensor data")
            return False
        finally:
            conn.close()

    def query_last_n(self, n: int) -> List[SensorSample]:
        """Newest first."""
        conn = self._connect()
        try:
            cur = conn.execute(
                "SELECT pressure,temperature,velocity,timestamp FROM sensor_data "
                "WHERE port=? AND frequency=? AND debug=? ORDER BY timestamp DESC, id DESC LIMIT ?",
                self._key() + (int(n),),
            )
            return [self._row_to_sample(r) for r in cur.fetchall() if self._complete(r)]
        finally:
            conn.close()

    def query_range(self, start_ts: int, end_ts: int, limit: Optional[int] = None) -> List[SensorSample]:
        """Oldest first, both bounds inclusive."""
        sql = ("SELECT pressure,temperature,velocity,timestamp FROM sensor_data "
               "WHERE port=? AND frequency=? AND debug=? AND timestamp BETWEEN ? AND ? "
               "ORDER BY timestamp ASC, id ASC")
        params = self._key() + (int(start_ts), int(end_ts))
        if limit is not None:
            sql += " LIMIT ?"
            params += (int(limit),)
        conn = self._connect()
        try:
            cur = conn.execute(sql, params)
            return [self._row_to_sample(r) for r in cur.fetchall() if self._complete(r)]
        finally:
            conn.close()

    def ping(self) -> bool:
        conn = self._connect()
        try:
            conn.execute("SELECT 1")
            cur = conn.execute("SELECT name FROM sqlite_master WHERE type='table' AND name='sensor_data'")
            return cur.fetchone() is not None
        finally:
            conn.close()

    @staticmethod
    def _complete(row) -> bool:
        return row[0] is not None and row[1] is not None and row[2] is not None

    @staticmethod
    def _row_to_sample(row) -> SensorSample:
        return SensorSample(
            pressure=decode_half(row[0]),
            temperature=decode_half(row[1]),
            velocity=decode_half(row[2]),
            timestamp=int(row[3]),
        )
# Sensor archive
