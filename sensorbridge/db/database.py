import os
import sqlite3
from pathlib import Path
from typing import Optional

from sensorbridge import config


def _ensure_dir(path: Path):
    path.parent.mkdir(parents=True, exist_ok=True)


def get_db_path() -> str:
    return os.environ.get("DB_PATH") or config.DB_PATH


def connect(db_path: Optional[str] = None) -> sqlite3.Connection:
    path = Path(db_path or get_db_path())
    _ensure_dir(path)
    conn = sqlite3.connect(str(path), timeout=30)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL;")
    return conn
# SQLite connection helpers
