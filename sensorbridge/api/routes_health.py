import sqlite3
import time

from fastapi import APIRouter, Request

router = APIRouter()


@router.get('/health')
def health(request: Request):
    bridge = getattr(request.app.state, 'bridge', None)
    db_ok = False
    if bridge is not None:
        try:
            db_ok = bridge.persistence.ping()
        except sqlite3.Error:
            db_ok = False

    reader = bridge.reader if bridge else None
    return {
        'ts_ms': int(time.time() * 1000),
        'db_ok': db_ok,
        'reader_alive': reader.is_alive() if reader else False,
        'reader_failed': reader.failed if reader else None,
        'command_armed': bridge.correlator.armed if bridge else False,
    }
# /health routes
