import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from sensorbridge.api.deps import get_bridge
from sensorbridge.core.bridge import DeviceBridge

logger = logging.getLogger("sensorbridge.api")

router = APIRouter()

MEAN_WINDOW = 10


def _parse_positive(name: str, raw: Optional[str]) -> int:
    if raw is None:
        raise HTTPException(status_code=400, detail=f"Missing '{name}' parameter")
    try:
        value = int(raw)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid '{name}' parameter: {raw!r}")
    if value <= 0:
        raise HTTPException(status_code=400, detail=f"Invalid '{name}' parameter: must be positive")
    return value


@router.get("/messages")
def messages(limit: Optional[str] = None, bridge: DeviceBridge = Depends(get_bridge)):
    n = _parse_positive("limit", limit)
    samples = bridge.persistence.query_last_n(n)
    logger.info("GET /messages: Returned %d message(s)", len(samples))
    return [s.as_dict() for s in samples]


@router.get("/messages/range")
def messages_range(start: int, end: int, limit: Optional[str] = None, bridge: DeviceBridge = Depends(get_bridge)):
    if end < start:
        raise HTTPException(status_code=400, detail="'end' must not be before 'start'")
    n = _parse_positive("limit", limit) if limit is not None else None
    samples = bridge.persistence.query_range(start, end, n)
    return [s.as_dict() for s in samples]


@router.get("/device")
def device(bridge: DeviceBridge = Depends(get_bridge)):
    last = bridge.persistence.query_last_n(MEAN_WINDOW)
    empty = {"pressure": None, "temperature": None, "velocity": None}
    latest = dict(empty)
    mean = dict(empty)
    if last:
        head = last[0]
        latest = {"pressure": head.pressure, "temperature": head.temperature, "velocity": head.velocity}
    if len(last) >= MEAN_WINDOW:
        mean = {
            "pressure": sum(s.pressure for s in last) / len(last),
            "temperature": sum(s.temperature for s in last) / len(last),
            "velocity": sum(s.velocity for s in last) / len(last),
        }
    transport = bridge.transport
    return {
        "curr_config": {"frequency": bridge.frequency, "debug": bridge.debug},
        "port": getattr(transport, "port_name", None),
        "virtual": getattr(transport, "is_virtual", None),
        "reading": bridge.is_reading,
        "latest": latest,
        "mean_last_10": mean,
    }
# /messages, /device routes
