import logging
import re
import time
from dataclasses import dataclass
from typing import Optional

import numpy as np

from sensorbridge.core.errors import MalformedFrameError

logger = logging.getLogger("sensorbridge.telemetry")

FIELD_COUNT = 3
# plain decimal text as the device prints it; no `_` separators, nan or inf
DECIMAL = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)


@dataclass(frozen=True)
class SensorSample:
    pressure: float
    temperature: float
    velocity: float
    timestamp: int

    def as_dict(self) -> dict:
        return {
            "pressure": self.pressure,
            "temperature": self.temperature,
            "velocity": self.velocity,
            "timestamp": self.timestamp,
        }


def narrow(value: float) -> float:
    """Round-trip a value through IEEE half precision."""
    return float(np.float16(value))


def decode_payload(payload: str, now: Optional[int] = None) -> SensorSample:
    """Parse `<pressure>,<temperature>,<velocity>` (leading `$` already removed).

    Raises MalformedFrameError on a wrong field count, a non-numeric field,
    or a value that does not fit in float16.
    """
    fields = payload.split(",")
    if len(fields) != FIELD_COUNT:
        raise MalformedFrameError(f"expected {FIELD_COUNT} fields, got {len(fields)}: {payload!r}")
    values = []
    for f in fields:
        if not DECIMAL.fullmatch(f.strip()):
            raise MalformedFrameError(f"non-numeric field {f!r} in {payload!r}")
        v = float(f)
        with np.errstate(over="ignore"):
            h = narrow(v)
        if not np.isfinite(h):
            raise MalformedFrameError(f"value {f!r} out of float16 range")
        values.append(h)
    ts = int(time.time()) if now is None else int(now)
    return SensorSample(pressure=values[0], temperature=values[1], velocity=values[2], timestamp=ts)


class TelemetryDecoder:
    def __init__(self, store):
        # store: callable(SensorSample) -> bool
        self.store = store
        self.decoded = 0
        self.dropped = 0

    def handle(self, payload: str) -> Optional[SensorSample]:
        try:
            sample = decode_payload(payload)
        except MalformedFrameError as e:
            self.dropped += 1
            logger.warning("Invalid message format: %s", e)
            return None
        self.decoded += 1
        try:
            ok = self.store(sample)
        except Exception:
            logger.exception("Failed to store sample %s", sample)
            return None
        if ok is False:
            logger.error("Failed to store sample %s", sample)
            return None
        logger.debug("Data stored: P=%s, T=%s, V=%s", sample.pressure, sample.temperature, sample.velocity)
        return sample
# Telemetry decoding
