import time

import pytest

from sensorbridge.core.errors import MalformedFrameError
from sensorbridge.core.telemetry import TelemetryDecoder, decode_payload, narrow


def test_decode_three_fields():
    before = int(time.time())
    s = decode_payload("12.3,45.6,78.9")
    after = int(time.time())
    # float16 keeps ~3 significant digits
    assert s.pressure == pytest.approx(12.3, abs=0.05)
    assert s.temperature == pytest.approx(45.6, abs=0.05)
    assert s.velocity == pytest.approx(78.9, abs=0.05)
    assert before <= s.timestamp <= after


def test_values_are_half_precision():
    s = decode_payload("12.3,-0.1,65504", now=42)
    assert s.pressure == narrow(12.3)
    assert s.pressure != 12.3
    assert s.velocity == 65504.0
    assert s.timestamp == 42


@pytest.mark.parametrize("payload", [
    "1.0,2.0", "1.0,2.0,3.0,4.0", "1.0,abc,3.0", "", "1.0,,3.0", "1e6,0,0", "nan,0,0",
    "1_000,0,0", "inf,0,0", "0,-infinity,0", "1.0,\u0661,3.0",
])
def test_malformed_payloads(payload):
    with pytest.raises(MalformedFrameError):
        decode_payload(payload)


def test_decoder_drops_malformed_and_keeps_going():
    stored = []
    dec = TelemetryDecoder(lambda s: stored.append(s) or True)
    assert dec.handle("1,2") is None
    assert dec.handle("1.5,2.5,3.5") is not None
    assert dec.dropped == 1
    assert dec.decoded == 1
    assert len(stored) == 1


def test_decoder_survives_store_failure():
    def failing_store(sample):
        raise RuntimeError("disk full")

    dec = TelemetryDecoder(failing_store)
    assert dec.handle("1.5,2.5,3.5") is None
    dec.store = lambda s: False
    assert dec.handle("1.5,2.5,3.5") is None
    assert dec.decoded == 2


def test_accepts_signs_exponents_and_padding():
    s = decode_payload(" -1.5,+2,.25e1 ", now=0)
    assert (s.pressure, s.temperature, s.velocity) == (-1.5, 2.0, 2.5)
