"""Protocol engine: framing, classification, correlation, telemetry"""
from .bridge import DeviceBridge
from .correlator import CommandCorrelator
from .framing import FrameExtractor
from .protocol import Command, CommandKind, ResponseStatus
from .telemetry import SensorSample, TelemetryDecoder, decode_payload
