import logging

logger = logging.getLogger("sensorbridge.classifier")


class FrameClassifier:
    """Routes each frame to the correlator or the telemetry decoder.

    Responses and telemetry share the `$a,b,c` syntax. While a command is
    armed the correlator sees every frame first and claims anything that
    starts with a command prefix, coincidental telemetry included.
    """

    def __init__(self, correlator, decoder):
        self.correlator = correlator
        self.decoder = decoder
        self.malformed = 0

    def dispatch(self, frame: str) -> str:
        payload = frame[1:] if frame.startswith("$") else frame
        if not payload.strip():
            self.malformed += 1
            logger.warning("Dropping empty frame %r", frame)
            return "dropped"
        if self.correlator.offer(frame):
            return "response"
        self.decoder.handle(payload)
        return "telemetry"
