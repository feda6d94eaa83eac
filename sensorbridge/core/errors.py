class BridgeError(RuntimeError):
    pass


class TransportError(BridgeError):
    """Serial port could not be opened, read or written."""


class MalformedFrameError(BridgeError):
    """Telemetry frame with the wrong field count or a non-numeric field."""


class CommandBusyError(BridgeError):
    """Another command exchange kept the pending slot past the caller's timeout."""
# Bridge exceptions
