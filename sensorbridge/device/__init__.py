from .transport import SerialTransport, open_transport
