from typing import List

START_MARKER = b"$"
TERMINATOR = b"\n"


class FrameExtractor:
    """Splits a serial byte stream into `$`-anchored, newline-terminated frames.

    Owned by the reader thread; not thread-safe. Bytes before a `$` are
    noise and dropped. A started frame without its newline stays buffered
    until the next feed().
    """

    def __init__(self):
        self._buf = bytearray()

    def feed(self, data: bytes) -> List[str]:
        self._buf.extend(data)
        frames: List[str] = []
        while True:
            start = self._buf.find(START_MARKER)
            if start < 0:
                self._buf.clear()
                break
            if start > 0:
                del self._buf[:start]
            end = self._buf.find(TERMINATOR)
            if end < 0:
                break
            raw = bytes(self._buf[:end])
            del self._buf[:end + 1]
            frames.append(raw.rstrip(b"\r").decode("ascii", errors="replace"))
        return frames

    @property
    def pending(self) -> bytes:
        return bytes(self._buf)
# Frame extraction
