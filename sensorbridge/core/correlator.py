import threading
import time
import logging
from typing import Optional

from sensorbridge.core.errors import CommandBusyError
from sensorbridge.core.protocol import (
    COMMAND_PREFIXES,
    Command,
    CommandKind,
    ResponseStatus,
    classify_status,
    frame_prefix,
)

logger = logging.getLogger("sensorbridge.correlator")

DEFAULT_TIMEOUT_S = 10.0


class CommandCorrelator:
    """Single-slot request/response matcher shared by HTTP handlers and the reader.

    issue() is called from handler threads: it arms the slot, writes the
    command and blocks until offer() (reader thread) resolves it or the
    timeout expires. Whole exchanges are serialized by `_issue_lock`, so a
    second caller waits for the first instead of overwriting its slot.
    `_cond` guards the slot itself and is released while waiting.
    """

    def __init__(self, transport, timeout_s: float = DEFAULT_TIMEOUT_S):
        self.transport = transport
        self.timeout_s = timeout_s
        self._issue_lock = threading.Lock()
        self._cond = threading.Condition(threading.Lock())
        self._pending: Optional[Command] = None
        self._received = False
        self._status: Optional[ResponseStatus] = None
        self._raw_response: Optional[str] = None

    @property
    def armed(self) -> bool:
        with self._cond:
            return self._pending is not None

    @property
    def last_response(self) -> Optional[str]:
        return self._raw_response

    def issue(self, command: Command, timeout: Optional[float] = None) -> ResponseStatus:
        timeout = self.timeout_s if timeout is None else timeout
        # one deadline covers both waiting for the slot and waiting for the answer
        deadline = time.monotonic() + timeout
        if not self._issue_lock.acquire(timeout=timeout):
            raise CommandBusyError(f"command {command.wire_text!r} not sent: another command is in flight")
        try:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                raise CommandBusyError(f"command {command.wire_text!r} not sent: slot freed too late")
            return self._exchange(command, remaining)
        finally:
            self._issue_lock.release()

    def _exchange(self, command: Command, timeout: float) -> ResponseStatus:
        with self._cond:
            self._pending = command
            self._received = False
            self._status = None
            self._raw_response = None
            logger.debug("Sending command %r", command.wire_text)
            try:
                self.transport.write(command.encode())
            except Exception:
                self._pending = None
                raise
            got = self._cond.wait_for(lambda: self._received, timeout=timeout)
            if not got:
                # slot stays armed; a late answer is consumed and ignored by offer()
                logger.warning("Timeout - no response from device for %r", command.wire_text)
                return ResponseStatus.TIMEOUT
            status = self._status
            self._pending = None
            return status

    def offer(self, frame: str) -> bool:
        """Try to consume `frame` as the answer to the pending command.

        Returns False when nothing is armed or the frame does not start with
        a command prefix, leaving it to the telemetry path.
        """
        received = frame_prefix(frame)
        with self._cond:
            pending = self._pending
            if pending is None or received not in COMMAND_PREFIXES:
                return False
            status = self._match(pending, frame, received)
            self._raw_response = frame
            self._status = status
            self._received = True
            self._pending = None
            self._cond.notify()
        if status is ResponseStatus.MISMATCH:
            logger.warning("Response %r does not match pending command %r", frame, pending.wire_text)
        else:
            logger.info("Command %r resolved: %s", pending.wire_text, status.name)
        return True

    @staticmethod
    def _match(pending: Command, frame: str, received: str) -> ResponseStatus:
        if received != pending.prefix:
            return ResponseStatus.MISMATCH
        if pending.kind is CommandKind.CONFIGURE:
            # $2,<rate>,<debug>,<status>: the echoed parameters precede the last comma
            echo, sep, status = frame.rpartition(",")
            if not sep or echo.replace(" ", "") != pending.wire_text:
                return ResponseStatus.MISMATCH
            return classify_status(status)
        _, _, status = frame.partition(",")
        return classify_status(status)
# Command/response correlation
