from dataclasses import dataclass
from enum import Enum
from typing import Optional


class CommandKind(Enum):
    START = "$0"
    STOP = "$1"
    CONFIGURE = "$2"

    @property
    def prefix(self) -> str:
        return self.value


COMMAND_PREFIXES = frozenset(k.prefix for k in CommandKind)


class ResponseStatus(Enum):
    OK = "ok"
    INVALID_COMMAND = "invalid command"
    UNDEFINED_STATUS = "undefined status"
    MISMATCH = "mismatch"
    TIMEOUT = "timeout"


@dataclass(frozen=True)
class Command:
    kind: CommandKind
    rate: Optional[int] = None
    debug: Optional[bool] = None

    @classmethod
    def start(cls) -> "Command":
        return cls(CommandKind.START)

    @classmethod
    def stop(cls) -> "Command":
        return cls(CommandKind.STOP)

    @classmethod
    def configure(cls, rate: int, debug: bool) -> "Command":
        return cls(CommandKind.CONFIGURE, int(rate), bool(debug))

    @property
    def prefix(self) -> str:
        return self.kind.prefix

    @property
    def wire_text(self) -> str:
        # $2,<rate>,<debug> for configure, bare prefix otherwise
        if self.kind is CommandKind.CONFIGURE:
            return f"{self.prefix},{self.rate},{1 if self.debug else 0}"
        return self.prefix

    def encode(self) -> bytes:
        return (self.wire_text + "\n").encode("ascii")


def frame_prefix(frame: str) -> str:
    return frame.split(",", 1)[0].strip()


def normalize_status(text: str) -> str:
    return text.strip().lower()


def classify_status(text: str) -> ResponseStatus:
    status = normalize_status(text)
    if status == "ok":
        return ResponseStatus.OK
    if status == "invalid command":
        return ResponseStatus.INVALID_COMMAND
    return ResponseStatus.UNDEFINED_STATUS
# Wire protocol: commands and response statuses
