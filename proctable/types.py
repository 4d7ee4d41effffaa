"""Type definitions for proctable."""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

DEFAULT_SIGNAL = "SIGTERM"
DEFAULT_TIMEOUT = 30.0

_FIXED_FIELDS = ("pid", "ppid", "command", "arguments")


@dataclass(frozen=True)
class ProcessRecord:
    pid: str
    command: str
    arguments: list[str] = field(default_factory=list)
    ppid: str | None = None
    extras: dict[str, str] = field(default_factory=dict)

    def get(self, name: str, default: Any = None) -> Any:
        """Look up a field by name. Fixed fields shadow extra columns."""
        if name in _FIXED_FIELDS:
            value = getattr(self, name)
            return default if value is None else value
        return self.extras.get(name, default)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = dict(self.extras)
        data["pid"] = self.pid
        data["command"] = self.command
        data["arguments"] = list(self.arguments)
        if self.ppid is not None:
            data["ppid"] = self.ppid
        else:
            data.pop("ppid", None)
        return data


Pattern = str | int | re.Pattern[str]


@dataclass
class Query:
    pid: str | int | list[str | int] | None = None
    ppid: Pattern | None = None
    command: Pattern | None = None
    arguments: Pattern | None = None
    psargs: str | list[str] | None = None
    keywords: str | list[str] | None = None


@dataclass(frozen=True)
class SignalSpec:
    signal: str | int = DEFAULT_SIGNAL
    timeout: float = DEFAULT_TIMEOUT


class KillState(str, Enum):
    SIGNALING = "signaling"
    CONFIRMING = "confirming"
    CONFIRMED = "confirmed"
    FAILED = "failed"
    TIMED_OUT = "timed_out"
