"""Cross-platform process lookup and termination."""

from proctable.errors import (
    KillTimeoutError,
    ProctableError,
    QueryError,
    SignalError,
    SourceInvocationError,
)
from proctable.query import lookup
from proctable.source import PsSource, WmicSource, default_source
from proctable.terminate import kill, send_signal
from proctable.types import ProcessRecord, Query, SignalSpec

__all__ = [
    "KillTimeoutError",
    "ProcessRecord",
    "ProctableError",
    "PsSource",
    "Query",
    "QueryError",
    "SignalError",
    "SignalSpec",
    "SourceInvocationError",
    "WmicSource",
    "default_source",
    "kill",
    "lookup",
    "send_signal",
]
