"""Send termination signals and confirm the target process is gone."""

import asyncio
import logging
import os
import signal as _signal

from proctable.errors import KillTimeoutError, SignalError
from proctable.query import lookup
from proctable.source import ProcessTableSource, default_source
from proctable.types import DEFAULT_SIGNAL, KillState, Query, SignalSpec

logger = logging.getLogger(__name__)

# Consecutive empty listings needed before a kill counts as confirmed
REQUIRED_CONFIRMATIONS = 5


def resolve_signal(sig: str | int) -> int:
    """Turn 'SIGKILL', 'kill', '9' or 9 into a signal number."""
    if isinstance(sig, int):
        return sig
    name = sig.strip().upper()
    if name.isdigit():
        return int(name)
    if not name.startswith("SIG"):
        name = f"SIG{name}"
    try:
        return _signal.Signals[name].value
    except KeyError:
        raise ValueError(f"Unknown signal: {sig}") from None


def _signal_spec(
    sig: SignalSpec | str | int | None, timeout: float | None
) -> SignalSpec:
    if isinstance(sig, SignalSpec):
        spec = sig
    else:
        spec = SignalSpec(signal=DEFAULT_SIGNAL if sig is None else sig)
    if timeout is not None:
        spec = SignalSpec(signal=spec.signal, timeout=timeout)
    return spec


def _deliver(pid: str | int, sig: str | int) -> None:
    try:
        target = int(pid)
        # 0 and negative pids address process groups, not a single process
        if target <= 0:
            raise ValueError(f"pid must be positive, got {target}")
        os.kill(target, resolve_signal(sig))
    except (OSError, ValueError, OverflowError) as e:
        raise SignalError(f"Failed to signal process {pid}: {e}") from e


def send_signal(pid: str | int, signal: str | int | None = None) -> bool:
    """Fire-and-forget: signal the process without waiting for it to exit.

    Returns False instead of raising when the signal can't be delivered.
    """
    try:
        _deliver(pid, DEFAULT_SIGNAL if signal is None else signal)
        return True
    except SignalError as e:
        logger.debug("Ignoring signal failure: %s", e)
        return False


class Terminator:
    """Kill-and-confirm state machine for a single pid.

    After the signal is sent the process table is polled, one listing at a
    time, until the pid has been absent from REQUIRED_CONFIRMATIONS
    consecutive listings or the timeout elapses. A listing that still shows
    the pid lowers the confidence by one rather than resetting it.
    """

    def __init__(
        self,
        pid: str | int,
        spec: SignalSpec,
        source: ProcessTableSource,
        poll_interval: float = 0.0,
    ) -> None:
        self.pid = str(pid)
        self.spec = spec
        self.source = source
        self.poll_interval = poll_interval
        self.state = KillState.SIGNALING
        self.confidence = 0
        self.polls = 0

    def _transition(self, state: KillState) -> None:
        logger.debug("kill %s: %s -> %s", self.pid, self.state.value, state.value)
        self.state = state

    async def _confirm(self) -> None:
        while True:
            processes = await lookup(Query(pid=self.pid), source=self.source)
            self.polls += 1

            if processes:
                self.confidence = max(0, self.confidence - 1)
            else:
                self.confidence += 1
                if self.confidence >= REQUIRED_CONFIRMATIONS:
                    return

            # Zero still yields, so the timeout can fire between polls
            await asyncio.sleep(self.poll_interval)

    async def run(self) -> None:
        try:
            _deliver(self.pid, self.spec.signal)
        except SignalError:
            self._transition(KillState.FAILED)
            raise

        self._transition(KillState.CONFIRMING)
        try:
            await asyncio.wait_for(self._confirm(), timeout=self.spec.timeout)
        except asyncio.TimeoutError:
            self._transition(KillState.TIMED_OUT)
            raise KillTimeoutError(
                f"Kill process {self.pid} timed out after {self.spec.timeout}s"
            ) from None
        except Exception:
            self._transition(KillState.FAILED)
            raise

        self._transition(KillState.CONFIRMED)


async def kill(
    pid: str | int,
    signal: SignalSpec | str | int | None = None,
    timeout: float | None = None,
    *,
    source: ProcessTableSource | None = None,
    poll_interval: float = 0.0,
) -> None:
    """Signal a process and wait until the process table confirms it is gone.

    Raises SignalError if the signal can't be sent, SourceInvocationError if a
    confirmation listing fails and KillTimeoutError if the process is still
    not confirmed dead after the timeout (30s unless overridden).
    """
    spec = _signal_spec(signal, timeout)
    terminator = Terminator(pid, spec, source or default_source(), poll_interval)
    await terminator.run()
