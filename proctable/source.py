"""Platform process-table sources.

Each source runs the native listing command in a child process and hands
back its raw text. Exactly one implementation is chosen per interpreter by
``default_source()``; nothing else in the package branches on the platform.
"""

import asyncio
import logging
import os
import sys
from abc import ABC, abstractmethod

from proctable.errors import SourceInvocationError
from proctable.tokenizer import EOL

logger = logging.getLogger(__name__)

_WMIC_COMMAND = "wmic process get ProcessId,ParentProcessId,CommandLine \n"


async def _run(
    argv: list[str], stdin: bytes | None = None
) -> tuple[str, str]:
    """Spawn a child process and collect its decoded stdout and stderr."""
    try:
        proc = await asyncio.create_subprocess_exec(
            *argv,
            stdin=asyncio.subprocess.PIPE if stdin is not None else None,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as e:
        raise SourceInvocationError(f"Failed to run {argv[0]}: {e}") from e

    logger.debug("Spawned %s (pid %s)", argv, proc.pid)
    try:
        stdout, stderr = await proc.communicate(stdin)
    except asyncio.CancelledError:
        # Don't leave the listing command running after a cancelled poll
        if proc.returncode is None:
            proc.kill()
            await proc.wait()
        raise

    return (
        stdout.decode("utf-8", errors="replace"),
        stderr.decode("utf-8", errors="replace"),
    )


class ProcessTableSource(ABC):
    """Produces the raw process-listing text for one platform."""

    default_args: list[str] = []

    @abstractmethod
    async def list(self, args: list[str]) -> str | None:
        """Return the listing text, or None when the command printed nothing.

        Raises SourceInvocationError when the command fails.
        """

    @abstractmethod
    def column_name(self, keyword: str) -> str:
        """Map a caller keyword onto the header name this platform prints."""


class PsSource(ProcessTableSource):
    # 'l' adds PPID, 'x' includes daemons, 'ww' lifts the width cap on piped output
    default_args = ["lxww"]

    async def list(self, args: list[str]) -> str | None:
        stdout, stderr = await _run(["ps", *args])
        if stderr:
            raise SourceInvocationError(stderr.strip(), stderr=stderr)
        return stdout or None

    def column_name(self, keyword: str) -> str:
        return keyword.upper()


def clean_wmic_output(stdout: str) -> str:
    """Strip the cmd.exe banner before the header and the trailing prompt."""
    lines = EOL.split(stdout)

    begin = 0
    for idx, line in enumerate(lines):
        if line.startswith("CommandLine"):
            begin = idx
            break

    return os.linesep.join(lines[begin:-1])


class WmicSource(ProcessTableSource):
    default_args: list[str] = []

    async def list(self, args: list[str]) -> str | None:
        # wmic writes nothing to a plain pipe, so drive it through cmd
        if args:
            logger.debug("Ignoring listing args on Windows: %s", args)
        stdout, stderr = await _run(["cmd"], stdin=_WMIC_COMMAND.encode())
        if stderr:
            raise SourceInvocationError(stderr.strip(), stderr=stderr)
        return clean_wmic_output(stdout) or None

    def column_name(self, keyword: str) -> str:
        return keyword


def default_source() -> ProcessTableSource:
    if sys.platform == "win32":
        return WmicSource()
    return PsSource()
