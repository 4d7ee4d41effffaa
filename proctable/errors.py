"""Exception hierarchy for proctable."""


class ProctableError(Exception):
    """Base for all proctable errors."""


class QueryError(ProctableError, ValueError):
    """A lookup filter could not be compiled."""


class SourceInvocationError(ProctableError):
    """The process-listing command failed or wrote to stderr."""

    def __init__(self, message: str, stderr: str = "") -> None:
        super().__init__(message)
        self.stderr = stderr


class SignalError(ProctableError):
    """The termination signal could not be delivered."""


class KillTimeoutError(ProctableError, TimeoutError):
    """Process death was not confirmed before the timeout elapsed."""
