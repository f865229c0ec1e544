"""Common exceptions for the timedldap library.

Every error surfaced by the template carries the failing phase and the
original failure's message; the original exception is chained as
``__cause__``.
"""
from __future__ import annotations


class TimedLdapError(RuntimeError):
    phase: str = ""

    def __init__(self, message: str, phase: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        if phase is not None:
            self.phase = phase

    @classmethod
    def wrap(cls, exc: BaseException, phase: str | None = None) -> "TimedLdapError":
        msg = str(exc) or type(exc).__name__
        err = cls(msg, phase=phase)
        err.__cause__ = exc
        return err


class AcquisitionError(TimedLdapError):
    phase = "acquire"


class OperationError(TimedLdapError):
    phase = "search"


class ReleaseError(TimedLdapError):
    """Logged when disposing a context fails. Never raised to callers."""

    phase = "release"
